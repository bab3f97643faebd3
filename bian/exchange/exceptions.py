"""
Exchange-related exception classes.

Every failure of a REST call or a stream read is raised to the immediate
caller as one of these types. Nothing here is retried automatically.
"""

from typing import Optional

import msgspec


class ApiError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class _BodyError(ApiError):
    """An HTTP failure that keeps the raw response text."""

    label = "error"

    def __init__(self, body: str = "", status_code: Optional[int] = None):
        self.body = body
        super().__init__(f"{self.label} {body}".rstrip(), status_code)


class ClientSideError(_BodyError):
    """4xx: request malformed or rejected by business rules."""

    label = "4xx client side error"

    def __init__(self, body: str = "", status_code: Optional[int] = None):
        super().__init__(body, status_code)
        self.code: Optional[int] = None
        self.msg: Optional[str] = None

        # Binance answers most 4xx with {"code": -1100, "msg": "..."}
        try:
            payload = msgspec.json.decode(body) if body else None
        except msgspec.DecodeError:
            payload = None
        if isinstance(payload, dict):
            code = payload.get("code")
            self.code = code if isinstance(code, int) else None
            msg = payload.get("msg")
            self.msg = msg if isinstance(msg, str) else None


class ServerSideError(_BodyError):
    """5xx: failure on the exchange side."""

    label = "server side error"


class Unknown(_BodyError):
    """Any status not otherwise classified (including 3xx)."""

    label = "unknown"


class WafLimit(ApiError):
    """403: request blocked by the web application firewall."""

    def __init__(self):
        super().__init__("403 hit web application firewall(waf)", 403)


class RateLimitError(ApiError):
    """Base for rate-limit signals (429 warning and 418 ban)."""
    pass


class FreqWarning(RateLimitError):
    """429: request rate limit exceeded, back off before the ban."""

    def __init__(self):
        super().__init__("429 frequency warning", 429)


class Banned(RateLimitError):
    """418: IP auto-banned after ignoring 429 responses."""

    def __init__(self):
        super().__init__("418 banned by api", 418)


class RequestError(ApiError):
    """Transport failure: DNS, TLS, timeout, connection refused."""

    def __init__(self, message: str):
        super().__init__(f"request error {message}")


class DecodeError(ApiError):
    """Response body did not match the expected schema."""

    def __init__(self, message: str):
        super().__init__(f"decode response body error {message}")


class InvalidUrl(ApiError):
    """Configured base URL or resolved path is not a valid URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"invalid url {url}")


class WsConnectError(ApiError):
    """WebSocket handshake failed."""

    def __init__(self, message: str):
        super().__init__(f"websocket connect error {message}")


class WsClientError(ApiError):
    """WebSocket failure after the handshake (peer close, protocol error)."""

    def __init__(self, message: str):
        super().__init__(f"websocket client error {message}")
