"""
Single choke point for REST calls.

Builds the URL (base + path + canonical or signed query), sends it once with
the fixed headers, classifies the status and decodes the body.
"""

from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

import httpx

from .encoder import canonical_query
from .enums import HttpMethod
from .exceptions import ApiError, InvalidUrl, RateLimitError, RequestError
from .response_classifier import check_response, decode_body
from .signer import RequestSigner
from ..utils.logger import EventType, get_logger


logger = get_logger(__name__)

T = TypeVar("T")

API_KEY_HEADER = "X-MBX-APIKEY"
DEFAULT_TIMEOUT = 10.0  # seconds


@dataclass(frozen=True)
class RequestSpec:
    """One REST call: verb, relative path, parameter value, signing flag."""
    verb: HttpMethod
    path: str
    params: Optional[Any] = None
    signed: bool = False


def parse_base_url(base_url: str) -> httpx.URL:
    """
    Validate a REST base URL.

    The result always ends with ``/`` so relative paths are joined below
    any prefix the base URL carries.

    Raises:
        InvalidUrl: If the URL is not an absolute http(s) URL
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidUrl(base_url) from e

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidUrl(base_url)

    if not url.path.endswith("/"):
        url = url.copy_with(path=url.path + "/")
    return url


class HttpRequestExecutor:
    """
    Issues REST requests for one client.

    The executor holds only immutable configuration; each call opens its own
    ``httpx.AsyncClient``, so any number of calls may run concurrently.
    Redirects are never followed and nothing is retried.
    """

    def __init__(
        self,
        api_key: str,
        signer: RequestSigner,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize executor.

        Args:
            api_key: Value of the API key header
            signer: Signer holding the secret key
            base_url: REST base URL (e.g. "https://fapi.binance.com")
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)

        Raises:
            InvalidUrl: If base_url is not a valid absolute URL
        """
        self._api_key = api_key
        self._signer = signer
        self._base_url = parse_base_url(base_url)
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return str(self._base_url)

    @property
    def headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self._api_key,
        }

    def build_url(self, spec: RequestSpec) -> str:
        """
        Resolve the absolute request URL including the query string.

        Raises:
            InvalidUrl: If the path cannot be joined onto the base URL
        """
        try:
            url = str(self._base_url.join(spec.path.lstrip("/")))
        except httpx.InvalidURL as e:
            raise InvalidUrl(f"{self._base_url}{spec.path}") from e

        if spec.signed:
            query = self._signer.signed_query(spec.params)
        else:
            query = canonical_query(spec.params)

        return f"{url}?{query}" if query else url

    async def execute(self, spec: RequestSpec, response_type: Type[T]) -> T:
        """
        Send one request and decode the response.

        Args:
            spec: Request description
            response_type: Type the success body is decoded into

        Returns:
            Decoded response

        Raises:
            ApiError: Classified status failure or DecodeError
            RequestError: Transport failure
            InvalidUrl: Unusable URL
        """
        url = self.build_url(spec)

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout,
                follow_redirects=False
            ) as client:
                response = await client.request(spec.verb.value, url, headers=self.headers)
        except httpx.InvalidURL as e:
            raise InvalidUrl(url) from e
        except httpx.RequestError as e:
            logger.warning(
                "http_transport_error",
                verb=spec.verb.value,
                path=spec.path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise RequestError(str(e) or type(e).__name__) from e

        logger.debug(
            "http_response_received",
            verb=spec.verb.value,
            path=spec.path,
            status=response.status_code
        )

        try:
            check_response(response.status_code, response.text)
        except ApiError as e:
            logger.warning(
                "http_request_failed",
                event_type=EventType.RATE_LIMIT_WARNING if isinstance(e, RateLimitError) else EventType.API_ERROR,
                verb=spec.verb.value,
                path=spec.path,
                status=response.status_code,
                error=str(e)
            )
            raise

        return decode_body(response.content, response_type)
