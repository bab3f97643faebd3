"""
Declarative REST route builder.

Each endpoint on a client is one class attribute::

    class UFuturesHttpClient(BaseHttpClient):
        ping = api(HttpMethod.GET, "fapi/v1/ping", EmptyResponse)
        account = api(HttpMethod.GET, "fapi/v2/account", FuturesAccount, signed=True)

The generated coroutine method takes an optional parameter value and
hands a ``RequestSpec`` to the client's executor; the route itself carries
no logic.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .enums import HttpMethod
from .http_executor import RequestSpec
from .params import PTimestamp


@dataclass(frozen=True)
class Route:
    verb: HttpMethod
    path: str
    response_type: Any
    signed: bool = False


def api(verb: HttpMethod, path: str, response_type: Any, signed: bool = False):
    """
    Build an async client method for one endpoint.

    Args:
        verb: HTTP method
        path: Path relative to the client's base URL (e.g. "fapi/v1/depth")
        response_type: Type the success body decodes into
        signed: Whether the query must carry timestamp and signature

    Returns:
        Coroutine function ``(self, params=None) -> response_type``. Signed
        routes called without parameters send a fresh ``PTimestamp``.
    """
    route = Route(verb, path, response_type, signed)

    async def call(self, params: Optional[Any] = None):
        if params is None and route.signed:
            params = PTimestamp.now(self.recv_window)
        spec = RequestSpec(route.verb, route.path, params, route.signed)
        return await self.executor.execute(spec, route.response_type)

    call.route = route
    call.__doc__ = f"{verb.value} /{path}" + (" (signed)" if signed else "")
    return call
