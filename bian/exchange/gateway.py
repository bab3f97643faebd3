"""
Base REST and stream clients shared by every market segment.

Segment clients (spot, USD-M, COIN-M futures) subclass these and only add
their route tables and stream builders.
"""

from typing import List, Optional, Type, TypeVar

import httpx

from .exchange_config import Credentials, Endpoint, MarketSegment
from .http_executor import DEFAULT_TIMEOUT, HttpRequestExecutor
from .params import PTimestamp
from .signer import RequestSigner
from .websocket_channel import Dialer, StreamMode, WebSocketChannel
from .websocket_transport import dial
from ..utils.logger import get_logger


logger = get_logger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound="BaseHttpClient")
S = TypeVar("S", bound="BaseStreamClient")


# ============================================================================
# TOPICS
# ============================================================================

def build_topic(symbol: str, channel: str) -> str:
    """
    Stream name for a symbol and channel.

    ``("btcusdt", "aggTrade")`` -> ``"btcusdt@aggTrade"``; an empty symbol
    gives the bare channel (``"!miniTicker@arr"``). Symbols are lowercased
    because stream names are case sensitive.
    """
    if not symbol:
        return channel
    return f"{symbol.lower()}@{channel}"


def single_stream_url(base_url: str, topic: str) -> str:
    """``<base>/ws/<topic>``"""
    return f"{base_url.rstrip('/')}/ws/{topic}"


def combined_stream_url(base_url: str, topics: List[str]) -> str:
    """``<base>/stream?streams=<t1>/<t2>/...``"""
    return f"{base_url.rstrip('/')}/stream?streams={'/'.join(topics)}"


# ============================================================================
# REST
# ============================================================================

class BaseHttpClient:
    """
    REST client for one market segment.

    Routes are declared on subclasses with ``api(...)``. The client holds
    only immutable configuration, so its coroutines can be awaited
    concurrently from any number of tasks.
    """

    SEGMENT: MarketSegment

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        recv_window: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize client.

        Args:
            api_key: Binance API key
            secret_key: Binance secret key (used only for signing)
            base_url: REST base URL
            timeout: Per-request timeout in seconds
            recv_window: Receive window (ms) for signed calls made without params
            transport: Optional httpx transport

        Raises:
            InvalidUrl: If base_url is not a valid URL
        """
        self.recv_window = recv_window
        self.executor = HttpRequestExecutor(
            api_key,
            RequestSigner(secret_key),
            base_url,
            timeout=timeout,
            transport=transport
        )

        logger.info(
            "http_client_initialized",
            client=type(self).__name__,
            base_url=self.executor.base_url
        )

    @property
    def base_url(self) -> str:
        return self.executor.base_url

    @classmethod
    def default_endpoint(cls: Type[C], api_key: str, secret_key: str, **kwargs) -> C:
        """Client for the production endpoint of this segment."""
        endpoint = Endpoint.for_segment(cls.SEGMENT)
        return cls(api_key, secret_key, endpoint.rest_url, **kwargs)

    @classmethod
    def testnet(cls: Type[C], api_key: str, secret_key: str, **kwargs) -> C:
        """Client for the testnet endpoint of this segment."""
        endpoint = Endpoint.for_segment(cls.SEGMENT, testnet=True)
        return cls(api_key, secret_key, endpoint.rest_url, **kwargs)

    @classmethod
    def from_credentials(
        cls: Type[C],
        credentials: Credentials,
        testnet: bool = False,
        **kwargs
    ) -> C:
        endpoint = Endpoint.for_segment(cls.SEGMENT, testnet=testnet)
        return cls(credentials.api_key, credentials.secret_key, endpoint.rest_url, **kwargs)

    def listen_key_params(self, listen_key: str):
        """Parameters for keepalive/close of ``listen_key``."""
        return PTimestamp.now(self.recv_window)

    async def keepalive_listen_key(self, listen_key: str):
        return await self.update_listen_key(self.listen_key_params(listen_key))

    async def remove_listen_key(self, listen_key: str):
        return await self.close_listen_key(self.listen_key_params(listen_key))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"


# ============================================================================
# STREAMS
# ============================================================================

class BaseStreamClient:
    """
    Factory for blocking WebSocket channels of one market segment.

    Every builder dials immediately and returns an OPEN channel.
    """

    SEGMENT: MarketSegment

    def __init__(self, base_url: str, dialer: Dialer = dial):
        """
        Initialize stream client.

        Args:
            base_url: WebSocket base URL (e.g. "wss://fstream.binance.com")
            dialer: Handshake function returning a FrameSource
        """
        self.base_url = base_url.rstrip("/")
        self._dialer = dialer

    @classmethod
    def default_endpoint(cls: Type[S], **kwargs) -> S:
        return cls(Endpoint.for_segment(cls.SEGMENT).ws_url, **kwargs)

    @classmethod
    def testnet(cls: Type[S], **kwargs) -> S:
        return cls(Endpoint.for_segment(cls.SEGMENT, testnet=True).ws_url, **kwargs)

    def build_single(self, symbol: str, channel: str, message_type: Type[T]) -> WebSocketChannel[T]:
        """Open ``<base>/ws/<symbol>@<channel>``; messages decode directly."""
        url = single_stream_url(self.base_url, build_topic(symbol, channel))
        return self._open(url, message_type, StreamMode.SINGLE)

    def build_multi(self, symbols: List[str], channel: str, message_type: Type[T]) -> WebSocketChannel[T]:
        """Open a combined stream of ``channel`` for every symbol; envelopes are unwrapped."""
        topics = [build_topic(symbol, channel) for symbol in symbols]
        url = combined_stream_url(self.base_url, topics)
        return self._open(url, message_type, StreamMode.COMBINED)

    def build_user_data(self, listen_key: str, message_type: Type[T]) -> WebSocketChannel[T]:
        """Open the user data stream at ``<base>/ws/<listenKey>``."""
        url = single_stream_url(self.base_url, listen_key)
        return self._open(url, message_type, StreamMode.SINGLE, name=f"user_data:{listen_key[:8]}...")

    def _open(
        self,
        url: str,
        message_type: Type[T],
        mode: StreamMode,
        name: Optional[str] = None
    ) -> WebSocketChannel[T]:
        logger.debug("opening_stream", stream=name or url, mode=mode.value)
        return WebSocketChannel(url, message_type, mode, self._dialer, name=name).open()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"
