"""
Binance REST and WebSocket clients.
"""

from .exceptions import (
    ApiError,
    ClientSideError,
    ServerSideError,
    Unknown,
    WafLimit,
    RateLimitError,
    FreqWarning,
    Banned,
    RequestError,
    DecodeError,
    InvalidUrl,
    WsConnectError,
    WsClientError
)
from .exchange_config import (
    MarketSegment,
    ExchangeConfig,
    Endpoint,
    Credentials,
    get_exchange_config
)
from .encoder import canonical_query
from .signer import RequestSigner
from .response_classifier import classify_status, check_response, decode_body
from .http_executor import HttpRequestExecutor, RequestSpec
from .endpoints import Route, api
from .params import PTimestamp
from .websocket_channel import (
    WebSocketChannel,
    WsFrame,
    FrameKind,
    FrameSource,
    StreamMode,
    ChannelState
)
from .websocket_transport import dial
from .gateway import BaseHttpClient, BaseStreamClient, build_topic
from .spot import SpotHttpClient, SpotWSClient
from .usd_futures import UFuturesHttpClient, UFuturesWSClient
from .coin_futures import DFuturesHttpClient, DFuturesWSClient
from .user_stream import ListenKeyKeeper

__all__ = [
    # Exceptions
    "ApiError",
    "ClientSideError",
    "ServerSideError",
    "Unknown",
    "WafLimit",
    "RateLimitError",
    "FreqWarning",
    "Banned",
    "RequestError",
    "DecodeError",
    "InvalidUrl",
    "WsConnectError",
    "WsClientError",

    # Configuration
    "MarketSegment",
    "ExchangeConfig",
    "Endpoint",
    "Credentials",
    "get_exchange_config",

    # REST core
    "canonical_query",
    "RequestSigner",
    "classify_status",
    "check_response",
    "decode_body",
    "HttpRequestExecutor",
    "RequestSpec",
    "Route",
    "api",
    "PTimestamp",

    # WebSocket core
    "WebSocketChannel",
    "WsFrame",
    "FrameKind",
    "FrameSource",
    "StreamMode",
    "ChannelState",
    "dial",
    "build_topic",

    # Clients
    "BaseHttpClient",
    "BaseStreamClient",
    "SpotHttpClient",
    "SpotWSClient",
    "UFuturesHttpClient",
    "UFuturesWSClient",
    "DFuturesHttpClient",
    "DFuturesWSClient",
    "ListenKeyKeeper"
]
