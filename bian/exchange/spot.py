"""
Spot clients (``api/v3``).
"""

from typing import List

from .endpoints import api
from .enums import HttpMethod, Interval
from .exchange_config import MarketSegment
from .gateway import BaseHttpClient, BaseStreamClient
from .models import (
    AggTrade,
    AvgPrice,
    BookTicker,
    Depth,
    EmptyResponse,
    ExchangeInfo,
    Kline,
    ListenKey,
    Price,
    ServerTime,
    SpotAccount,
    SpotOrder,
    Ticker24h,
    Trade,
    UserTrade,
)
from .params import PListenKey, PTimestamp
from .stream_models import (
    SpotUserEvent,
    WSAggTrade,
    WSBookTicker,
    WSKline,
    WSMiniTicker,
    WSPartialDepth,
    WSTicker,
    WSTrade,
)
from .websocket_channel import WebSocketChannel


GET, POST, PUT, DELETE = HttpMethod.GET, HttpMethod.POST, HttpMethod.PUT, HttpMethod.DELETE


class SpotHttpClient(BaseHttpClient):
    """Spot REST client."""

    SEGMENT = MarketSegment.SPOT

    # ---- market data ------------------------------------------------------
    ping = api(GET, "api/v3/ping", EmptyResponse)
    server_time = api(GET, "api/v3/time", ServerTime)
    exchange_info = api(GET, "api/v3/exchangeInfo", ExchangeInfo)
    depth = api(GET, "api/v3/depth", Depth)
    trades = api(GET, "api/v3/trades", List[Trade])
    historical_trades = api(GET, "api/v3/historicalTrades", List[Trade])
    agg_trades = api(GET, "api/v3/aggTrades", List[AggTrade])
    klines = api(GET, "api/v3/klines", List[Kline])
    avg_price = api(GET, "api/v3/avgPrice", AvgPrice)
    h24_ticker = api(GET, "api/v3/ticker/24hr", Ticker24h)
    h24_tickers = api(GET, "api/v3/ticker/24hr", List[Ticker24h])
    price = api(GET, "api/v3/ticker/price", Price)
    prices = api(GET, "api/v3/ticker/price", List[Price])
    book_ticker = api(GET, "api/v3/ticker/bookTicker", BookTicker)
    book_tickers = api(GET, "api/v3/ticker/bookTicker", List[BookTicker])

    # ---- account / trade --------------------------------------------------
    order = api(POST, "api/v3/order", SpotOrder, signed=True)
    test_order = api(POST, "api/v3/order/test", EmptyResponse, signed=True)
    query_order = api(GET, "api/v3/order", SpotOrder, signed=True)
    cancel_order = api(DELETE, "api/v3/order", SpotOrder, signed=True)
    cancel_all_orders = api(DELETE, "api/v3/openOrders", List[SpotOrder], signed=True)
    open_orders = api(GET, "api/v3/openOrders", List[SpotOrder], signed=True)
    all_orders = api(GET, "api/v3/allOrders", List[SpotOrder], signed=True)
    account = api(GET, "api/v3/account", SpotAccount, signed=True)
    user_trades = api(GET, "api/v3/myTrades", List[UserTrade], signed=True)

    # ---- user data stream -------------------------------------------------
    create_listen_key = api(POST, "api/v3/userDataStream", ListenKey, signed=True)
    update_listen_key = api(PUT, "api/v3/userDataStream", EmptyResponse, signed=True)
    close_listen_key = api(DELETE, "api/v3/userDataStream", EmptyResponse, signed=True)

    def listen_key_params(self, listen_key: str) -> PListenKey:
        # spot identifies the stream explicitly
        return PListenKey(listen_key=listen_key, auth=PTimestamp.now(self.recv_window))


def spot_depth_channel(level: int, speed: int) -> str:
    """Spot partial depth: levels 5/10/20 (else 5), 1000 ms or ``@100ms``."""
    if level not in (10, 20):
        level = 5
    if speed == 100:
        return f"depth{level}@100ms"
    return f"depth{level}"


class SpotWSClient(BaseStreamClient):
    """Spot stream client."""

    SEGMENT = MarketSegment.SPOT

    def agg_trade(self, symbol: str) -> WebSocketChannel[WSAggTrade]:
        return self.build_single(symbol, "aggTrade", WSAggTrade)

    def agg_trade_multi(self, symbols: List[str]) -> WebSocketChannel[WSAggTrade]:
        return self.build_multi(symbols, "aggTrade", WSAggTrade)

    def trade(self, symbol: str) -> WebSocketChannel[WSTrade]:
        return self.build_single(symbol, "trade", WSTrade)

    def trade_multi(self, symbols: List[str]) -> WebSocketChannel[WSTrade]:
        return self.build_multi(symbols, "trade", WSTrade)

    def kline(self, symbol: str, interval: Interval) -> WebSocketChannel[WSKline]:
        return self.build_single(symbol, f"kline_{interval.value}", WSKline)

    def kline_multi(self, symbols: List[str], interval: Interval) -> WebSocketChannel[WSKline]:
        return self.build_multi(symbols, f"kline_{interval.value}", WSKline)

    def mini_ticker(self, symbol: str) -> WebSocketChannel[WSMiniTicker]:
        return self.build_single(symbol, "miniTicker", WSMiniTicker)

    def mini_ticker_multi(self, symbols: List[str]) -> WebSocketChannel[WSMiniTicker]:
        return self.build_multi(symbols, "miniTicker", WSMiniTicker)

    def all_mini_ticker(self) -> WebSocketChannel[List[WSMiniTicker]]:
        return self.build_single("", "!miniTicker@arr", List[WSMiniTicker])

    def symbol_ticker(self, symbol: str) -> WebSocketChannel[WSTicker]:
        return self.build_single(symbol, "ticker", WSTicker)

    def symbol_ticker_multi(self, symbols: List[str]) -> WebSocketChannel[WSTicker]:
        return self.build_multi(symbols, "ticker", WSTicker)

    def all_symbol_ticker(self) -> WebSocketChannel[List[WSTicker]]:
        return self.build_single("", "!ticker@arr", List[WSTicker])

    def book_ticker(self, symbol: str) -> WebSocketChannel[WSBookTicker]:
        return self.build_single(symbol, "bookTicker", WSBookTicker)

    def book_ticker_multi(self, symbols: List[str]) -> WebSocketChannel[WSBookTicker]:
        return self.build_multi(symbols, "bookTicker", WSBookTicker)

    def partial_depth(self, symbol: str, level: int = 5, speed: int = 1000) -> WebSocketChannel[WSPartialDepth]:
        return self.build_single(symbol, spot_depth_channel(level, speed), WSPartialDepth)

    def partial_depth_multi(
        self,
        symbols: List[str],
        level: int = 5,
        speed: int = 1000
    ) -> WebSocketChannel[WSPartialDepth]:
        return self.build_multi(symbols, spot_depth_channel(level, speed), WSPartialDepth)

    def user_data(self, listen_key: str) -> WebSocketChannel[SpotUserEvent]:
        return self.build_user_data(listen_key, SpotUserEvent)
