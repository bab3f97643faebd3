"""
USDⓈ-M futures clients (``fapi``).

Also defines ``FuturesWSClient``, the stream builders both futures
segments share.
"""

from typing import List

from .endpoints import api
from .enums import ContractType, HttpMethod, Interval
from .exchange_config import MarketSegment
from .gateway import BaseHttpClient, BaseStreamClient
from .models import (
    AggTrade,
    BookTicker,
    CodeResponse,
    CountdownCancel,
    EmptyResponse,
    ExchangeInfo,
    ForceOrder,
    FundingRate,
    FuturesAccount,
    FuturesBalance,
    FuturesDepth,
    FuturesOrder,
    Kline,
    Leverage,
    ListenKey,
    LongShortRatio,
    OpenInterest,
    OpenInterestHist,
    PositionMargin,
    PositionMarginHist,
    PositionRisk,
    PositionSideDual,
    PremiumIndex,
    Price,
    ServerTime,
    TakerLongShortRatio,
    Ticker24h,
    Trade,
    UserTrade,
)
from .stream_models import (
    FuturesUserEvent,
    WSAggTrade,
    WSBookTicker,
    WSContinuousKline,
    WSDepth,
    WSForceOrder,
    WSKline,
    WSMarkPrice,
    WSMiniTicker,
    WSTicker,
)
from .websocket_channel import WebSocketChannel


GET, POST, PUT, DELETE = HttpMethod.GET, HttpMethod.POST, HttpMethod.PUT, HttpMethod.DELETE

# Batch endpoints answer with one entry per order: the order, or {"code", "msg"}
BatchResult = List[dict]


class UFuturesHttpClient(BaseHttpClient):
    """USDⓈ-M futures REST client."""

    SEGMENT = MarketSegment.USD_FUTURES

    # ---- market data ------------------------------------------------------
    ping = api(GET, "fapi/v1/ping", EmptyResponse)
    server_time = api(GET, "fapi/v1/time", ServerTime)
    exchange_info = api(GET, "fapi/v1/exchangeInfo", ExchangeInfo)
    depth = api(GET, "fapi/v1/depth", FuturesDepth)
    trades = api(GET, "fapi/v1/trades", List[Trade])
    historical_trades = api(GET, "fapi/v1/historicalTrades", List[Trade])
    agg_trades = api(GET, "fapi/v1/aggTrades", List[AggTrade])
    klines = api(GET, "fapi/v1/klines", List[Kline])
    continuous_klines = api(GET, "fapi/v1/continuousKlines", List[Kline])
    index_price_klines = api(GET, "fapi/v1/indexPriceKlines", List[Kline])
    mark_price_klines = api(GET, "fapi/v1/markPriceKlines", List[Kline])
    premium_index = api(GET, "fapi/v1/premiumIndex", PremiumIndex)
    premium_indexes = api(GET, "fapi/v1/premiumIndex", List[PremiumIndex])
    funding_rate = api(GET, "fapi/v1/fundingRate", List[FundingRate])
    h24_ticker = api(GET, "fapi/v1/ticker/24hr", Ticker24h)
    h24_tickers = api(GET, "fapi/v1/ticker/24hr", List[Ticker24h])
    price = api(GET, "fapi/v1/ticker/price", Price)
    prices = api(GET, "fapi/v1/ticker/price", List[Price])
    book_ticker = api(GET, "fapi/v1/ticker/bookTicker", BookTicker)
    book_tickers = api(GET, "fapi/v1/ticker/bookTicker", List[BookTicker])
    all_force_orders = api(GET, "fapi/v1/allForceOrders", List[ForceOrder])
    open_interest = api(GET, "fapi/v1/openInterest", OpenInterest)
    open_interest_hist = api(GET, "futures/data/openInterestHist", List[OpenInterestHist])
    top_long_short_account_ratio = api(GET, "futures/data/topLongShortAccountRatio", List[LongShortRatio])
    top_long_short_position_ratio = api(GET, "futures/data/topLongShortPositionRatio", List[LongShortRatio])
    global_long_short_account_ratio = api(GET, "futures/data/globalLongShortAccountRatio", List[LongShortRatio])
    taker_long_short_ratio = api(GET, "futures/data/takerlongshortRatio", List[TakerLongShortRatio])

    # ---- account / trade --------------------------------------------------
    update_position_side = api(POST, "fapi/v1/positionSide/dual", CodeResponse, signed=True)
    get_position_side = api(GET, "fapi/v1/positionSide/dual", PositionSideDual, signed=True)
    order = api(POST, "fapi/v1/order", FuturesOrder, signed=True)
    test_order = api(POST, "fapi/v1/order/test", EmptyResponse, signed=True)
    batch_orders = api(POST, "fapi/v1/batchOrders", BatchResult, signed=True)
    query_order = api(GET, "fapi/v1/order", FuturesOrder, signed=True)
    cancel_order = api(DELETE, "fapi/v1/order", FuturesOrder, signed=True)
    cancel_all_orders = api(DELETE, "fapi/v1/allOpenOrders", CodeResponse, signed=True)
    batch_cancel_orders = api(DELETE, "fapi/v1/batchOrders", BatchResult, signed=True)
    countdown_cancel_all = api(POST, "fapi/v1/countdownCancelAll", CountdownCancel, signed=True)
    open_order = api(GET, "fapi/v1/openOrder", FuturesOrder, signed=True)
    open_orders = api(GET, "fapi/v1/openOrders", List[FuturesOrder], signed=True)
    all_orders = api(GET, "fapi/v1/allOrders", List[FuturesOrder], signed=True)
    balance = api(GET, "fapi/v2/balance", List[FuturesBalance], signed=True)
    account = api(GET, "fapi/v2/account", FuturesAccount, signed=True)
    leverage = api(POST, "fapi/v1/leverage", Leverage, signed=True)
    margin_type = api(POST, "fapi/v1/marginType", CodeResponse, signed=True)
    position_margin = api(POST, "fapi/v1/positionMargin", PositionMargin, signed=True)
    position_margin_history = api(GET, "fapi/v1/positionMargin/history", List[PositionMarginHist], signed=True)
    position_risk = api(GET, "fapi/v2/positionRisk", List[PositionRisk], signed=True)
    user_trades = api(GET, "fapi/v1/userTrades", List[UserTrade], signed=True)

    # ---- user data stream -------------------------------------------------
    create_listen_key = api(POST, "fapi/v1/listenKey", ListenKey, signed=True)
    update_listen_key = api(PUT, "fapi/v1/listenKey", EmptyResponse, signed=True)
    close_listen_key = api(DELETE, "fapi/v1/listenKey", EmptyResponse, signed=True)


# ============================================================================
# STREAMS
# ============================================================================

def depth_channel(level: int, speed: int) -> str:
    """
    Partial book depth channel name.

    Levels other than 10 and 20 fall back to 5. Speeds 100 and 500 (ms)
    select a suffix; anything else uses the default 250 ms stream.
    """
    if level not in (10, 20):
        level = 5
    if speed in (100, 500):
        return f"depth{level}@{speed}ms"
    return f"depth{level}"


def mark_price_channel(update_speed: int = 3) -> str:
    """``markPrice@1s`` for 1-second updates, ``markPrice`` (3 s) otherwise."""
    return "markPrice@1s" if update_speed == 1 else "markPrice"


def continuous_kline_symbol(pair: str, contract_type: ContractType) -> str:
    return f"{pair}_{contract_type.value}"


class FuturesWSClient(BaseStreamClient):
    """Market streams common to USDⓈ-M and COIN-M futures."""

    def agg_trade(self, symbol: str) -> WebSocketChannel[WSAggTrade]:
        return self.build_single(symbol, "aggTrade", WSAggTrade)

    def agg_trade_multi(self, symbols: List[str]) -> WebSocketChannel[WSAggTrade]:
        return self.build_multi(symbols, "aggTrade", WSAggTrade)

    def mark_price(self, symbol: str, update_speed: int = 3) -> WebSocketChannel[WSMarkPrice]:
        return self.build_single(symbol, mark_price_channel(update_speed), WSMarkPrice)

    def mark_price_multi(self, symbols: List[str], update_speed: int = 3) -> WebSocketChannel[WSMarkPrice]:
        return self.build_multi(symbols, mark_price_channel(update_speed), WSMarkPrice)

    def kline(self, symbol: str, interval: Interval) -> WebSocketChannel[WSKline]:
        return self.build_single(symbol, f"kline_{interval.value}", WSKline)

    def kline_multi(self, symbols: List[str], interval: Interval) -> WebSocketChannel[WSKline]:
        return self.build_multi(symbols, f"kline_{interval.value}", WSKline)

    def continuous_kline(
        self,
        pair: str,
        contract_type: ContractType,
        interval: Interval
    ) -> WebSocketChannel[WSContinuousKline]:
        return self.build_single(
            continuous_kline_symbol(pair, contract_type),
            f"continuousKline_{interval.value}",
            WSContinuousKline
        )

    def continuous_kline_multi(
        self,
        pairs: List[str],
        contract_type: ContractType,
        interval: Interval
    ) -> WebSocketChannel[WSContinuousKline]:
        return self.build_multi(
            [continuous_kline_symbol(pair, contract_type) for pair in pairs],
            f"continuousKline_{interval.value}",
            WSContinuousKline
        )

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

    def all_book_ticker(self) -> WebSocketChannel[WSBookTicker]:
        return self.build_single("", "!bookTicker", WSBookTicker)

    def force_order(self, symbol: str) -> WebSocketChannel[WSForceOrder]:
        return self.build_single(symbol, "forceOrder", WSForceOrder)

    def force_order_multi(self, symbols: List[str]) -> WebSocketChannel[WSForceOrder]:
        return self.build_multi(symbols, "forceOrder", WSForceOrder)

    def all_force_order(self) -> WebSocketChannel[WSForceOrder]:
        return self.build_single("", "!forceOrder@arr", WSForceOrder)

    def limit_depth(self, symbol: str, level: int = 5, speed: int = 250) -> WebSocketChannel[WSDepth]:
        return self.build_single(symbol, depth_channel(level, speed), WSDepth)

    def limit_depth_multi(
        self,
        symbols: List[str],
        level: int = 5,
        speed: int = 250
    ) -> WebSocketChannel[WSDepth]:
        return self.build_multi(symbols, depth_channel(level, speed), WSDepth)

    def user_data(self, listen_key: str) -> WebSocketChannel[FuturesUserEvent]:
        return self.build_user_data(listen_key, FuturesUserEvent)


class UFuturesWSClient(FuturesWSClient):
    """USDⓈ-M futures stream client."""

    SEGMENT = MarketSegment.USD_FUTURES

    def mark_price_arr(self, update_speed: int = 3) -> WebSocketChannel[List[WSMarkPrice]]:
        """Mark price of every symbol (``!markPrice@arr``)."""
        channel = "!markPrice@arr@1s" if update_speed == 1 else "!markPrice@arr"
        return self.build_single("", channel, List[WSMarkPrice])
