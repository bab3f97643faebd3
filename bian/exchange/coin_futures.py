"""
COIN-M futures clients (``dapi``).

Routes mirror USDⓈ-M with COIN-M paths; statistics endpoints are keyed by
pair instead of symbol.
"""

from typing import List

from .endpoints import api
from .enums import HttpMethod
from .exchange_config import MarketSegment
from .gateway import BaseHttpClient
from .models import (
    AggTrade,
    BookTicker,
    CodeResponse,
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
    Ticker24h,
    Trade,
    UserTrade,
)
from .stream_models import WSIndexPrice
from .usd_futures import BatchResult, FuturesWSClient
from .websocket_channel import WebSocketChannel


GET, POST, PUT, DELETE = HttpMethod.GET, HttpMethod.POST, HttpMethod.PUT, HttpMethod.DELETE


class DFuturesHttpClient(BaseHttpClient):
    """COIN-M futures REST client."""

    SEGMENT = MarketSegment.COIN_FUTURES

    # ---- market data ------------------------------------------------------
    ping = api(GET, "dapi/v1/ping", EmptyResponse)
    server_time = api(GET, "dapi/v1/time", ServerTime)
    exchange_info = api(GET, "dapi/v1/exchangeInfo", ExchangeInfo)
    depth = api(GET, "dapi/v1/depth", FuturesDepth)
    trades = api(GET, "dapi/v1/trades", List[Trade])
    historical_trades = api(GET, "dapi/v1/historicalTrades", List[Trade])
    agg_trades = api(GET, "dapi/v1/aggTrades", List[AggTrade])
    klines = api(GET, "dapi/v1/klines", List[Kline])
    continuous_klines = api(GET, "dapi/v1/continuousKlines", List[Kline])
    index_price_klines = api(GET, "dapi/v1/indexPriceKlines", List[Kline])
    mark_price_klines = api(GET, "dapi/v1/markPriceKlines", List[Kline])
    # COIN-M always answers premiumIndex with a list, even for one symbol
    premium_index = api(GET, "dapi/v1/premiumIndex", List[PremiumIndex])
    funding_rate = api(GET, "dapi/v1/fundingRate", List[FundingRate])
    h24_ticker = api(GET, "dapi/v1/ticker/24hr", List[Ticker24h])
    price = api(GET, "dapi/v1/ticker/price", List[Price])
    book_ticker = api(GET, "dapi/v1/ticker/bookTicker", List[BookTicker])
    all_force_orders = api(GET, "dapi/v1/allForceOrders", List[ForceOrder])
    open_interest = api(GET, "dapi/v1/openInterest", OpenInterest)
    open_interest_hist = api(GET, "futures/data/openInterestHist", List[OpenInterestHist])
    top_long_short_account_ratio = api(GET, "futures/data/topLongShortAccountRatio", List[LongShortRatio])
    top_long_short_position_ratio = api(GET, "futures/data/topLongShortPositionRatio", List[LongShortRatio])
    global_long_short_account_ratio = api(GET, "futures/data/globalLongShortAccountRatio", List[LongShortRatio])

    # ---- account / trade --------------------------------------------------
    update_position_side = api(POST, "dapi/v1/positionSide/dual", CodeResponse, signed=True)
    get_position_side = api(GET, "dapi/v1/positionSide/dual", PositionSideDual, signed=True)
    order = api(POST, "dapi/v1/order", FuturesOrder, signed=True)
    batch_orders = api(POST, "dapi/v1/batchOrders", BatchResult, signed=True)
    query_order = api(GET, "dapi/v1/order", FuturesOrder, signed=True)
    cancel_order = api(DELETE, "dapi/v1/order", FuturesOrder, signed=True)
    cancel_all_orders = api(DELETE, "dapi/v1/allOpenOrders", CodeResponse, signed=True)
    batch_cancel_orders = api(DELETE, "dapi/v1/batchOrders", BatchResult, signed=True)
    open_order = api(GET, "dapi/v1/openOrder", FuturesOrder, signed=True)
    open_orders = api(GET, "dapi/v1/openOrders", List[FuturesOrder], signed=True)
    all_orders = api(GET, "dapi/v1/allOrders", List[FuturesOrder], signed=True)
    balance = api(GET, "dapi/v1/balance", List[FuturesBalance], signed=True)
    account = api(GET, "dapi/v1/account", FuturesAccount, signed=True)
    leverage = api(POST, "dapi/v1/leverage", Leverage, signed=True)
    margin_type = api(POST, "dapi/v1/marginType", CodeResponse, signed=True)
    position_margin = api(POST, "dapi/v1/positionMargin", PositionMargin, signed=True)
    position_margin_history = api(GET, "dapi/v1/positionMargin/history", List[PositionMarginHist], signed=True)
    position_risk = api(GET, "dapi/v1/positionRisk", List[PositionRisk], signed=True)
    user_trades = api(GET, "dapi/v1/userTrades", List[UserTrade], signed=True)

    # ---- user data stream -------------------------------------------------
    create_listen_key = api(POST, "dapi/v1/listenKey", ListenKey, signed=True)
    update_listen_key = api(PUT, "dapi/v1/listenKey", EmptyResponse, signed=True)
    close_listen_key = api(DELETE, "dapi/v1/listenKey", EmptyResponse, signed=True)


class DFuturesWSClient(FuturesWSClient):
    """COIN-M futures stream client."""

    SEGMENT = MarketSegment.COIN_FUTURES

    def index_price(self, pair: str, update_speed: int = 3) -> WebSocketChannel[WSIndexPrice]:
        channel = "indexPrice@1s" if update_speed == 1 else "indexPrice"
        return self.build_single(pair, channel, WSIndexPrice)

    def index_price_multi(self, pairs: List[str], update_speed: int = 3) -> WebSocketChannel[WSIndexPrice]:
        channel = "indexPrice@1s" if update_speed == 1 else "indexPrice"
        return self.build_multi(pairs, channel, WSIndexPrice)

