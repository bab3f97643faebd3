"""
REST response structures.

Each concept has one shape shared by every market segment. Fields that
only one segment sends are optional, or live on a small subclass when a
segment adds a whole group of them. Prices and quantities decode into
``Decimal`` (Binance sends them as strings).
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import msgspec

from .enums import OrderSide, OrderStatus, PositionSide


EmptyResponse = Dict[str, Any]  # ping, keepalive, cancel-all...


class Model(msgspec.Struct, rename="camel", kw_only=True):
    """Base for all response structures."""
    pass


# ============================================================================
# MARKET DATA
# ============================================================================

class ServerTime(Model):
    server_time: int


class RateLimit(Model):
    rate_limit_type: str
    interval: str
    interval_num: int
    limit: int


class SymbolInfo(Model):
    symbol: str
    base_asset: str
    quote_asset: str
    status: Optional[str] = None
    filters: List[Dict[str, Any]] = []
    order_types: List[str] = []
    # futures
    pair: Optional[str] = None
    contract_type: Optional[str] = None
    contract_status: Optional[str] = None  # COIN-M
    margin_asset: Optional[str] = None
    price_precision: Optional[int] = None
    quantity_precision: Optional[int] = None
    # spot
    base_asset_precision: Optional[int] = None
    quote_precision: Optional[int] = None
    permissions: List[str] = []


class ExchangeInfo(Model):
    timezone: str
    server_time: int
    rate_limits: List[RateLimit] = []
    symbols: List[SymbolInfo] = []
    exchange_filters: List[Dict[str, Any]] = []


PriceLevel = Tuple[Decimal, Decimal]  # price, quantity


class Depth(Model):
    last_update_id: int
    bids: List[PriceLevel]
    asks: List[PriceLevel]


class FuturesDepth(Depth):
    event_time: int = msgspec.field(name="E")
    transaction_time: int = msgspec.field(name="T")
    symbol: Optional[str] = None  # COIN-M
    pair: Optional[str] = None    # COIN-M


class Trade(Model):
    """Recent and historical trades."""
    id: int
    price: Decimal
    qty: Decimal
    time: int
    is_buyer_maker: bool
    quote_qty: Optional[Decimal] = None  # spot, USD-M
    base_qty: Optional[Decimal] = None   # COIN-M
    is_best_match: Optional[bool] = None  # spot


class AggTrade(Model):
    agg_id: int = msgspec.field(name="a")
    price: Decimal = msgspec.field(name="p")
    qty: Decimal = msgspec.field(name="q")
    first_trade_id: int = msgspec.field(name="f")
    last_trade_id: int = msgspec.field(name="l")
    time: int = msgspec.field(name="T")
    is_buyer_maker: bool = msgspec.field(name="m")
    is_best_match: Optional[bool] = msgspec.field(default=None, name="M")


class Kline(msgspec.Struct, array_like=True):
    """Klines arrive as 12-element arrays."""
    open_time: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    close_time: int
    quote_volume: Decimal  # base asset volume on COIN-M
    trade_count: int
    taker_buy_volume: Decimal
    taker_buy_quote_volume: Decimal
    ignore: str


class PremiumIndex(Model):
    symbol: str
    mark_price: Decimal
    index_price: Decimal
    last_funding_rate: Decimal
    next_funding_time: int
    interest_rate: Decimal
    time: int
    estimated_settle_price: Optional[Decimal] = None
    pair: Optional[str] = None  # COIN-M


class FundingRate(Model):
    symbol: str
    funding_rate: Decimal
    funding_time: int
    mark_price: Optional[Decimal] = None


class Ticker24h(Model):
    symbol: str
    price_change: Decimal
    price_change_percent: Decimal
    weighted_avg_price: Decimal
    last_price: Decimal
    open_price: Decimal
    high_price: Decimal
    low_price: Decimal
    volume: Decimal
    open_time: int
    close_time: int
    first_id: int
    last_id: int
    count: int
    last_qty: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None  # spot, USD-M
    base_volume: Optional[Decimal] = None   # COIN-M
    pair: Optional[str] = None              # COIN-M
    prev_close_price: Optional[Decimal] = None  # spot
    bid_price: Optional[Decimal] = None         # spot
    ask_price: Optional[Decimal] = None         # spot


class Price(Model):
    symbol: str
    price: Decimal
    time: Optional[int] = None
    ps: Optional[str] = None  # COIN-M pair


class AvgPrice(Model):
    mins: int
    price: Decimal


class BookTicker(Model):
    symbol: str
    bid_price: Decimal
    bid_qty: Decimal
    ask_price: Decimal
    ask_qty: Decimal
    time: Optional[int] = None
    pair: Optional[str] = None


class ForceOrder(Model):
    symbol: str
    price: Decimal
    orig_qty: Decimal
    executed_qty: Decimal
    average_price: Decimal
    status: OrderStatus
    time_in_force: str
    order_type: str = msgspec.field(name="type")
    side: OrderSide
    time: int


class OpenInterest(Model):
    open_interest: Decimal
    time: int
    symbol: str
    pair: Optional[str] = None
    contract_type: Optional[str] = None


class OpenInterestHist(Model):
    sum_open_interest: Decimal
    sum_open_interest_value: Decimal
    timestamp: int
    symbol: Optional[str] = None
    pair: Optional[str] = None
    contract_type: Optional[str] = None


class LongShortRatio(Model):
    long_short_ratio: Decimal
    timestamp: int
    symbol: Optional[str] = None
    pair: Optional[str] = None
    long_account: Optional[Decimal] = None
    short_account: Optional[Decimal] = None
    long_position: Optional[Decimal] = None
    short_position: Optional[Decimal] = None


class TakerLongShortRatio(Model):
    buy_sell_ratio: Decimal
    buy_vol: Decimal
    sell_vol: Decimal
    timestamp: int


# ============================================================================
# ACCOUNT / TRADE
# ============================================================================

class CodeResponse(Model):
    """Acknowledgement carrying only ``{"code": 200, "msg": "success"}``."""
    code: int
    msg: str


class PositionSideDual(Model):
    dual_side_position: bool


class Order(Model):
    """Fields every segment returns for an order."""
    symbol: str
    order_id: int
    client_order_id: str
    price: Optional[Decimal] = None
    orig_qty: Optional[Decimal] = None
    executed_qty: Optional[Decimal] = None
    status: Optional[OrderStatus] = None
    time_in_force: Optional[str] = None
    order_type: Optional[str] = msgspec.field(default=None, name="type")
    side: Optional[OrderSide] = None
    stop_price: Optional[Decimal] = None
    update_time: Optional[int] = None


class FuturesOrder(Order):
    avg_price: Optional[Decimal] = None
    cum_quote: Optional[Decimal] = None  # USD-M
    cum_base: Optional[Decimal] = None   # COIN-M
    cum_qty: Optional[Decimal] = None
    reduce_only: Optional[bool] = None
    close_position: Optional[bool] = None
    position_side: Optional[PositionSide] = None
    working_type: Optional[str] = None
    price_protect: Optional[bool] = None
    orig_type: Optional[str] = None
    activate_price: Optional[Decimal] = None
    price_rate: Optional[Decimal] = None
    time: Optional[int] = None
    pair: Optional[str] = None  # COIN-M


class Fill(Model):
    price: Decimal
    qty: Decimal
    commission: Decimal
    commission_asset: str
    trade_id: Optional[int] = None


class SpotOrder(Order):
    order_list_id: Optional[int] = None
    cummulative_quote_qty: Optional[Decimal] = None  # sic
    transact_time: Optional[int] = None
    time: Optional[int] = None
    iceberg_qty: Optional[Decimal] = None
    is_working: Optional[bool] = None
    orig_quote_order_qty: Optional[Decimal] = None
    fills: List[Fill] = []


class CountdownCancel(Model):
    symbol: str
    countdown_time: int


class FuturesBalance(Model):
    account_alias: str
    asset: str
    balance: Decimal
    cross_wallet_balance: Decimal
    cross_un_pnl: Decimal
    available_balance: Decimal
    max_withdraw_amount: Optional[Decimal] = None   # USD-M
    withdraw_available: Optional[Decimal] = None    # COIN-M
    update_time: Optional[int] = None


class AccountAsset(Model):
    asset: str
    wallet_balance: Decimal
    unrealized_profit: Decimal
    margin_balance: Decimal
    maint_margin: Decimal
    initial_margin: Decimal
    position_initial_margin: Decimal
    open_order_initial_margin: Decimal
    max_withdraw_amount: Decimal
    cross_wallet_balance: Optional[Decimal] = None
    cross_un_pnl: Optional[Decimal] = None
    available_balance: Optional[Decimal] = None


class AccountPosition(Model):
    symbol: str
    initial_margin: Decimal
    maint_margin: Decimal
    unrealized_profit: Decimal
    position_initial_margin: Decimal
    open_order_initial_margin: Decimal
    leverage: int
    isolated: bool
    entry_price: Decimal
    position_side: PositionSide
    max_notional: Optional[Decimal] = None  # USD-M
    max_qty: Optional[Decimal] = None       # COIN-M
    position_amt: Optional[Decimal] = None
    update_time: Optional[int] = None


class FuturesAccount(Model):
    assets: List[AccountAsset]
    positions: List[AccountPosition]
    can_trade: bool
    can_deposit: bool
    can_withdraw: bool
    update_time: int
    fee_tier: Optional[int] = None
    total_wallet_balance: Optional[Decimal] = None     # USD-M
    total_unrealized_profit: Optional[Decimal] = None  # USD-M
    total_margin_balance: Optional[Decimal] = None     # USD-M
    available_balance: Optional[Decimal] = None        # USD-M
    max_withdraw_amount: Optional[Decimal] = None      # USD-M


class SpotBalance(Model):
    asset: str
    free: Decimal
    locked: Decimal


class SpotAccount(Model):
    maker_commission: int
    taker_commission: int
    buyer_commission: int
    seller_commission: int
    can_trade: bool
    can_withdraw: bool
    can_deposit: bool
    update_time: int
    account_type: str
    balances: List[SpotBalance]
    permissions: List[str] = []


class Leverage(Model):
    symbol: str
    leverage: int
    max_notional_value: Optional[Decimal] = None  # USD-M
    max_qty: Optional[Decimal] = None             # COIN-M


class PositionMargin(Model):
    amount: Decimal
    code: int
    msg: str
    adjust_type: int = msgspec.field(name="type")


class PositionMarginHist(Model):
    amount: Decimal
    asset: str
    symbol: str
    time: int
    adjust_type: int = msgspec.field(name="type")
    position_side: Optional[PositionSide] = None


class PositionRisk(Model):
    symbol: str
    position_amt: Decimal
    entry_price: Decimal
    mark_price: Decimal
    un_realized_profit: Decimal
    liquidation_price: Decimal
    leverage: int
    margin_type: str  # "cross" / "isolated", lower case
    isolated_margin: Decimal
    is_auto_add_margin: bool
    position_side: PositionSide
    max_notional_value: Optional[Decimal] = None  # USD-M
    max_qty: Optional[Decimal] = None             # COIN-M
    notional: Optional[Decimal] = None
    update_time: Optional[int] = None


class UserTrade(Model):
    symbol: str
    id: int
    order_id: int
    price: Decimal
    qty: Decimal
    commission: Decimal
    commission_asset: str
    time: int
    quote_qty: Optional[Decimal] = None
    base_qty: Optional[Decimal] = None  # COIN-M
    side: Optional[OrderSide] = None
    position_side: Optional[PositionSide] = None
    realized_pnl: Optional[Decimal] = None
    buyer: Optional[bool] = None      # futures
    maker: Optional[bool] = None      # futures
    is_buyer: Optional[bool] = None   # spot
    is_maker: Optional[bool] = None   # spot
    is_best_match: Optional[bool] = None
    order_list_id: Optional[int] = None
    margin_asset: Optional[str] = None
    pair: Optional[str] = None


class ListenKey(Model):
    listen_key: str
