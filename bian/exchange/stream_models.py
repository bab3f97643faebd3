"""
WebSocket payload structures.

Market streams use Binance's single-letter keys; Python names spell them
out. Combined streams wrap every payload in a ``{"stream", "data"}``
envelope. User data events form a closed tagged union on the ``e`` key,
so decoding an unknown event type fails instead of yielding a partially
filled object.
"""

from decimal import Decimal
from typing import Generic, List, Optional, TypeVar, Union

import msgspec

from .enums import OrderSide, OrderStatus, PositionSide
from .models import PriceLevel


T = TypeVar("T")


class StreamEnvelope(msgspec.Struct, Generic[T]):
    """Combined stream wrapper: ``{"stream": "<topic>", "data": <payload>}``."""
    stream: str
    data: T


class StreamEvent(msgspec.Struct, kw_only=True):
    """Common header of market stream events."""
    event_type: str = msgspec.field(name="e")
    event_time: int = msgspec.field(name="E")


# ============================================================================
# MARKET STREAMS
# ============================================================================

class WSAggTrade(StreamEvent):
    symbol: str = msgspec.field(name="s")
    agg_id: int = msgspec.field(name="a")
    price: Decimal = msgspec.field(name="p")
    qty: Decimal = msgspec.field(name="q")
    first_trade_id: int = msgspec.field(name="f")
    last_trade_id: int = msgspec.field(name="l")
    trade_time: int = msgspec.field(name="T")
    is_buyer_maker: bool = msgspec.field(name="m")


class WSTrade(StreamEvent):
    """Raw trade (spot)."""
    symbol: str = msgspec.field(name="s")
    trade_id: int = msgspec.field(name="t")
    price: Decimal = msgspec.field(name="p")
    qty: Decimal = msgspec.field(name="q")
    trade_time: int = msgspec.field(name="T")
    is_buyer_maker: bool = msgspec.field(name="m")


class WSMarkPrice(StreamEvent):
    symbol: str = msgspec.field(name="s")
    mark_price: Decimal = msgspec.field(name="p")
    index_price: Optional[Decimal] = msgspec.field(default=None, name="i")
    estimated_settle_price: Optional[Decimal] = msgspec.field(default=None, name="P")
    funding_rate: Optional[Decimal] = msgspec.field(default=None, name="r")
    next_funding_time: Optional[int] = msgspec.field(default=None, name="T")


class WSIndexPrice(StreamEvent):
    """Index price (COIN-M)."""
    pair: str = msgspec.field(name="i")
    index_price: Decimal = msgspec.field(name="p")


class KlineData(msgspec.Struct, kw_only=True):
    start_time: int = msgspec.field(name="t")
    close_time: int = msgspec.field(name="T")
    interval: str = msgspec.field(name="i")
    first_trade_id: int = msgspec.field(name="f")
    last_trade_id: int = msgspec.field(name="L")
    open: Decimal = msgspec.field(name="o")
    close: Decimal = msgspec.field(name="c")
    high: Decimal = msgspec.field(name="h")
    low: Decimal = msgspec.field(name="l")
    volume: Decimal = msgspec.field(name="v")
    trade_count: int = msgspec.field(name="n")
    is_closed: bool = msgspec.field(name="x")
    quote_volume: Decimal = msgspec.field(name="q")
    taker_buy_volume: Decimal = msgspec.field(name="V")
    taker_buy_quote_volume: Decimal = msgspec.field(name="Q")
    symbol: Optional[str] = msgspec.field(default=None, name="s")


class WSKline(StreamEvent):
    symbol: str = msgspec.field(name="s")
    kline: KlineData = msgspec.field(name="k")


class WSContinuousKline(StreamEvent):
    pair: str = msgspec.field(name="ps")
    contract_type: str = msgspec.field(name="ct")
    kline: KlineData = msgspec.field(name="k")


class WSMiniTicker(StreamEvent):
    symbol: str = msgspec.field(name="s")
    close_price: Decimal = msgspec.field(name="c")
    open_price: Decimal = msgspec.field(name="o")
    high_price: Decimal = msgspec.field(name="h")
    low_price: Decimal = msgspec.field(name="l")
    volume: Decimal = msgspec.field(name="v")
    quote_volume: Decimal = msgspec.field(name="q")


class WSTicker(StreamEvent):
    symbol: str = msgspec.field(name="s")
    price_change: Decimal = msgspec.field(name="p")
    price_change_percent: Decimal = msgspec.field(name="P")
    weighted_avg_price: Decimal = msgspec.field(name="w")
    last_price: Decimal = msgspec.field(name="c")
    last_qty: Decimal = msgspec.field(name="Q")
    open_price: Decimal = msgspec.field(name="o")
    high_price: Decimal = msgspec.field(name="h")
    low_price: Decimal = msgspec.field(name="l")
    volume: Decimal = msgspec.field(name="v")
    quote_volume: Decimal = msgspec.field(name="q")
    open_time: int = msgspec.field(name="O")
    close_time: int = msgspec.field(name="C")
    first_id: int = msgspec.field(name="F")
    last_id: int = msgspec.field(name="L")
    count: int = msgspec.field(name="n")


class WSBookTicker(msgspec.Struct, kw_only=True):
    """Best bid/ask. Spot payloads carry no event header."""
    update_id: int = msgspec.field(name="u")
    symbol: str = msgspec.field(name="s")
    bid_price: Decimal = msgspec.field(name="b")
    bid_qty: Decimal = msgspec.field(name="B")
    ask_price: Decimal = msgspec.field(name="a")
    ask_qty: Decimal = msgspec.field(name="A")
    event_type: Optional[str] = msgspec.field(default=None, name="e")
    event_time: Optional[int] = msgspec.field(default=None, name="E")
    transaction_time: Optional[int] = msgspec.field(default=None, name="T")


class ForceOrderData(msgspec.Struct, kw_only=True):
    symbol: str = msgspec.field(name="s")
    side: OrderSide = msgspec.field(name="S")
    order_type: str = msgspec.field(name="o")
    time_in_force: str = msgspec.field(name="f")
    qty: Decimal = msgspec.field(name="q")
    price: Decimal = msgspec.field(name="p")
    avg_price: Decimal = msgspec.field(name="ap")
    status: OrderStatus = msgspec.field(name="X")
    last_filled_qty: Decimal = msgspec.field(name="l")
    filled_qty: Decimal = msgspec.field(name="z")
    trade_time: int = msgspec.field(name="T")


class WSForceOrder(StreamEvent):
    order: ForceOrderData = msgspec.field(name="o")


class WSDepth(StreamEvent):
    """Futures partial book depth."""
    transaction_time: int = msgspec.field(name="T")
    symbol: str = msgspec.field(name="s")
    first_update_id: int = msgspec.field(name="U")
    final_update_id: int = msgspec.field(name="u")
    bids: List[PriceLevel] = msgspec.field(name="b")
    asks: List[PriceLevel] = msgspec.field(name="a")
    prev_final_update_id: Optional[int] = msgspec.field(default=None, name="pu")


class WSPartialDepth(msgspec.Struct, rename="camel", kw_only=True):
    """Spot partial book depth (snapshot, no event header)."""
    last_update_id: int
    bids: List[PriceLevel]
    asks: List[PriceLevel]


# ============================================================================
# USER DATA STREAM
# ============================================================================

class UserEvent(msgspec.Struct, tag_field="e", kw_only=True):
    """Base of user data events; the tag is the ``e`` key."""
    event_time: int = msgspec.field(name="E")


class ListenKeyExpiredEvent(UserEvent, tag="listenKeyExpired"):
    listen_key: Optional[str] = msgspec.field(default=None, name="listenKey")


# ---- futures ----------------------------------------------------------------

class BalanceChange(msgspec.Struct, kw_only=True):
    asset: str = msgspec.field(name="a")
    wallet_balance: Decimal = msgspec.field(name="wb")
    cross_wallet_balance: Decimal = msgspec.field(name="cw")
    balance_change: Optional[Decimal] = msgspec.field(default=None, name="bc")


class PositionChange(msgspec.Struct, kw_only=True):
    symbol: str = msgspec.field(name="s")
    position_amt: Decimal = msgspec.field(name="pa")
    entry_price: Decimal = msgspec.field(name="ep")
    unrealized_pnl: Decimal = msgspec.field(name="up")
    margin_type: str = msgspec.field(name="mt")
    isolated_wallet: Decimal = msgspec.field(name="iw")
    position_side: PositionSide = msgspec.field(name="ps")
    accumulated_realized: Optional[Decimal] = msgspec.field(default=None, name="cr")


class AccountUpdateData(msgspec.Struct, kw_only=True):
    reason: str = msgspec.field(name="m")
    balances: List[BalanceChange] = msgspec.field(default_factory=list, name="B")
    positions: List[PositionChange] = msgspec.field(default_factory=list, name="P")


class AccountUpdateEvent(UserEvent, tag="ACCOUNT_UPDATE"):
    transaction_time: int = msgspec.field(name="T")
    account: AccountUpdateData = msgspec.field(name="a")


class OrderUpdateData(msgspec.Struct, kw_only=True):
    symbol: str = msgspec.field(name="s")
    client_order_id: str = msgspec.field(name="c")
    side: OrderSide = msgspec.field(name="S")
    order_type: str = msgspec.field(name="o")
    time_in_force: str = msgspec.field(name="f")
    orig_qty: Decimal = msgspec.field(name="q")
    price: Decimal = msgspec.field(name="p")
    avg_price: Decimal = msgspec.field(name="ap")
    stop_price: Decimal = msgspec.field(name="sp")
    execution_type: str = msgspec.field(name="x")
    status: OrderStatus = msgspec.field(name="X")
    order_id: int = msgspec.field(name="i")
    last_filled_qty: Decimal = msgspec.field(name="l")
    filled_qty: Decimal = msgspec.field(name="z")
    last_filled_price: Decimal = msgspec.field(name="L")
    trade_time: int = msgspec.field(name="T")
    trade_id: int = msgspec.field(name="t")
    is_maker: bool = msgspec.field(name="m")
    reduce_only: bool = msgspec.field(name="R")
    position_side: PositionSide = msgspec.field(name="ps")
    commission_asset: Optional[str] = msgspec.field(default=None, name="N")
    commission: Optional[Decimal] = msgspec.field(default=None, name="n")
    working_type: Optional[str] = msgspec.field(default=None, name="wt")
    orig_type: Optional[str] = msgspec.field(default=None, name="ot")
    close_position: Optional[bool] = msgspec.field(default=None, name="cp")
    realized_profit: Optional[Decimal] = msgspec.field(default=None, name="rp")


class OrderTradeUpdateEvent(UserEvent, tag="ORDER_TRADE_UPDATE"):
    transaction_time: int = msgspec.field(name="T")
    order: OrderUpdateData = msgspec.field(name="o")


class MarginCallPosition(msgspec.Struct, kw_only=True):
    symbol: str = msgspec.field(name="s")
    position_side: PositionSide = msgspec.field(name="ps")
    position_amt: Decimal = msgspec.field(name="pa")
    margin_type: str = msgspec.field(name="mt")
    mark_price: Decimal = msgspec.field(name="mp")
    unrealized_pnl: Decimal = msgspec.field(name="up")
    maintenance_margin: Decimal = msgspec.field(name="mm")
    isolated_wallet: Optional[Decimal] = msgspec.field(default=None, name="iw")


class MarginCallEvent(UserEvent, tag="MARGIN_CALL"):
    cross_wallet_balance: Optional[Decimal] = msgspec.field(default=None, name="cw")
    positions: List[MarginCallPosition] = msgspec.field(default_factory=list, name="p")


class LeverageConfig(msgspec.Struct, kw_only=True):
    symbol: str = msgspec.field(name="s")
    leverage: int = msgspec.field(name="l")


class MultiAssetsConfig(msgspec.Struct, kw_only=True):
    multi_assets_mode: bool = msgspec.field(name="j")


class AccountConfigUpdateEvent(UserEvent, tag="ACCOUNT_CONFIG_UPDATE"):
    transaction_time: int = msgspec.field(name="T")
    leverage: Optional[LeverageConfig] = msgspec.field(default=None, name="ac")
    multi_assets: Optional[MultiAssetsConfig] = msgspec.field(default=None, name="ai")


FuturesUserEvent = Union[
    AccountUpdateEvent,
    OrderTradeUpdateEvent,
    MarginCallEvent,
    ListenKeyExpiredEvent,
    AccountConfigUpdateEvent,
]


# ---- spot -------------------------------------------------------------------

class AssetBalance(msgspec.Struct, kw_only=True):
    asset: str = msgspec.field(name="a")
    free: Decimal = msgspec.field(name="f")
    locked: Decimal = msgspec.field(name="l")


class OutboundAccountPositionEvent(UserEvent, tag="outboundAccountPosition"):
    last_update_time: int = msgspec.field(name="u")
    balances: List[AssetBalance] = msgspec.field(default_factory=list, name="B")


class BalanceUpdateEvent(UserEvent, tag="balanceUpdate"):
    asset: str = msgspec.field(name="a")
    balance_delta: Decimal = msgspec.field(name="d")
    clear_time: int = msgspec.field(name="T")


class ExecutionReportEvent(UserEvent, tag="executionReport"):
    symbol: str = msgspec.field(name="s")
    client_order_id: str = msgspec.field(name="c")
    side: OrderSide = msgspec.field(name="S")
    order_type: str = msgspec.field(name="o")
    time_in_force: str = msgspec.field(name="f")
    orig_qty: Decimal = msgspec.field(name="q")
    price: Decimal = msgspec.field(name="p")
    stop_price: Decimal = msgspec.field(name="P")
    execution_type: str = msgspec.field(name="x")
    status: OrderStatus = msgspec.field(name="X")
    reject_reason: str = msgspec.field(name="r")
    order_id: int = msgspec.field(name="i")
    last_filled_qty: Decimal = msgspec.field(name="l")
    filled_qty: Decimal = msgspec.field(name="z")
    last_filled_price: Decimal = msgspec.field(name="L")
    commission: Decimal = msgspec.field(name="n")
    commission_asset: Optional[str] = msgspec.field(name="N")
    transaction_time: int = msgspec.field(name="T")
    trade_id: int = msgspec.field(name="t")
    is_working: bool = msgspec.field(name="w")
    is_maker: bool = msgspec.field(name="m")
    created_time: int = msgspec.field(name="O")
    cumulative_quote_qty: Decimal = msgspec.field(name="Z")
    last_quote_qty: Decimal = msgspec.field(name="Y")
    orig_client_order_id: Optional[str] = msgspec.field(default=None, name="C")
    iceberg_qty: Optional[Decimal] = msgspec.field(default=None, name="F")
    order_list_id: Optional[int] = msgspec.field(default=None, name="g")
    quote_order_qty: Optional[Decimal] = msgspec.field(default=None, name="Q")


SpotUserEvent = Union[
    OutboundAccountPositionEvent,
    BalanceUpdateEvent,
    ExecutionReportEvent,
    ListenKeyExpiredEvent,
]
