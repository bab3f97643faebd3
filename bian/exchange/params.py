"""
Request parameter structures.

Field declaration order is the order parameters appear in the query string
(and therefore in the signed payload). Python names are snake_case and go
out camelCase; ``None`` fields are not sent. Signed requests carry an
``auth`` block that the encoder flattens into ``timestamp`` and
``recvWindow``.
"""

import time
from decimal import Decimal
from typing import List, Optional

import msgspec

from .enums import (
    ContractType,
    FuturesOrderType,
    Interval,
    MarginType,
    OrderSide,
    Period,
    PositionSide,
    SpotOrderType,
    TimeInForce,
    WorkingType,
)


def now_ms() -> int:
    """Current UNIX time in milliseconds."""
    return int(time.time() * 1000)


class Params(msgspec.Struct, rename="camel", omit_defaults=True, kw_only=True):
    """Base for all parameter structures."""
    pass


class PTimestamp(Params):
    """Timestamp and optional receive window required by signed endpoints."""
    timestamp: int = msgspec.field(default_factory=now_ms)
    recv_window: Optional[int] = None

    @classmethod
    def now(cls, recv_window: Optional[int] = None) -> "PTimestamp":
        return cls(timestamp=now_ms(), recv_window=recv_window)


# ============================================================================
# MARKET DATA
# ============================================================================

class PSymbol(Params):
    symbol: str


class PDepth(Params):
    symbol: str
    limit: Optional[int] = None  # 5, 10, 20, 50, 100, 500, 1000


class PTrade(Params):
    symbol: str
    limit: Optional[int] = None


class PHistoricalTrade(Params):
    symbol: str
    limit: Optional[int] = None
    from_id: Optional[int] = None


class PAggTrade(Params):
    symbol: str
    from_id: Optional[int] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None


class PKline(Params):
    symbol: str
    interval: Interval
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None


class PContinuousKline(Params):
    pair: str
    contract_type: ContractType
    interval: Interval
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None


class PIndexPriceKline(Params):
    pair: str
    interval: Interval
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None


class PFundingRate(Params):
    symbol: Optional[str] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None


class PForceOrder(Params):
    symbol: Optional[str] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None


class PFuturesData(Params):
    """Open-interest history and long/short ratio statistics."""
    symbol: str
    period: Period
    limit: Optional[int] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None


class PPairFuturesData(Params):
    """COIN-M statistics keyed by pair."""
    pair: str
    period: Period
    contract_type: Optional[ContractType] = None
    limit: Optional[int] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None


# ============================================================================
# ACCOUNT / TRADE (signed)
# ============================================================================

class PSigned(Params):
    """Signed request without further parameters."""
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PSymbolSigned(Params):
    symbol: Optional[str] = None
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PPositionSideDual(Params):
    dual_side_position: bool
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class FuturesOrderFields(Params):
    """Order fields shared by single and batch futures orders."""
    symbol: str
    side: OrderSide
    order_type: FuturesOrderType = msgspec.field(name="type")
    position_side: Optional[PositionSide] = None
    time_in_force: Optional[TimeInForce] = None
    quantity: Optional[Decimal] = None
    reduce_only: Optional[bool] = None
    price: Optional[Decimal] = None
    new_client_order_id: Optional[str] = None
    stop_price: Optional[Decimal] = None
    close_position: Optional[bool] = None
    activation_price: Optional[Decimal] = None
    callback_rate: Optional[Decimal] = None
    working_type: Optional[WorkingType] = None
    price_protect: Optional[bool] = None
    new_order_resp_type: Optional[str] = None


class PFuturesOrder(FuturesOrderFields):
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PBatchOrders(Params):
    batch_orders: List[FuturesOrderFields]
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PSpotOrder(Params):
    symbol: str
    side: OrderSide
    order_type: SpotOrderType = msgspec.field(name="type")
    time_in_force: Optional[TimeInForce] = None
    quantity: Optional[Decimal] = None
    quote_order_qty: Optional[Decimal] = None
    price: Optional[Decimal] = None
    new_client_order_id: Optional[str] = None
    stop_price: Optional[Decimal] = None
    iceberg_qty: Optional[Decimal] = None
    new_order_resp_type: Optional[str] = None  # ACK, RESULT or FULL
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class POrderId(Params):
    """Identifies one order by exchange id or client id."""
    symbol: str
    order_id: Optional[int] = None
    orig_client_order_id: Optional[str] = None
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PBatchCancel(Params):
    symbol: str
    order_id_list: Optional[List[int]] = None
    orig_client_order_id_list: Optional[List[str]] = None
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PCountdownCancel(Params):
    symbol: str
    countdown_time: int  # milliseconds, 0 cancels the countdown
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PAllOrders(Params):
    symbol: str
    order_id: Optional[int] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PLeverage(Params):
    symbol: str
    leverage: int
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PMarginType(Params):
    symbol: str
    margin_type: MarginType
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PPositionMargin(Params):
    symbol: str
    amount: Decimal
    adjust_type: int = msgspec.field(name="type")  # 1 add, 2 reduce
    position_side: Optional[PositionSide] = None
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PPositionMarginHistory(Params):
    symbol: str
    adjust_type: Optional[int] = msgspec.field(default=None, name="type")
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PUserTrades(Params):
    symbol: str
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    from_id: Optional[int] = None
    limit: Optional[int] = None
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)


class PListenKey(Params):
    """Spot user data stream keepalive / close."""
    listen_key: str
    auth: PTimestamp = msgspec.field(default_factory=PTimestamp)
