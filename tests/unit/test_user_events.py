"""
Unit tests for user data stream event decoding.

Payloads follow the shapes Binance documents for each event type.
"""

from decimal import Decimal

import pytest

from bian.exchange.enums import OrderSide, OrderStatus, PositionSide
from bian.exchange.exceptions import DecodeError
from bian.exchange.stream_models import (
    AccountConfigUpdateEvent,
    AccountUpdateEvent,
    BalanceUpdateEvent,
    ExecutionReportEvent,
    FuturesUserEvent,
    ListenKeyExpiredEvent,
    MarginCallEvent,
    OrderTradeUpdateEvent,
    OutboundAccountPositionEvent,
    SpotUserEvent,
)
from bian.exchange.websocket_channel import StreamMode, WebSocketChannel, WsFrame


ACCOUNT_UPDATE = """
{"e":"ACCOUNT_UPDATE","E":1564745798939,"T":1564745798938,
 "a":{"m":"ORDER",
      "B":[{"a":"USDT","wb":"122624.12345678","cw":"100.12345678","bc":"50.12345678"}],
      "P":[{"s":"BTCUSDT","pa":"0","ep":"0.00000","cr":"200","up":"0","mt":"isolated",
            "iw":"0.00000000","ps":"BOTH"}]}}
"""

ORDER_TRADE_UPDATE = """
{"e":"ORDER_TRADE_UPDATE","E":1568879465651,"T":1568879465650,
 "o":{"s":"BTCUSDT","c":"TEST","S":"SELL","o":"TRAILING_STOP_MARKET","f":"GTC",
      "q":"0.001","p":"0","ap":"0","sp":"7103.04","x":"NEW","X":"NEW","i":8886774,
      "l":"0","z":"0","L":"0","N":"USDT","n":"0","T":1568879465650,"t":0,
      "b":"0","a":"9.91","m":false,"R":false,"wt":"CONTRACT_PRICE",
      "ot":"TRAILING_STOP_MARKET","ps":"LONG","cp":false,"rp":"0"}}
"""

EXECUTION_REPORT = """
{"e":"executionReport","E":1499405658658,"s":"ETHBTC","c":"mUvoqJxFIILMdfAW5iGSOW",
 "S":"BUY","o":"LIMIT","f":"GTC","q":"1.00000000","p":"0.10264410","P":"0.00000000",
 "F":"0.00000000","g":-1,"C":"","x":"NEW","X":"NEW","r":"NONE","i":4293153,
 "l":"0.00000000","z":"0.00000000","L":"0.00000000","n":"0","N":null,
 "T":1499405658657,"t":-1,"I":8641984,"w":true,"m":false,"M":false,
 "O":1499405658657,"Z":"0.00000000","Y":"0.00000000","Q":"0.00000000"}
"""


def user_channel(make_source, payload, message_type):
    source = make_source([WsFrame.text(payload)])
    return WebSocketChannel("wss://example/ws/key", message_type, StreamMode.SINGLE, lambda url: source).open()


# ============================================================================
# Futures Events
# ============================================================================

@pytest.mark.unit
def test_account_update(make_source):
    """Test ACCOUNT_UPDATE decodes balances and positions."""
    event = user_channel(make_source, ACCOUNT_UPDATE, FuturesUserEvent).read()

    assert isinstance(event, AccountUpdateEvent)
    assert event.event_time == 1564745798939
    assert event.account.reason == "ORDER"
    assert event.account.balances[0].asset == "USDT"
    assert event.account.balances[0].wallet_balance == Decimal("122624.12345678")
    assert event.account.positions[0].position_side is PositionSide.BOTH
    assert event.account.positions[0].accumulated_realized == Decimal("200")


@pytest.mark.unit
def test_order_trade_update(make_source):
    """Test ORDER_TRADE_UPDATE decodes the order block."""
    event = user_channel(make_source, ORDER_TRADE_UPDATE, FuturesUserEvent).read()

    assert isinstance(event, OrderTradeUpdateEvent)
    assert event.order.symbol == "BTCUSDT"
    assert event.order.side is OrderSide.SELL
    assert event.order.status is OrderStatus.NEW
    assert event.order.order_id == 8886774
    assert event.order.stop_price == Decimal("7103.04")
    assert event.order.position_side is PositionSide.LONG
    assert event.order.commission_asset == "USDT"


@pytest.mark.unit
def test_listen_key_expired(make_source):
    """Test the expiry notice decodes on both futures and spot streams."""
    payload = '{"e":"listenKeyExpired","E":1576653824250}'

    futures_event = user_channel(make_source, payload, FuturesUserEvent).read()
    spot_event = user_channel(make_source, payload, SpotUserEvent).read()

    assert isinstance(futures_event, ListenKeyExpiredEvent)
    assert isinstance(spot_event, ListenKeyExpiredEvent)
    assert futures_event.event_time == 1576653824250


@pytest.mark.unit
def test_margin_call(make_source):
    """Test MARGIN_CALL decodes its position list."""
    payload = (
        '{"e":"MARGIN_CALL","E":1587727187525,"cw":"3.16812045",'
        '"p":[{"s":"ETHUSDT","ps":"LONG","pa":"1.327","mt":"CROSSED","iw":"0",'
        '"mp":"187.17127","up":"-1.166074","mm":"1.614445"}]}'
    )

    event = user_channel(make_source, payload, FuturesUserEvent).read()

    assert isinstance(event, MarginCallEvent)
    assert event.cross_wallet_balance == Decimal("3.16812045")
    assert event.positions[0].maintenance_margin == Decimal("1.614445")


@pytest.mark.unit
def test_account_config_update(make_source):
    """Test ACCOUNT_CONFIG_UPDATE with a leverage change."""
    payload = '{"e":"ACCOUNT_CONFIG_UPDATE","E":1611646737479,"T":1611646737476,"ac":{"s":"BTCUSDT","l":25}}'

    event = user_channel(make_source, payload, FuturesUserEvent).read()

    assert isinstance(event, AccountConfigUpdateEvent)
    assert event.leverage.symbol == "BTCUSDT"
    assert event.leverage.leverage == 25
    assert event.multi_assets is None


@pytest.mark.unit
def test_unknown_event_type_is_decode_error(make_source):
    """Test an event type outside the union fails to decode."""
    channel = user_channel(make_source, '{"e":"STRATEGY_UPDATE","E":1}', FuturesUserEvent)

    with pytest.raises(DecodeError):
        channel.read()


# ============================================================================
# Spot Events
# ============================================================================

@pytest.mark.unit
def test_outbound_account_position(make_source):
    """Test outboundAccountPosition decodes balances."""
    payload = (
        '{"e":"outboundAccountPosition","E":1564034571105,"u":1564034571073,'
        '"B":[{"a":"ETH","f":"10000.000000","l":"0.000000"}]}'
    )

    event = user_channel(make_source, payload, SpotUserEvent).read()

    assert isinstance(event, OutboundAccountPositionEvent)
    assert event.last_update_time == 1564034571073
    assert event.balances[0].free == Decimal("10000.000000")


@pytest.mark.unit
def test_balance_update(make_source):
    """Test balanceUpdate decodes the delta."""
    payload = '{"e":"balanceUpdate","E":1573200697110,"a":"BTC","d":"100.00000000","T":1573200697068}'

    event = user_channel(make_source, payload, SpotUserEvent).read()

    assert isinstance(event, BalanceUpdateEvent)
    assert event.balance_delta == Decimal("100.00000000")
    assert event.clear_time == 1573200697068


@pytest.mark.unit
def test_execution_report(make_source):
    """Test executionReport decodes with a null commission asset."""
    event = user_channel(make_source, EXECUTION_REPORT, SpotUserEvent).read()

    assert isinstance(event, ExecutionReportEvent)
    assert event.symbol == "ETHBTC"
    assert event.side is OrderSide.BUY
    assert event.status is OrderStatus.NEW
    assert event.commission_asset is None
    assert event.order_list_id == -1
    assert event.price == Decimal("0.10264410")


@pytest.mark.unit
def test_futures_event_on_spot_stream_is_decode_error(make_source):
    """Test the spot union does not accept futures events."""
    channel = user_channel(make_source, ACCOUNT_UPDATE, SpotUserEvent)

    with pytest.raises(DecodeError):
        channel.read()
