"""
Integration tests for futures WebSocket channels against Binance Testnet.

Market streams need no credentials, but follow the same config.json gate as
the REST tests so the suite stays offline by default.
Run with: pytest tests/integration/ -m integration
"""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from bian.exchange.enums import Interval
from bian.exchange.exchange_config import Credentials
from bian.exchange.stream_models import WSBookTicker, WSKline
from bian.exchange.usd_futures import UFuturesHttpClient, UFuturesWSClient
from bian.exchange.user_stream import ListenKeyKeeper
from bian.exchange.websocket_channel import ChannelState


CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.json"


@pytest.fixture(scope="module")
def testnet_credentials():
    """Load testnet credentials from config file."""
    if not CONFIG_PATH.exists():
        pytest.skip("config.json not found")

    with open(CONFIG_PATH) as f:
        config = json.load(f)

    if not config.get("exchange", {}).get("testnet"):
        pytest.skip("Testnet not enabled in config")

    return Credentials.from_config_file(CONFIG_PATH)


@pytest.fixture
def ws_client(testnet_credentials):
    return UFuturesWSClient.testnet()


# ============================================================================
# Market Stream Tests
# ============================================================================

@pytest.mark.integration
def test_book_ticker_stream(ws_client):
    """Test book ticker messages decode and arrive for the symbol."""
    with ws_client.book_ticker("BTCUSDT") as channel:
        tickers = [channel.read() for _ in range(3)]

    assert channel.state is ChannelState.CLOSED
    for ticker in tickers:
        assert isinstance(ticker, WSBookTicker)
        assert ticker.symbol == "BTCUSDT"
        assert isinstance(ticker.bid_price, Decimal)


@pytest.mark.integration
def test_combined_kline_stream(ws_client):
    """Test a combined stream yields unwrapped kline events."""
    with ws_client.kline_multi(["BTCUSDT", "ETHUSDT"], Interval.MIN_1) as channel:
        kline = channel.read()

    assert isinstance(kline, WSKline)
    assert kline.symbol in ("BTCUSDT", "ETHUSDT")
    assert kline.kline.interval == "1m"


@pytest.mark.integration
def test_iteration_stops_after_close(ws_client):
    """Test iterating a live channel ends once the caller closes it."""
    channel = ws_client.agg_trade("BTCUSDT")
    received = []

    for trade in channel:
        received.append(trade)
        if len(received) == 2:
            channel.close()

    assert len(received) == 2


# ============================================================================
# User Data Stream Tests
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_data_channel_opens(testnet_credentials, ws_client):
    """Test a listen key from the keeper opens a user data channel."""
    rest = UFuturesHttpClient.from_credentials(testnet_credentials, testnet=True)

    async with ListenKeyKeeper(rest) as keeper:
        channel = ws_client.user_data(keeper.listen_key)
        assert channel.is_open
        channel.close()

    assert keeper.listen_key is None
