"""
Unit tests for ListenKeyKeeper.
"""

import asyncio
import gc
from unittest.mock import AsyncMock, MagicMock

import pytest

from bian.exchange.exceptions import ServerSideError
from bian.exchange.models import ListenKey
from bian.exchange.user_stream import ListenKeyKeeper


@pytest.fixture
def client():
    """Mock REST client exposing the listen-key calls."""
    mock = MagicMock()
    mock.create_listen_key = AsyncMock(return_value=ListenKey(listen_key="abcdefgh12345"))
    mock.keepalive_listen_key = AsyncMock(return_value={})
    mock.remove_listen_key = AsyncMock(return_value={})
    return mock


# ============================================================================
# Lifecycle Tests
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.unit
async def test_start_creates_key(client):
    """Test start creates a listen key and launches the refresh task."""
    keeper = ListenKeyKeeper(client, interval=3600)

    listen_key = await keeper.start()

    assert listen_key == "abcdefgh12345"
    assert keeper.is_running
    client.create_listen_key.assert_awaited_once()

    await keeper.stop()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_start_adopts_existing_key(client):
    """Test a key given up front is kept alive, not replaced."""
    keeper = ListenKeyKeeper(client, listen_key="existing", interval=3600)

    assert await keeper.start() == "existing"
    client.create_listen_key.assert_not_awaited()

    await keeper.stop(close_key=False)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_refresh_runs_on_interval(client):
    """Test the background task sends keepalives for the key."""
    keeper = ListenKeyKeeper(client, interval=0.01)
    await keeper.start()

    await asyncio.sleep(0.05)
    await keeper.stop(close_key=False)

    assert client.keepalive_listen_key.await_count >= 1
    client.keepalive_listen_key.assert_awaited_with("abcdefgh12345")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_stop_closes_key(client):
    """Test stop cancels refreshing and closes the key."""
    keeper = ListenKeyKeeper(client, interval=3600)
    await keeper.start()

    await keeper.stop()

    assert not keeper.is_running
    assert keeper.listen_key is None
    client.remove_listen_key.assert_awaited_once_with("abcdefgh12345")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_stop_keeps_key_when_asked(client):
    """Test stop(close_key=False) leaves the key open."""
    keeper = ListenKeyKeeper(client, interval=3600)
    await keeper.start()

    await keeper.stop(close_key=False)

    assert keeper.listen_key == "abcdefgh12345"
    client.remove_listen_key.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_context_manager(client):
    """Test async with starts and stops the keeper."""
    async with ListenKeyKeeper(client, interval=3600) as keeper:
        assert keeper.listen_key == "abcdefgh12345"

    client.remove_listen_key.assert_awaited_once_with("abcdefgh12345")


# ============================================================================
# Failure Tests
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_refresh_surfaces_from_wait(client):
    """Test a keepalive failure ends the task and is re-raised by wait."""
    client.keepalive_listen_key.side_effect = ServerSideError("maintenance", 503)
    keeper = ListenKeyKeeper(client, interval=0.01)
    await keeper.start()

    with pytest.raises(ServerSideError):
        await keeper.wait()

    assert client.keepalive_listen_key.await_count == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_refresh_surfaces_from_stop(client):
    """Test stop re-raises a failure the refresh task already hit."""
    client.keepalive_listen_key.side_effect = ServerSideError("maintenance", 503)
    keeper = ListenKeyKeeper(client, interval=0.01)
    await keeper.start()
    await asyncio.sleep(0.05)

    with pytest.raises(ServerSideError):
        await keeper.stop()

    client.remove_listen_key.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_manual_refresh_reraises(client):
    """Test refresh propagates the keepalive error to the caller."""
    client.keepalive_listen_key.side_effect = ServerSideError("down", 500)
    keeper = ListenKeyKeeper(client, listen_key="existing")

    with pytest.raises(ServerSideError):
        await keeper.refresh()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unawaited_refresh_failure_not_reported(client):
    """Test a failed refresh nobody waits on is not reported as never retrieved."""
    loop = asyncio.get_running_loop()
    reports = []
    loop.set_exception_handler(lambda loop, context: reports.append(context))

    def maintenance(*args, **kwargs):
        raise ServerSideError("maintenance", 503)

    client.keepalive_listen_key.side_effect = maintenance
    try:
        keeper = ListenKeyKeeper(client, interval=0.01)
        await keeper.start()
        await asyncio.sleep(0.05)
        assert not keeper.is_running

        del keeper
        gc.collect()
    finally:
        loop.set_exception_handler(None)

    assert not any("never retrieved" in context.get("message", "") for context in reports)


# ============================================================================
# Cancellation Tests
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.unit
async def test_cancelled_stop_propagates(client):
    """Test cancelling the caller of stop raises CancelledError and keeps the key."""
    release = asyncio.Event()

    async def slow_refresh_loop():
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            await release.wait()
            raise

    keeper = ListenKeyKeeper(client, listen_key="existing")
    refresh_task = asyncio.create_task(slow_refresh_loop())
    keeper._task = refresh_task
    await asyncio.sleep(0)

    stopper = asyncio.create_task(keeper.stop())
    await asyncio.sleep(0.01)
    stopper.cancel()

    with pytest.raises(asyncio.CancelledError):
        await stopper

    client.remove_listen_key.assert_not_awaited()
    assert keeper.listen_key == "existing"

    release.set()
    with pytest.raises(asyncio.CancelledError):
        await refresh_task
