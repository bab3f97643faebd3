"""
Unit tests for the socket transport against a local WebSocket server.

The server runs on 127.0.0.1 in a background thread; nothing leaves the host.
"""

import threading
from typing import Any, Dict

import pytest
from websockets.exceptions import ConnectionClosed
from websockets.sync.server import serve

from bian.exchange.exceptions import WsClientError
from bian.exchange.websocket_channel import ChannelState, StreamMode, WebSocketChannel
from bian.exchange.websocket_transport import dial


@pytest.fixture
def local_server():
    """Start a websockets server for a handler and return its ws:// URL."""
    servers = []

    def start(handler):
        server = serve(handler, "127.0.0.1", 0, ping_interval=None)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append((server, thread))
        host, port = server.socket.getsockname()[:2]
        return f"ws://{host}:{port}"

    yield start

    for server, thread in servers:
        server.shutdown()
        thread.join(timeout=5)


# ============================================================================
# Keepalive Tests
# ============================================================================

@pytest.mark.unit
def test_trailing_ping_answered_on_next_read(local_server):
    """Test only the pings before a message are answered by the read returning it."""
    results = {}
    checked = threading.Event()
    handler_done = threading.Event()

    def handler(connection):
        first = connection.ping(b"1")
        second = connection.ping(b"2")
        connection.send('"hello"')
        trailing = connection.ping(b"3")
        results["trailing_before_second_read"] = trailing.wait(0.5)
        results["leading"] = first.is_set() and second.is_set()
        checked.set()
        connection.send('"bye"')
        results["trailing_after_second_read"] = trailing.wait(2)
        handler_done.set()

    url = local_server(handler)

    with WebSocketChannel(url, str, StreamMode.SINGLE, dial) as channel:
        assert channel.read() == "hello"
        assert checked.wait(5)
        assert channel.read() == "bye"
        assert handler_done.wait(5)

    assert results["leading"] is True
    assert results["trailing_before_second_read"] is False
    assert results["trailing_after_second_read"] is True


# ============================================================================
# Framing and Closing Tests
# ============================================================================

@pytest.mark.unit
def test_fragmented_message_then_peer_close(local_server):
    """Test fragments are joined into one message and a server close ends the channel."""
    def handler(connection):
        connection.send(['{"x":', ' 1}'])

    url = local_server(handler)
    channel = WebSocketChannel(url, Dict[str, Any], StreamMode.SINGLE, dial).open()

    assert channel.read() == {"x": 1}
    with pytest.raises(WsClientError):
        channel.read()

    assert channel.state is ChannelState.CLOSED


@pytest.mark.unit
def test_caller_close_reaches_server(local_server):
    """Test closing the channel sends a close frame the server observes."""
    results = {}
    closed = threading.Event()

    def handler(connection):
        connection.send('"ready"')
        try:
            connection.recv()
        except ConnectionClosed:
            results["close_frame"] = connection.protocol.close_rcvd
        closed.set()

    url = local_server(handler)
    channel = WebSocketChannel(url, str, StreamMode.SINGLE, dial).open()

    assert channel.read() == "ready"
    channel.close()

    assert closed.wait(5)
    assert results["close_frame"] is not None
    assert channel.state is ChannelState.CLOSED
