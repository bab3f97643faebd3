"""
Blocking socket transport for WebSocket channels.

Drives the ``websockets`` sans-I/O client protocol over a plain (or TLS)
socket and exposes it as a ``FrameSource``: complete messages and raw
control frames. The protocol serializes a pong for every ping it parses;
each pong is held next to its ping and written only when the channel
answers that ping, so a ping the caller has not read yet stays unanswered.
"""

import socket
import ssl
from collections import deque
from typing import Deque, Iterable, List, Optional, Tuple

from websockets.client import ClientProtocol
from websockets.exceptions import InvalidHandshake, InvalidURI
from websockets.frames import Frame, Opcode
from websockets.http11 import Response
from websockets.protocol import State
from websockets.uri import WebSocketURI, parse_uri

from .exceptions import WsClientError, WsConnectError
from .websocket_channel import FrameKind, WsFrame
from ..utils.logger import EventType, get_logger, log_system_event
from ..utils.retry import retry_on_error


logger = get_logger(__name__)

HANDSHAKE_ATTEMPTS = 3
CONNECT_TIMEOUT = 10.0  # seconds, handshake only
RECV_BUFSIZE = 65536

_FRAME_KINDS = {
    Opcode.TEXT: FrameKind.TEXT,
    Opcode.BINARY: FrameKind.BINARY,
    Opcode.PING: FrameKind.PING,
    Opcode.PONG: FrameKind.PONG,
    Opcode.CLOSE: FrameKind.CLOSE,
}

# A received frame and, for a ping, the serialized pong that answers it
PendingFrame = Tuple[Frame, Optional[bytes]]


def _pair_pongs(
    frames: Iterable[Frame],
    writes: Iterable[bytes]
) -> Tuple[List[PendingFrame], List[bytes]]:
    """
    Attach the protocol's queued pongs to the pings they answer.

    The protocol queues one write per parsed ping, in order, until it sees a
    close frame. Writes left over after pairing (the close reply, EOF) are
    returned separately.
    """
    writes = deque(writes)
    paired: List[PendingFrame] = []
    closing = False
    for frame in frames:
        pong = None
        if frame.opcode is Opcode.PING and not closing and writes:
            pong = writes.popleft()
        elif frame.opcode is Opcode.CLOSE:
            closing = True
        paired.append((frame, pong))
    return paired, list(writes)


class SocketFrameSource:
    """FrameSource over a connected socket and an OPEN ClientProtocol."""

    def __init__(
        self,
        sock: socket.socket,
        protocol: ClientProtocol,
        pending: Optional[List[PendingFrame]] = None,
        outgoing: Optional[List[bytes]] = None
    ):
        self._sock = sock
        self._protocol = protocol
        self._pending: Deque[PendingFrame] = deque(pending or ())
        self._outgoing: List[bytes] = list(outgoing or ())
        self._pong_due: Optional[bytes] = None
        self._fragments: List[bytes] = []
        self._fragment_opcode: Optional[Opcode] = None

    def recv_frame(self) -> WsFrame:
        # an unanswered ping is dropped once the next frame is requested
        self._pong_due = None
        while True:
            while not self._pending:
                self._receive()

            raw, pong = self._pending.popleft()
            frame = self._assemble(raw)
            if frame is not None:
                self._pong_due = pong
                return frame

    def send_pong(self, payload: bytes) -> None:
        pong, self._pong_due = self._pong_due, None
        if pong is None:
            return
        try:
            self._sock.sendall(pong)
        except OSError as e:
            raise WsClientError(str(e)) from e

    def close(self) -> None:
        try:
            if self._protocol.state is State.OPEN:
                self._protocol.send_close()
            # also carries the reply to a peer-initiated close
            self._flush()
        except OSError as e:
            logger.debug("websocket_close_frame_not_sent", error=str(e))
        finally:
            self._sock.close()

    def _receive(self):
        try:
            data = self._sock.recv(RECV_BUFSIZE)
        except OSError as e:
            raise WsClientError(str(e)) from e

        if data:
            self._protocol.receive_data(data)
        else:
            self._protocol.receive_eof()

        if self._protocol.parser_exc is not None:
            raise WsClientError(str(self._protocol.parser_exc))

        paired, leftover = _pair_pongs(
            self._protocol.events_received(),
            self._protocol.data_to_send()
        )
        self._pending.extend(paired)
        self._outgoing.extend(leftover)
        if not data and not self._pending:
            raise WsClientError("connection closed by peer")

    def _assemble(self, frame: Frame) -> Optional[WsFrame]:
        """Reassemble fragmented data messages; control frames pass through."""
        if frame.opcode is Opcode.CONT:
            self._fragments.append(bytes(frame.data))
        elif frame.opcode in (Opcode.TEXT, Opcode.BINARY) and not frame.fin:
            self._fragment_opcode = frame.opcode
            self._fragments = [bytes(frame.data)]
        else:
            return WsFrame(_FRAME_KINDS[frame.opcode], bytes(frame.data))

        if not frame.fin:
            return None

        kind = _FRAME_KINDS[self._fragment_opcode]
        payload = b"".join(self._fragments)
        self._fragments = []
        self._fragment_opcode = None
        return WsFrame(kind, payload)

    def _flush(self):
        outgoing, self._outgoing = self._outgoing, []
        for data in outgoing + self._protocol.data_to_send():
            if data:
                self._sock.sendall(data)


@retry_on_error(max_attempts=HANDSHAKE_ATTEMPTS, exceptions=(OSError, InvalidHandshake))
def _handshake(wsuri: WebSocketURI, timeout: Optional[float]) -> SocketFrameSource:
    sock = socket.create_connection((wsuri.host, wsuri.port), timeout=timeout)
    try:
        if wsuri.secure:
            context = ssl.create_default_context()
            sock = context.wrap_socket(sock, server_hostname=wsuri.host)

        protocol = ClientProtocol(wsuri, max_size=None)
        protocol.send_request(protocol.connect())
        for data in protocol.data_to_send():
            sock.sendall(data)

        response = None
        frames: List[Frame] = []
        while response is None:
            data = sock.recv(RECV_BUFSIZE)
            if data:
                protocol.receive_data(data)
            else:
                protocol.receive_eof()

            for event in protocol.events_received():
                if isinstance(event, Response):
                    response = event
                else:
                    frames.append(event)

            if response is None and not data:
                raise ConnectionError("connection closed during handshake")

        if protocol.handshake_exc is not None:
            raise protocol.handshake_exc

        # frames that arrived with the response
        pending, outgoing = _pair_pongs(frames, protocol.data_to_send())

        # no read timeout once open
        sock.settimeout(None)
        return SocketFrameSource(sock, protocol, pending, outgoing)
    except BaseException:
        sock.close()
        raise


def dial(url: str, timeout: Optional[float] = CONNECT_TIMEOUT) -> SocketFrameSource:
    """
    Connect and complete the WebSocket handshake.

    The handshake is attempted ``HANDSHAKE_ATTEMPTS`` times in a row with no
    delay between attempts.

    Args:
        url: ws:// or wss:// URL
        timeout: Connect/handshake timeout in seconds

    Returns:
        Open SocketFrameSource

    Raises:
        WsConnectError: If the URL is invalid or every attempt failed
    """
    try:
        wsuri = parse_uri(url)
    except InvalidURI as e:
        raise WsConnectError(str(e)) from e

    try:
        return _handshake(wsuri, timeout)
    except (OSError, InvalidHandshake) as e:
        log_system_event(
            logger,
            EventType.WEBSOCKET_HANDSHAKE_FAILED,
            "WebSocket handshake failed",
            host=wsuri.host,
            error=str(e)
        )
        raise WsConnectError(str(e)) from e
