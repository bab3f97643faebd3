"""
Blocking WebSocket channel for one stream subscription.

A channel is opened once, read by a single consumer, and closed once:

    CONNECTING -> OPEN -> (await frame -> data | keepalive)* -> CLOSED

Keepalive is handled inside ``read()``: a ping is answered with a pong
before the next frame is awaited and is never surfaced to the caller.
There is no reconnection; a dropped connection ends the channel and the
caller opens a new one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Iterator, Optional, Protocol, Type, TypeVar

import msgspec

from .exceptions import DecodeError, WsClientError
from .stream_models import StreamEnvelope
from ..utils.logger import EventType, get_logger, log_system_event


logger = get_logger(__name__)

T = TypeVar("T")


class FrameKind(Enum):
    TEXT = "text"
    BINARY = "binary"
    PING = "ping"
    PONG = "pong"
    CLOSE = "close"


@dataclass(frozen=True)
class WsFrame:
    """One complete (reassembled) WebSocket message or control frame."""
    kind: FrameKind
    payload: bytes = b""

    @classmethod
    def text(cls, data: str) -> "WsFrame":
        return cls(FrameKind.TEXT, data.encode("utf-8"))

    @classmethod
    def ping(cls, payload: bytes = b"") -> "WsFrame":
        return cls(FrameKind.PING, payload)


class FrameSource(Protocol):
    """Raw frame transport underneath a channel."""

    def recv_frame(self) -> WsFrame:
        """Block until the next frame. Raises WsClientError on socket failure."""
        ...

    def send_pong(self, payload: bytes) -> None:
        """Answer a ping, echoing its payload."""
        ...

    def close(self) -> None:
        """Send a close frame (if still open) and release the socket."""
        ...


Dialer = Callable[[str], FrameSource]


class StreamMode(Enum):
    """How text frames are decoded, fixed when the channel is opened."""
    SINGLE = "single"      # payload is the message
    COMBINED = "combined"  # payload is {"stream": ..., "data": <message>}


class ChannelState(Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class WebSocketChannel(Generic[T]):
    """
    A decoded, ordered stream of messages of type ``T``.

    Not thread-safe: one channel belongs to one execution context. Use one
    channel per thread for parallel consumption.
    """

    def __init__(
        self,
        url: str,
        message_type: Type[T],
        mode: StreamMode,
        dialer: Dialer,
        name: Optional[str] = None
    ):
        """
        Create a channel (not yet connected).

        Args:
            url: Full stream URL
            message_type: Type each message decodes into
            mode: Single or combined stream decoding
            dialer: Callable performing the handshake and returning a FrameSource
            name: Label used in log records (defaults to the URL)
        """
        self.url = url
        self.name = name or url
        self.message_type = message_type
        self.mode = mode
        self._dialer = dialer
        self._source: Optional[FrameSource] = None
        self._state = ChannelState.CONNECTING
        self._closed_by_caller = False

        if mode is StreamMode.COMBINED:
            self._decode_type = StreamEnvelope[message_type]
        else:
            self._decode_type = message_type

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ChannelState.OPEN

    def open(self) -> "WebSocketChannel[T]":
        """
        Perform the handshake.

        Returns:
            self, now OPEN

        Raises:
            WsConnectError: If the handshake fails
            WsClientError: If the channel was already opened
        """
        if self._state is not ChannelState.CONNECTING:
            raise WsClientError(f"channel already {self._state.value}")

        self._source = self._dialer(self.url)
        self._state = ChannelState.OPEN

        log_system_event(
            logger,
            EventType.WEBSOCKET_CONNECTED,
            "WebSocket channel opened",
            stream=self.name,
            mode=self.mode.value
        )
        return self

    def read(self) -> T:
        """
        Block until the next data message and return it decoded.

        Pings received while waiting are answered and skipped.

        Raises:
            WsClientError: Peer closed, unexpected frame, socket failure,
                or the channel is not open
            DecodeError: Text frame did not match the message type
        """
        if self._state is not ChannelState.OPEN:
            raise WsClientError(f"channel is {self._state.value}")

        while True:
            try:
                frame = self._source.recv_frame()
                if frame.kind is FrameKind.PING:
                    self._source.send_pong(frame.payload)
                    continue
            except WsClientError:
                self._release()
                raise

            if frame.kind is FrameKind.TEXT:
                return self._decode(frame.payload)

            self._release()
            if frame.kind is FrameKind.CLOSE:
                raise WsClientError("connection closed by peer")
            raise WsClientError(f"unexpected {frame.kind.value} frame")

    def _decode(self, payload: bytes) -> T:
        try:
            message = msgspec.json.decode(payload, type=self._decode_type, strict=False)
        except (msgspec.ValidationError, msgspec.DecodeError) as e:
            self._release()
            raise DecodeError(str(e)) from e

        if self.mode is StreamMode.COMBINED:
            return message.data
        return message

    def close(self):
        """Send a close frame and release the connection. Idempotent."""
        self._closed_by_caller = True
        if self._state is ChannelState.CLOSED:
            return
        self._release()

    def _release(self):
        if self._state is ChannelState.CLOSED:
            return
        self._state = ChannelState.CLOSED
        if self._source is not None:
            self._source.close()
        log_system_event(
            logger,
            EventType.WEBSOCKET_DISCONNECTED,
            "WebSocket channel closed",
            stream=self.name,
            by_caller=self._closed_by_caller
        )

    def __iter__(self) -> Iterator[T]:
        """Yield messages until the caller closes the channel."""
        while self._state is ChannelState.OPEN:
            try:
                yield self.read()
            except WsClientError:
                if self._closed_by_caller:
                    return
                raise

    def __enter__(self) -> "WebSocketChannel[T]":
        if self._state is ChannelState.CONNECTING:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"WebSocketChannel(stream={self.name!r}, mode={self.mode.value}, state={self._state.value})"
