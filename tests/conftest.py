"""
Shared fixtures: an in-memory FrameSource and an httpx mock transport.
"""

import json
from collections import deque
from typing import Callable, List

import httpx
import pytest

from bian.exchange.exceptions import WsClientError
from bian.exchange.websocket_channel import WsFrame


class FakeFrameSource:
    """Replays scripted frames and records what the channel sends back."""

    def __init__(self, frames: List[WsFrame]):
        self.frames = deque(frames)
        self.pongs: List[bytes] = []
        self.closed = False

    def recv_frame(self) -> WsFrame:
        if not self.frames:
            raise WsClientError("connection closed by peer")
        return self.frames.popleft()

    def send_pong(self, payload: bytes) -> None:
        self.pongs.append(payload)

    def close(self) -> None:
        self.closed = True


class RecordingDialer:
    """Dialer handing out one FakeFrameSource per call and recording URLs."""

    def __init__(self, frames: List[WsFrame] = None):
        self.frames = frames or []
        self.urls: List[str] = []
        self.sources: List[FakeFrameSource] = []

    def __call__(self, url: str) -> FakeFrameSource:
        self.urls.append(url)
        source = FakeFrameSource(list(self.frames))
        self.sources.append(source)
        return source


class RecordingTransport:
    """Wraps httpx.MockTransport and keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.transport = httpx.MockTransport(record)


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode())


@pytest.fixture
def dialer():
    return RecordingDialer()


@pytest.fixture
def make_transport():
    return RecordingTransport


@pytest.fixture
def make_source():
    return FakeFrameSource


@pytest.fixture
def respond():
    return json_response
