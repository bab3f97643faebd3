"""
Listen-key lifecycle for user data streams.

Binance expires a listen key 60 minutes after its last keepalive. The
keeper creates (or adopts) a key, refreshes it on a fixed interval from a
background task, and closes it on stop. A failed refresh is not retried:
it is logged and re-raised, and surfaces from ``stop()`` or ``wait()``.
"""

import asyncio
from typing import Optional

from .gateway import BaseHttpClient
from ..utils.logger import EventType, get_logger, log_system_event


logger = get_logger(__name__)

REFRESH_INTERVAL = 1800  # 30 minutes


def _retrieve_failure(task: asyncio.Task):
    # failures are logged by refresh() and re-raised from wait() or stop()
    if not task.cancelled():
        task.exception()


def _mask(listen_key: str) -> str:
    return f"{listen_key[:8]}..."


class ListenKeyKeeper:
    """
    Keeps one listen key alive.

    Example:
        keeper = ListenKeyKeeper(client)
        listen_key = await keeper.start()
        channel = ws_client.user_data(listen_key)
        ...
        await keeper.stop()
    """

    def __init__(
        self,
        client: BaseHttpClient,
        listen_key: Optional[str] = None,
        interval: float = REFRESH_INTERVAL
    ):
        """
        Initialize keeper.

        Args:
            client: Segment REST client providing the listen-key routes
            listen_key: Existing key to keep alive (a new one is created if None)
            interval: Seconds between keepalives
        """
        self.client = client
        self.interval = interval
        self._listen_key = listen_key
        self._task: Optional[asyncio.Task] = None

    @property
    def listen_key(self) -> Optional[str]:
        return self._listen_key

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> str:
        """
        Obtain the listen key and start the refresh task.

        Returns:
            The listen key

        Raises:
            ApiError: If creating the key fails
        """
        if self.is_running:
            return self._listen_key

        if self._listen_key is None:
            response = await self.client.create_listen_key()
            self._listen_key = response.listen_key
            log_system_event(
                logger,
                EventType.LISTEN_KEY_CREATED,
                "Listen key created",
                listen_key=_mask(self._listen_key)
            )

        self._task = asyncio.create_task(self._refresh_loop())
        self._task.set_name("listen_key_refresh")
        self._task.add_done_callback(_retrieve_failure)
        return self._listen_key

    async def refresh(self):
        """
        Send one keepalive now.

        Raises:
            ApiError: If the keepalive call fails
        """
        try:
            await self.client.keepalive_listen_key(self._listen_key)
        except Exception as e:
            logger.error(
                "listen_key_refresh_failed",
                listen_key=_mask(self._listen_key),
                error=str(e),
                error_type=type(e).__name__
            )
            raise

        log_system_event(
            logger,
            EventType.LISTEN_KEY_REFRESHED,
            "Listen key refreshed",
            listen_key=_mask(self._listen_key)
        )

    async def _refresh_loop(self):
        while True:
            await asyncio.sleep(self.interval)
            await self.refresh()

    async def wait(self):
        """Block until the refresh task ends; re-raises its failure."""
        if self._task is not None:
            await self._task

    async def stop(self, close_key: bool = True):
        """
        Stop refreshing and optionally close the listen key.

        Raises:
            ApiError: If a refresh had failed, or closing the key fails
        """
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            # a cancellation of the caller still propagates from here
            await asyncio.wait({task})
            if not task.cancelled():
                task.result()

        if close_key and self._listen_key is not None:
            await self.client.remove_listen_key(self._listen_key)
            log_system_event(
                logger,
                EventType.LISTEN_KEY_CLOSED,
                "Listen key closed",
                listen_key=_mask(self._listen_key)
            )
            self._listen_key = None

    async def __aenter__(self) -> "ListenKeyKeeper":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
