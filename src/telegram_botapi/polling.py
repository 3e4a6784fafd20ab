"""Long polling of ``getUpdates`` into a bounded update channel.

A poller keeps an offset cursor, repeatedly fetches updates starting at the
cursor and pushes every new update into its channel. The channel is bounded,
so a slow consumer blocks the poller instead of losing updates.

Lifecycle is one shot: ``IDLE -> RUNNING -> STOPPING -> STOPPED``. Stopping is
cooperative: the signal is checked once per iteration, so a fetch that is in
flight completes (and its updates are delivered) before the channel closes.
"""

from __future__ import annotations

import asyncio
import queue
import threading
from collections.abc import AsyncIterator, Iterator
from contextlib import suppress
from enum import Enum
from typing import TYPE_CHECKING, cast

from .configs import UpdateConfig
from .core.logger import get_logger, log_exception
from .exceptions import PollerError, TelegramAPIError, TransportError
from .types import Update

if TYPE_CHECKING:
    from .async_client import AsyncBotAPI
    from .client import BotAPI

logger = get_logger("polling")

DEFAULT_RETRY_DELAY = 3.0

_CLOSED = object()


class PollerState(str, Enum):
    """Lifecycle states of an update poller."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


def advance_cursor(offset: int, updates: list[Update]) -> tuple[int, list[Update]]:
    """Filter a fetched batch against the cursor.

    Returns the new offset and the updates to deliver, in received order.
    Updates below the cursor were already delivered and are dropped.
    """
    fresh: list[Update] = []
    for update in updates:
        if update.update_id >= offset:
            offset = update.update_id + 1
            fresh.append(update)
    return offset, fresh


# ----------------------------------------------------------------------
# Threaded poller
# ----------------------------------------------------------------------


class UpdatesChannel:
    """Bounded, closable stream of updates shared between threads.

    Iterating yields updates until the channel is closed and drained.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self._closed = False
        self._marker_queued = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    def __len__(self) -> int:
        return self._queue.qsize()

    def put(self, update: Update) -> None:
        """Add an update, blocking while the channel is full."""
        if self._closed:
            raise PollerError("update channel is closed")
        self._queue.put(update)

    def close(self) -> None:
        """Mark the end of the stream without blocking.

        Updates already in the channel are still delivered. When the channel
        is full, the end marker is queued as soon as a reader makes room.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._offer_marker()

    def _offer_marker(self) -> None:
        # Caller holds the lock.
        if self._marker_queued:
            return
        try:
            self._queue.put_nowait(_CLOSED)
        except queue.Full:
            return
        self._marker_queued = True

    def get(self, timeout: float | None = None) -> Update | None:
        """Take the next update.

        Returns None once the channel is closed and drained.

        Raises:
            queue.Empty: If no update arrived within ``timeout`` seconds.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # Leave the marker for other consumers.
            with self._lock:
                self._marker_queued = False
                self._offer_marker()
            return None
        if self._closed:
            with self._lock:
                self._offer_marker()
        return cast(Update, item)

    def clear(self) -> int:
        """Discard pending updates and return how many were dropped."""
        dropped = 0
        with self._lock:
            while True:
                try:
                    item = self._queue.get_nowait()
                except queue.Empty:
                    break
                if item is not _CLOSED:
                    dropped += 1
            self._marker_queued = False
            if self._closed:
                self._offer_marker()
        return dropped

    def __iter__(self) -> Iterator[Update]:
        while True:
            update = self.get()
            if update is None:
                return
            yield update


class UpdatePoller:
    """Fetch updates in a background thread.

    Example:
        ```python
        poller = UpdatePoller(bot, UpdateConfig(timeout=60))
        for update in poller.start():
            if update.message:
                print(update.message.text)
        ```
    """

    def __init__(
        self,
        api: BotAPI,
        config: UpdateConfig,
        buffer_size: int = 100,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        """Initialize the poller.

        Args:
            api: Client used to call ``getUpdates``
            config: Initial offset, batch limit and long-poll timeout
            buffer_size: Capacity of the update channel
            retry_delay: Fixed delay in seconds before retrying a failed fetch
        """
        self._api = api
        self._config = config
        self._offset = config.offset
        self._retry_delay = retry_delay
        self._shutdown = threading.Event()
        self._lock = threading.Lock()
        self._state = PollerState.IDLE
        self._thread: threading.Thread | None = None
        self.updates = UpdatesChannel(buffer_size)

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def offset(self) -> int:
        """Identifier of the next update to request."""
        return self._offset

    @property
    def is_running(self) -> bool:
        return self._state is PollerState.RUNNING

    def start(self) -> UpdatesChannel:
        """Start polling and return the update channel.

        Raises:
            PollerError: If the poller was already started.
        """
        with self._lock:
            if self._state is not PollerState.IDLE:  # one shot
                raise PollerError(f"poller cannot be started from state {self._state.value}")
            self._state = PollerState.RUNNING

        self._thread = threading.Thread(target=self._run, name="telegram-update-poller", daemon=True)
        self._thread.start()
        logger.info("Update poller started at offset %d", self._offset)
        return self.updates

    def stop(self) -> None:
        """Signal shutdown; the current fetch is allowed to finish.

        Raises:
            PollerError: If the poller was never started or was already stopped.
        """
        with self._lock:
            if self._state is PollerState.IDLE:
                raise PollerError("poller was not started")
            if self._shutdown.is_set():
                raise PollerError("poller was already stopped")
            self._shutdown.set()
            if self._state is PollerState.RUNNING:
                self._state = PollerState.STOPPING

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the polling thread to exit. Returns True when it has."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def poll_once(self) -> list[Update]:
        """Fetch one batch and advance the cursor past it.

        Raises:
            TransportError: On connection, timeout or decoding failures.
            TelegramAPIError: If the API rejects the call.
        """
        batch = self._api.get_updates(self._config.with_offset(self._offset))
        self._offset, fresh = advance_cursor(self._offset, batch)
        return fresh

    def _run(self) -> None:
        try:
            while not self._shutdown.is_set():
                try:
                    updates = self.poll_once()
                except (TransportError, TelegramAPIError) as exc:
                    logger.warning(
                        "Failed to get updates, retrying in %.1f seconds: %s",
                        self._retry_delay,
                        exc,
                    )
                    self._shutdown.wait(self._retry_delay)
                    continue

                for update in updates:
                    self.updates.put(update)
        except Exception as exc:
            log_exception(logger, exc, "Update poller failed")
            raise
        finally:
            self.updates.close()
            with self._lock:
                self._state = PollerState.STOPPED
            logger.info("Update poller stopped at offset %d", self._offset)


# ----------------------------------------------------------------------
# asyncio poller
# ----------------------------------------------------------------------


class AsyncUpdatesChannel:
    """asyncio counterpart of :class:`UpdatesChannel`."""

    def __init__(self, maxsize: int = 100) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._marker_queued = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return self._queue.qsize()

    async def put(self, update: Update) -> None:
        if self._closed:
            raise PollerError("update channel is closed")
        await self._queue.put(update)

    def close(self) -> None:
        """Mark the end of the stream without waiting for room."""
        if self._closed:
            return
        self._closed = True
        self._offer_marker()

    def _offer_marker(self) -> None:
        if self._marker_queued:
            return
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            return
        self._marker_queued = True

    async def get(self, timeout: float | None = None) -> Update | None:
        """Take the next update, or None once closed and drained.

        Raises:
            asyncio.TimeoutError: If no update arrived within ``timeout`` seconds.
        """
        item = await asyncio.wait_for(self._queue.get(), timeout)
        if item is _CLOSED:
            self._marker_queued = False
            self._offer_marker()
            return None
        if self._closed:
            self._offer_marker()
        return cast(Update, item)

    def clear(self) -> int:
        dropped = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            if item is not _CLOSED:
                dropped += 1
        self._marker_queued = False
        if self._closed:
            self._offer_marker()
        return dropped

    async def __aiter__(self) -> AsyncIterator[Update]:
        while True:
            update = await self.get()
            if update is None:
                return
            yield update


class AsyncUpdatePoller:
    """Fetch updates in an asyncio task.

    Same contract as :class:`UpdatePoller`; ``start()`` must be called from
    a running event loop.
    """

    def __init__(
        self,
        api: AsyncBotAPI,
        config: UpdateConfig,
        buffer_size: int = 100,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        self._api = api
        self._config = config
        self._offset = config.offset
        self._retry_delay = retry_delay
        self._shutdown = asyncio.Event()
        self._state = PollerState.IDLE
        self._task: asyncio.Task[None] | None = None
        self.updates = AsyncUpdatesChannel(buffer_size)

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def is_running(self) -> bool:
        return self._state is PollerState.RUNNING

    def start(self) -> AsyncUpdatesChannel:
        """Schedule polling on the running loop and return the channel.

        Raises:
            PollerError: If the poller was already started.
        """
        if self._state is not PollerState.IDLE:
            raise PollerError(f"poller cannot be started from state {self._state.value}")
        self._state = PollerState.RUNNING
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="telegram-update-poller"
        )
        logger.info("Update poller started at offset %d", self._offset)
        return self.updates

    def stop(self) -> None:
        """Signal shutdown; the current fetch is allowed to finish.

        Raises:
            PollerError: If the poller was never started or was already stopped.
        """
        if self._state is PollerState.IDLE:
            raise PollerError("poller was not started")
        if self._shutdown.is_set():
            raise PollerError("poller was already stopped")
        self._shutdown.set()
        if self._state is PollerState.RUNNING:
            self._state = PollerState.STOPPING

    async def join(self, timeout: float | None = None) -> bool:
        """Wait for the polling task to finish. Returns True when it has.

        An exception that ended the task is re-raised here.
        """
        if self._task is None:
            return True
        done, _ = await asyncio.wait({self._task}, timeout=timeout)
        if not done:
            return False
        if not self._task.cancelled():
            exc = self._task.exception()
            if exc is not None:
                raise exc
        return True

    async def poll_once(self) -> list[Update]:
        batch = await self._api.get_updates(self._config.with_offset(self._offset))
        self._offset, fresh = advance_cursor(self._offset, batch)
        return fresh

    async def _backoff(self) -> None:
        # Returns early when shutdown is signalled.
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._shutdown.wait(), self._retry_delay)

    async def _run(self) -> None:
        try:
            while not self._shutdown.is_set():
                try:
                    updates = await self.poll_once()
                except (TransportError, TelegramAPIError) as exc:
                    logger.warning(
                        "Failed to get updates, retrying in %.1f seconds: %s",
                        self._retry_delay,
                        exc,
                    )
                    await self._backoff()
                    continue

                for update in updates:
                    await self.updates.put(update)
        except asyncio.CancelledError:
            logger.info("Update poller cancelled")
            raise
        except Exception as exc:
            log_exception(logger, exc, "Update poller failed")
            raise
        finally:
            self._state = PollerState.STOPPED
            self.updates.close()
            logger.info("Update poller stopped at offset %d", self._offset)
