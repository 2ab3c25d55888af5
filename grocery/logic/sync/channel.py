"""Async stream of full-snapshot events over one store subscription.

    async with SnapshotChannel(store, path) as channel:
        async for event in channel:
            ...

Store callbacks may arrive on any thread; they are handed to the owning event
loop with call_soon_threadsafe. Closing the channel cancels the subscription and
ends iteration.
"""
from __future__ import annotations
import asyncio
import logging
from typing import NamedTuple, Optional

from grocery.infra.Remote_Store import RemoteStore, Snapshot, Subscription

logger = logging.getLogger(__name__)

_CLOSED = object()


class SnapshotEvent(NamedTuple):
    snapshot: Optional[Snapshot] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SnapshotChannel:
    def __init__(self, store: RemoteStore, path: str):
        self._store = store
        self.path = path
        self._queue: asyncio.Queue = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._subscription: Optional[Subscription] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self):
        """Subscribe; must be called from the loop that will iterate the channel."""
        if self._subscription is not None or self._closed:
            return self
        self._loop = asyncio.get_running_loop()
        self._subscription = self._store.subscribe(self.path, self._on_snapshot, self._on_error)
        return self

    def _put(self, item):
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            logger.debug("Dropping event for %s, loop is gone", self.path)

    def _on_snapshot(self, snapshot: Snapshot):
        if not self._closed:
            self._put(SnapshotEvent(snapshot=snapshot))

    def _on_error(self, error: Exception):
        if not self._closed:
            self._put(SnapshotEvent(error=error))

    def close(self):
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.cancel()
        self._put(_CLOSED)

    async def __aenter__(self):
        return self.open()

    async def __aexit__(self, *exc):
        self.close()

    def __aiter__(self):
        return self

    async def __anext__(self) -> SnapshotEvent:
        if self._subscription is None and not self._closed:
            self.open()
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item


__all__ = ['SnapshotChannel', 'SnapshotEvent']
