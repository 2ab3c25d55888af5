"""Live-collection materialization.

A Materializer mirrors one remote subtree as a local ordered list. Every
snapshot replaces the whole list; nothing is patched in place, and a snapshot
older than the installed one is dropped. Children that do not decode are
skipped. After each rebuild the presentation layer is signalled on the event
bus; subscription errors keep the current list and are published as sync
errors, never retried.
"""
from __future__ import annotations
import logging
from threading import Event, Lock
from typing import Any, Callable, Generic, List, Optional, TypeVar

from grocery.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from grocery.events.event_helpers import publish_collection_changed, publish_sync_error
from grocery.infra.Remote_Store import RemoteStore, Snapshot, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")
Decoder = Callable[[Any, str], T]


def materialize(snapshot: Snapshot, decode: Decoder) -> List[T]:
    """Decode the snapshot's direct children in store order, skipping malformed ones."""
    result: List[T] = []
    for key, value in snapshot.children():
        try:
            result.append(decode(value, key))
        except (ValueError, TypeError) as e:
            logger.warning("Skipping malformed child %s/%s: %s", snapshot.path, key, e)
    return result


class Materializer(Generic[T]):
    def __init__(self, store: RemoteStore, path: str, decode: Decoder, *, user_id: Optional[str] = None,
                 label: str = "data", bus: Optional[EventBus] = None):
        self.store = store
        self.path = path
        self.decode = decode
        self.user_id = user_id
        self.label = label
        self._bus = bus or GLOBAL_EVENT_BUS
        self._items: List[T] = []
        self._lock = Lock()
        self._loaded = Event()
        self._subscription: Optional[Subscription] = None
        self._active = False
        self._sequence = 0
        self.revision = 0
        self.last_error: Optional[Exception] = None

    # --- lifecycle ----------------------------------------------------------
    def subscribe(self):
        if self._active:
            return self
        logger.info("Materializing %s", self.path)
        # Set first: some stores deliver the initial snapshot inside subscribe()
        self._active = True
        self._sequence = 0
        self._subscription = self.store.subscribe(self.path, self._on_snapshot, self._on_error)
        return self

    def unsubscribe(self):
        self._active = False
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.cancel()
            logger.info("Released %s", self.path)

    @property
    def subscribed(self) -> bool:
        return self._active

    def wait_until_loaded(self, timeout: Optional[float] = None) -> bool:
        """Block until the first snapshot or error arrived."""
        return self._loaded.wait(timeout)

    # --- callbacks ----------------------------------------------------------
    def _on_snapshot(self, snapshot: Snapshot):
        if not self._active:
            return  # released; late delivery
        items = materialize(snapshot, self.decode)
        with self._lock:
            if snapshot.sequence < self._sequence:
                logger.debug("Dropping stale snapshot %d of %s (have %d)",
                             snapshot.sequence, self.path, self._sequence)
                return
            self._sequence = snapshot.sequence
            self._items = items
            self.revision += 1
            self.last_error = None
            revision = self.revision
        self._loaded.set()
        publish_collection_changed(self.user_id, self.path, len(items), revision, bus=self._bus)

    def _on_error(self, error: Exception):
        if not self._active:
            return
        logger.error("Subscription on %s failed: %s", self.path, error)
        with self._lock:
            self.last_error = error
        self._loaded.set()
        publish_sync_error(self.user_id, self.path, self.label, str(error), bus=self._bus)

    # --- reads --------------------------------------------------------------
    @property
    def items(self) -> List[T]:
        with self._lock:
            return list(self._items)

    def find(self, entity_id: str) -> Optional[T]:
        with self._lock:
            for item in self._items:
                if getattr(item, "id", None) == entity_id:
                    return item
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


__all__ = ['Materializer', 'materialize']
