"""Registry of open live views, one Materializer per (user, path).

The web layer has no screen lifecycle, so a view is opened on the first read
of a path and stays subscribed until the user's session releases it or its
list is deleted; close_all() runs at shutdown. Callers open item views only
for lists present in the user's list view.
"""
from __future__ import annotations
import logging
from threading import Lock
from typing import Dict, Optional, Tuple

from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.GroceryList import GroceryList
from grocery.events.Event_Bus import EventBus
from grocery.infra import paths
from grocery.infra.Remote_Store import RemoteStore
from grocery.logic.sync.materializer import Materializer

logger = logging.getLogger(__name__)


class LiveViews:
    def __init__(self, store: RemoteStore, bus: Optional[EventBus] = None, wait_seconds: float = 5.0):
        self.store = store
        self.bus = bus
        self.wait_seconds = wait_seconds
        self._views: Dict[Tuple[str, str], Materializer] = {}
        self._lock = Lock()

    def _open(self, user_id: str, path: str, decode, label: str) -> Materializer:
        key = (user_id, path)
        with self._lock:
            view = self._views.get(key)
            created = view is None
            if created:
                view = Materializer(self.store, path, decode, user_id=user_id, label=label, bus=self.bus)
                self._views[key] = view
        if created:
            view.subscribe()
        if not view.wait_until_loaded(self.wait_seconds):
            logger.warning("No snapshot for %s after %.1fs", path, self.wait_seconds)
        return view

    def lists(self, user_id: str) -> Materializer:
        return self._open(user_id, paths.lists_path(user_id), GroceryList.from_dict, "lists")

    def items(self, user_id: str, list_id: str) -> Materializer:
        return self._open(user_id, paths.items_path(user_id, list_id), GroceryItem.from_dict, "items")

    def release(self, user_id: str) -> int:
        """Unsubscribe every view the user holds; returns how many were released."""
        with self._lock:
            keys = [k for k in self._views if k[0] == user_id]
            views = [self._views.pop(k) for k in keys]
        for view in views:
            view.unsubscribe()
        return len(views)

    def release_list(self, user_id: str, list_id: str) -> bool:
        """Drop the item view of a deleted list."""
        with self._lock:
            view = self._views.pop((user_id, paths.items_path(user_id, list_id)), None)
        if view is None:
            return False
        view.unsubscribe()
        return True

    def close_all(self):
        with self._lock:
            views = list(self._views.values())
            self._views.clear()
        for view in views:
            view.unsubscribe()
        logger.info("Closed %d live views", len(views))

    def __len__(self) -> int:
        with self._lock:
            return len(self._views)


__all__ = ['LiveViews']
