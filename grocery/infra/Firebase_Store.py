"""Remote store backed by the Firebase Realtime Database (firebase_admin.db).

Writes run on a small thread pool and are returned as futures. Subscriptions use
the SDK's streaming listener; its put/patch events are applied to a local copy
of the subtree so every delivery is a full Snapshot, like the other backends.
"""
from __future__ import annotations
import copy
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Any, Optional

from firebase_admin import db
from firebase_admin.exceptions import FirebaseError

from grocery.infra.paths import join, split
from grocery.infra.Remote_Store import (
    RemoteStore, Snapshot, Subscription, SnapshotCallback, ErrorCallback
)
from grocery.utilities.errors import RemoteStoreError

logger = logging.getLogger(__name__)


def apply_event(tree: Any, event_type: str, path: str, data: Any) -> Any:
    """Apply one streaming event to a local copy of a subtree and return the new tree.

    "put" replaces the node at path (None deletes it); "patch" sets each child of
    path that appears in data.
    """
    segments = split(path)
    if event_type == "patch":
        if not isinstance(data, dict):
            return tree
        for key, value in data.items():
            tree = apply_event(tree, "put", join(path, key), value)
        return tree
    if event_type != "put":
        return tree
    if not segments:
        return copy.deepcopy(data)

    root = tree if isinstance(tree, dict) else {}
    node = root
    trail = []
    for seg in segments[:-1]:
        child = node.get(seg)
        if not isinstance(child, dict):
            child = {}
            node[seg] = child
        trail.append((node, seg))
        node = child
    if data is None:
        node.pop(segments[-1], None)
    else:
        node[segments[-1]] = copy.deepcopy(data)
    for parent, seg in reversed(trail):
        if parent.get(seg) == {}:
            del parent[seg]
    return root or None


class _Listener:
    """Keeps one subtree copy up to date for a subscription."""

    def __init__(self, subscription: Subscription):
        self.subscription = subscription
        self.tree: Any = None
        self.registration = None
        self.sequence = 0
        self._lock = Lock()

    def on_event(self, event):
        try:
            with self._lock:
                self.tree = apply_event(self.tree, event.event_type, event.path, event.data)
                self.sequence += 1
                snap = Snapshot(self.subscription.path, copy.deepcopy(self.tree), self.sequence)
        except Exception as e:
            logger.error("Could not apply %s event on %s: %s", getattr(event, 'event_type', '?'),
                         self.subscription.path, e)
            self.subscription.fail(RemoteStoreError(str(e)))
            return
        self.subscription.deliver(snap)


class FirebaseRemoteStore(RemoteStore):
    def __init__(self, app=None, workers: int = 4):
        self._app = app
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="grocery-store")
        self._listeners: dict[int, _Listener] = {}
        self._lock = Lock()

    def _ref(self, path: str):
        return db.reference('/' + join(path), app=self._app)

    def _run(self, label: str, path: str, fn) -> Future:
        def call():
            try:
                return fn()
            except FirebaseError as e:
                logger.error("%s %s failed: %s", label, path, e)
                raise RemoteStoreError(f"{label} {path} failed: {e}") from e
        return self._executor.submit(call)

    def set(self, path: str, value: Any) -> Future:
        return self._run("set", path, lambda: self._ref(path).set(value))

    def remove(self, path: str) -> Future:
        return self._run("remove", path, lambda: self._ref(path).delete())

    def get(self, path: str) -> Any:
        try:
            return self._ref(path).get()
        except FirebaseError as e:
            raise RemoteStoreError(f"get {path} failed: {e}") from e

    def subscribe(self, path: str, on_snapshot: SnapshotCallback,
                  on_error: Optional[ErrorCallback] = None) -> Subscription:
        sub = Subscription(path, on_snapshot, on_error, on_cancel=self._close_listener)
        listener = _Listener(sub)
        with self._lock:
            self._listeners[id(sub)] = listener
        try:
            listener.registration = self._ref(path).listen(listener.on_event)
            logger.info("Listening on %s", sub.path)
        except (FirebaseError, ValueError) as e:
            logger.error("Could not listen on %s: %s", sub.path, e)
            sub.fail(RemoteStoreError(str(e)))
        return sub

    def _close_listener(self, sub: Subscription):
        with self._lock:
            listener = self._listeners.pop(id(sub), None)
        if listener is not None and listener.registration is not None:
            listener.registration.close()
            logger.info("Stopped listening on %s", sub.path)

    def close(self) -> None:
        with self._lock:
            listeners = list(self._listeners.values())
        for listener in listeners:
            listener.subscription.cancel()
        self._executor.shutdown(wait=False)


__all__ = ['FirebaseRemoteStore', 'apply_event']
