"""Remote hierarchical key-value store: snapshots, subscriptions and the in-process backend.

Every store exposes the same four operations the application needs:
  set(path, record)        -> Future, full overwrite of the node
  remove(path)             -> Future, removes the node and everything below it
  push_key()               -> fresh unique key, generated locally
  subscribe(path, on_snapshot, on_error) -> Subscription

A subscription delivers the full current state of the subtree (a Snapshot)
once on subscribe and again after every change below the path.
"""
from __future__ import annotations
import copy
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future
from threading import Lock
from typing import Any, Callable, Iterator, List, Optional, Tuple

from grocery.infra.paths import join, split
from grocery.infra.push_ids import new_push_id

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[["Snapshot"], None]
ErrorCallback = Callable[[Exception], None]


def _child_order(key: str):
    # Integer-like keys first (numerically), then the rest lexicographically
    try:
        n = int(key)
        if str(n) == key and -2 ** 31 <= n < 2 ** 31:
            return (0, n, "")
    except ValueError:
        pass
    return (1, 0, key)


class Snapshot:
    """Immutable view of a subtree's value at one point in time.

    sequence orders snapshots of one subscription: a higher number reflects a
    later write. 0 means unordered.
    """

    def __init__(self, path: str, value: Any, sequence: int = 0):
        self.path = join(path)
        self.sequence = sequence
        if isinstance(value, dict):
            value = {k: value[k] for k in sorted(value, key=_child_order)}
        self.value = value

    @property
    def exists(self) -> bool:
        return self.value is not None

    def children(self) -> Iterator[Tuple[str, Any]]:
        """Direct children as (key, value) pairs in store order."""
        if isinstance(self.value, dict):
            yield from self.value.items()

    def __len__(self) -> int:
        return len(self.value) if isinstance(self.value, dict) else 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self.path == other.path and self.value == other.value

    def __repr__(self) -> str:
        return f"Snapshot({self.path!r}, {len(self)} children)"


class Subscription:
    """Cancellable handle for one live subscription."""

    def __init__(self, path: str, on_snapshot: SnapshotCallback, on_error: Optional[ErrorCallback] = None,
                 on_cancel: Optional[Callable[["Subscription"], None]] = None):
        self.path = join(path)
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._on_cancel = on_cancel
        self._active = True
        self._lock = Lock()

    @property
    def active(self) -> bool:
        return self._active

    def deliver(self, snapshot: Snapshot):
        if self._active:
            self._on_snapshot(snapshot)

    def fail(self, error: Exception):
        if not self._active:
            return
        if self._on_error is not None:
            self._on_error(error)
        else:
            logger.error("Unhandled subscription error on %s: %s", self.path, error)

    def cancel(self):
        with self._lock:
            if not self._active:
                return
            self._active = False
        if self._on_cancel is not None:
            self._on_cancel(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.cancel()


def completed(result: Any = None) -> Future:
    fut: Future = Future()
    fut.set_result(result)
    return fut


def failed(error: BaseException) -> Future:
    fut: Future = Future()
    fut.set_exception(error)
    return fut


class RemoteStore(ABC):
    def push_key(self) -> str:
        return new_push_id()

    @abstractmethod
    def set(self, path: str, value: Any) -> Future: ...

    @abstractmethod
    def remove(self, path: str) -> Future: ...

    @abstractmethod
    def get(self, path: str) -> Any: ...

    @abstractmethod
    def subscribe(self, path: str, on_snapshot: SnapshotCallback,
                  on_error: Optional[ErrorCallback] = None) -> Subscription: ...

    def close(self) -> None:
        pass


def _overlaps(a: str, b: str) -> bool:
    sa, sb = split(a), split(b)
    n = min(len(sa), len(sb))
    return sa[:n] == sb[:n]


class InMemoryRemoteStore(RemoteStore):
    """Process-local store with realtime semantics; writes are acknowledged immediately
    and subscribers are notified synchronously on the writing thread."""

    def __init__(self):
        self._root: dict = {}
        self._lock = Lock()
        self._subscriptions: List[Subscription] = []
        self._sequence = 0

    # --- tree helpers -----------------------------------------------------
    def _node(self, segments: List[str]) -> Any:
        node: Any = self._root
        for seg in segments:
            if not isinstance(node, dict) or seg not in node:
                return None
            node = node[seg]
        return node

    def _write(self, segments: List[str], value: Any):
        if not segments:
            self._root = value if isinstance(value, dict) else {}
            return
        node = self._root
        trail = []
        for seg in segments[:-1]:
            child = node.get(seg)
            if not isinstance(child, dict):
                child = {}
                node[seg] = child
            trail.append((node, seg))
            node = child
        if value is None or value == {}:
            node.pop(segments[-1], None)
        else:
            node[segments[-1]] = value
        # Nodes without children do not exist
        for parent, seg in reversed(trail):
            if parent.get(seg) == {}:
                del parent[seg]

    def _notify(self, path: str):
        with self._lock:
            # Delivery runs unlocked, so concurrent writers may deliver out of order
            pending = [(s, Snapshot(s.path, copy.deepcopy(self._node(split(s.path))), self._sequence))
                       for s in self._subscriptions if _overlaps(s.path, path)]
        for sub, snap in pending:
            sub.deliver(snap)

    # --- RemoteStore -----------------------------------------------------
    def set(self, path: str, value: Any) -> Future:
        with self._lock:
            self._write(split(path), copy.deepcopy(value))
            self._sequence += 1
        logger.debug("set %s", path)
        self._notify(path)
        return completed()

    def remove(self, path: str) -> Future:
        with self._lock:
            self._write(split(path), None)
            self._sequence += 1
        logger.debug("remove %s", path)
        self._notify(path)
        return completed()

    def get(self, path: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._node(split(path)))

    def subscribe(self, path: str, on_snapshot: SnapshotCallback,
                  on_error: Optional[ErrorCallback] = None) -> Subscription:
        sub = Subscription(path, on_snapshot, on_error, on_cancel=self._drop)
        with self._lock:
            self._subscriptions.append(sub)
            initial = Snapshot(sub.path, copy.deepcopy(self._node(split(sub.path))), self._sequence)
        sub.deliver(initial)
        return sub

    def _drop(self, sub: Subscription):
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

    @property
    def subscription_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def close(self) -> None:
        with self._lock:
            subs = list(self._subscriptions)
        for s in subs:
            s.cancel()


__all__ = [
    'Snapshot', 'Subscription', 'RemoteStore', 'InMemoryRemoteStore', 'completed', 'failed',
]
