"""Simple Event Bus / Observer implementation connecting live views to the presentation layer.

Event names used so far:
  grocery.collection_changed -> payload {"user_id": str, "path": str, "count": int, "revision": int}
  grocery.sync_error -> payload {"user_id": str, "path": str, "label": str, "error": str}
  ui.notice -> payload {"user_id": str | None, "message": str, "level": "info" | "error"}

Subscribers can be callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from threading import Lock
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
COLLECTION_CHANGED = "grocery.collection_changed"
SYNC_ERROR = "grocery.sync_error"
NOTICE = "ui.notice"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)
		self._lock = Lock()

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		with self._lock:
			if callback not in self._subscribers[event_name]:
				self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		with self._lock:
			try:
				self._subscribers[event_name].remove(callback)
			except (ValueError, KeyError):
				pass

	def publish(self, event_name: str, payload: Any):
		with self._lock:
			callbacks = list(self._subscribers.get(event_name, []))
		for cb in callbacks:
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'COLLECTION_CHANGED', 'SYNC_ERROR', 'NOTICE',
]
