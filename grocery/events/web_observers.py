"""Web-facing observers for user-visible notices.

A NoticeFeed subscribes to an event bus for:
  - ui.notice
  - grocery.sync_error

and stores a lightweight in-memory ring buffer of recent notices that the web
layer (FastAPI endpoint) hands out to polling clients, the way the mobile
screens showed toasts.

Design:
  * Each notice is stored with an auto-increment integer id (cursor) so clients
    can request only newer entries (since=<last_id_seen>).
  * Every entry carries the user id it belongs to; reads are filtered by user
    so no notice leaks across accounts.
  * A Lock guards the buffer since bus callbacks arrive from worker and
    listener threads.
  * A max_events cap prevents unbounded memory growth.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from grocery.utilities.constants import NOTICE_LOAD_FAILED
from .Event_Bus import EventBus, NOTICE, SYNC_ERROR

MAX_EVENTS = 300  # keep a few hundred recent notices


class NoticeFeed:
    def __init__(self, max_events: int = MAX_EVENTS):
        self.max_events = max_events
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self._bus: Optional[EventBus] = None

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        if not isinstance(payload, dict):
            return
        if event_name == SYNC_ERROR:
            message = NOTICE_LOAD_FAILED.format(what=payload.get('label', 'data'), reason=payload.get('error', ''))
            level = 'error'
        else:
            message = payload.get('message', '')
            level = payload.get('level', 'info')
        with self._lock:
            self._events.append({
                'id': self._next_id,
                'type': event_name,
                'user_id': payload.get('user_id'),
                'message': message,
                'level': level,
                'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            })
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def start(self, bus: EventBus):
        """Idempotent start: subscribe observers once."""
        if self._bus is bus:
            return self
        if self._bus is not None:
            self.stop()
        bus.subscribe(NOTICE, self._record)
        bus.subscribe(SYNC_ERROR, self._record)
        self._bus = bus
        return self

    def stop(self):
        if self._bus is None:
            return
        self._bus.unsubscribe(NOTICE, self._record)
        self._bus.unsubscribe(SYNC_ERROR, self._record)
        self._bus = None

    def get_events(self, user_id: Optional[str], since: int | None = None) -> Dict[str, Any]:
        """Return this user's notices newer than 'since' (exclusive).

        If since is None, returns every buffered notice of the user.
        Response includes next_cursor (largest id seen) so the client can poll with since=next_cursor.
        """
        with self._lock:
            mine = [e for e in self._events if e['user_id'] == user_id]
            data = mine if since is None else [e for e in mine if e['id'] > since]
            next_cursor = mine[-1]['id'] if mine else (since or 0)
        return {'events': [{k: v for k, v in e.items() if k != 'user_id'} for e in data],
                'next_cursor': next_cursor}


__all__ = ['NoticeFeed', 'MAX_EVENTS']
