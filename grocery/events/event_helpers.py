"""Event helper utilities.

Thin publishing helpers so callers never build payload dicts by hand.

Quick import:
    from grocery.events.event_helpers import (
        publish_notice, publish_collection_changed, publish_sync_error
    )

"""
from __future__ import annotations
from typing import Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS, COLLECTION_CHANGED, SYNC_ERROR, NOTICE
)

__all__ = [
    'publish_notice', 'publish_collection_changed', 'publish_sync_error',
    'COLLECTION_CHANGED', 'SYNC_ERROR', 'NOTICE',
]


def publish_notice(user_id: Optional[str], message: str, level: str = "info", bus: Optional[EventBus] = None):
    """Publish a user-visible notice."""
    (bus or GLOBAL_EVENT_BUS).publish(NOTICE, {
        'user_id': user_id,
        'message': message,
        'level': level,
    })


def publish_collection_changed(user_id: Optional[str], path: str, count: int, revision: int,
                               bus: Optional[EventBus] = None):
    """Publish that a live view rebuilt its collection."""
    (bus or GLOBAL_EVENT_BUS).publish(COLLECTION_CHANGED, {
        'user_id': user_id,
        'path': path,
        'count': count,
        'revision': revision,
    })


def publish_sync_error(user_id: Optional[str], path: str, label: str, error: str,
                       bus: Optional[EventBus] = None):
    """Publish that a live view's subscription reported an error."""
    (bus or GLOBAL_EVENT_BUS).publish(SYNC_ERROR, {
        'user_id': user_id,
        'path': path,
        'label': label,
        'error': error,
    })
