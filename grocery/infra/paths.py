from uuid import uuid4

from grocery.utilities.constants import (
    USERS_NODE, LISTS_NODE, ITEMS_NODE, IMAGES_NODE, IMAGE_SUFFIX
)

# Centralized store and blob paths (single source of truth)


def join(*segments: str) -> str:
    """Join path segments, dropping empty pieces and stray slashes."""
    parts = []
    for seg in segments:
        parts.extend(p for p in str(seg).split('/') if p)
    return '/'.join(parts)


def split(path: str) -> list[str]:
    return [p for p in path.split('/') if p]


def _require(*values: str):
    for v in values:
        if not v or '/' in v:
            raise ValueError(f"invalid path segment: {v!r}")


def lists_path(user_id: str) -> str:
    _require(user_id)
    return join(USERS_NODE, user_id, LISTS_NODE)


def list_path(user_id: str, list_id: str) -> str:
    _require(user_id, list_id)
    return join(lists_path(user_id), list_id)


def items_path(user_id: str, list_id: str) -> str:
    return join(list_path(user_id, list_id), ITEMS_NODE)


def item_path(user_id: str, list_id: str, item_id: str) -> str:
    _require(item_id)
    return join(items_path(user_id, list_id), item_id)


def image_blob_path(user_id: str, list_id: str, image_id: str | None = None) -> str:
    """Blob path for one photo; a fresh UUID is used when no id is given."""
    image_id = image_id or str(uuid4())
    return join(list_path(user_id, list_id), IMAGES_NODE, image_id + IMAGE_SUFFIX)


__all__ = ['join', 'split', 'lists_path', 'list_path', 'items_path', 'item_path', 'image_blob_path']
