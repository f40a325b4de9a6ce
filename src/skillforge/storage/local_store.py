"""Namespaced fallback store used when the remote backend is unavailable.

Collections are stored as JSON arrays under ``skillforge_{uid}_{collection}``.
Datetime values are written as ``{"__type": "Date", "value": <iso>}`` so that
they come back as real ``datetime`` objects instead of strings.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from skillforge.storage.key_value import KeyValueStorage, StorageQuotaExceededError

logger = logging.getLogger(__name__)

NAMESPACE_PREFIX = "skillforge_"
_DATE_TAG = "Date"


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"__type": _DATE_TAG, "value": value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode_object(obj: dict[str, Any]) -> Any:
    if obj.get("__type") == _DATE_TAG and "value" in obj:
        return datetime.fromisoformat(obj["value"])
    return obj


def serialize(data: Any) -> str:
    """Serialize ``data`` to JSON, tagging datetimes."""
    return json.dumps(data, default=_encode_value, ensure_ascii=False)


def deserialize(text: str) -> Any:
    """Inverse of :func:`serialize`."""
    return json.loads(text, object_hook=_decode_object)


class LocalFallbackStore:
    """Per-user collections on top of a :class:`KeyValueStorage`."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    @staticmethod
    def key_for(uid: str, collection: str) -> str:
        return f"{NAMESPACE_PREFIX}{uid}_{collection}"

    def _write(self, key: str, serialized: str) -> None:
        try:
            self.storage.set_item(key, serialized)
        except StorageQuotaExceededError:
            logger.warning("Storage quota exceeded writing %s; evicting old entries", key)
            self._evict_oldest()
            # A second failure propagates to the caller.
            self.storage.set_item(key, serialized)
            logger.info("Retry after eviction succeeded for %s", key)

    def _evict_oldest(self) -> None:
        """Remove the oldest half of this system's namespaced entries."""
        keys = [key for key in self.storage.keys() if key.startswith(NAMESPACE_PREFIX)]
        evicted = keys[: len(keys) // 2]
        for key in evicted:
            self.storage.remove_item(key)
        logger.warning("Evicted %d local storage entries", len(evicted))

    def save(self, uid: str, collection: str, items: list[dict[str, Any]]) -> None:
        """Replace a whole collection."""
        self._write(self.key_for(uid, collection), serialize(items))
        logger.debug("Saved %d %s items for %s", len(items), collection, uid)

    def load(self, uid: str, collection: str) -> list[dict[str, Any]]:
        """Load a collection; missing or unreadable collections are empty."""
        stored = self.storage.get_item(self.key_for(uid, collection))
        if not stored:
            return []
        try:
            data = deserialize(stored)
        except (json.JSONDecodeError, ValueError):
            logger.exception("Corrupt %s collection for %s; treating as empty", collection, uid)
            return []
        return data if isinstance(data, list) else []

    def add_item(
        self,
        uid: str,
        collection: str,
        item: dict[str, Any],
        *,
        limit: int | None = None,
    ) -> None:
        """Prepend ``item`` (newest first), optionally keeping only ``limit`` items."""
        items = self.load(uid, collection)
        items.insert(0, item)
        if limit is not None:
            del items[limit:]
        self.save(uid, collection, items)

    def update_item(
        self, uid: str, collection: str, item_id: str, fields: Mapping[str, Any]
    ) -> bool:
        """Merge ``fields`` into the item with ``item_id``.

        Returns:
            True if the item existed and was updated.
        """
        items = self.load(uid, collection)
        for index, item in enumerate(items):
            if item.get("id") == item_id:
                items[index] = {**item, **fields}
                self.save(uid, collection, items)
                return True
        return False

    def delete_item(self, uid: str, collection: str, item_id: str) -> bool:
        """Remove the item with ``item_id``; returns True if something was removed."""
        items = self.load(uid, collection)
        remaining = [item for item in items if item.get("id") != item_id]
        if len(remaining) == len(items):
            return False
        self.save(uid, collection, remaining)
        return True

    def load_document(self, uid: str, name: str) -> dict[str, Any] | None:
        """Load a single JSON object (e.g. the user profile)."""
        stored = self.storage.get_item(self.key_for(uid, name))
        if not stored:
            return None
        try:
            data = deserialize(stored)
        except (json.JSONDecodeError, ValueError):
            logger.exception("Corrupt %s document for %s", name, uid)
            return None
        return data if isinstance(data, dict) else None

    def save_document(self, uid: str, name: str, document: dict[str, Any]) -> None:
        self._write(self.key_for(uid, name), serialize(document))
