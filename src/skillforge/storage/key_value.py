"""Durable key-value storage with a finite capacity.

The fallback store only needs four primitives (get, set, remove, enumerate
keys). ``SqlKeyValueStorage`` implements them on the shared SQLAlchemy
database and enforces a byte quota so that writes can fail the same way a
full browser storage area does.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod

from sqlalchemy import func, select

from skillforge.data.db import get_session
from skillforge.data.models import StorageEntry

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class StorageQuotaExceededError(OSError):
    """Raised when a write would exceed the storage capacity."""


class KeyValueStorage(ABC):
    """Abstract string-to-string storage."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``.

        Raises:
            StorageQuotaExceededError: If the write does not fit.
        """

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return all keys in enumeration (insertion) order."""


def _quota_from_env() -> int:
    raw = os.getenv("SKILLFORGE_STORAGE_QUOTA_BYTES")
    if not raw:
        return DEFAULT_QUOTA_BYTES
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid SKILLFORGE_STORAGE_QUOTA_BYTES=%r", raw)
        return DEFAULT_QUOTA_BYTES


class SqlKeyValueStorage(KeyValueStorage):
    """Key-value storage persisted in the ``storage_entries`` table.

    Usage is measured as the total length of keys plus values, which is how
    browser storage areas account for their quota.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.quota_bytes = quota_bytes if quota_bytes is not None else _quota_from_env()

    def get_item(self, key: str) -> str | None:
        with get_session() as session:
            entry = session.execute(
                select(StorageEntry).where(StorageEntry.key == key)
            ).scalar_one_or_none()
            return entry.value if entry else None

    def set_item(self, key: str, value: str) -> None:
        with get_session() as session:
            used = session.execute(
                select(
                    func.coalesce(
                        func.sum(func.length(StorageEntry.key) + func.length(StorageEntry.value)),
                        0,
                    )
                ).where(StorageEntry.key != key)
            ).scalar_one()
            if used + len(key) + len(value) > self.quota_bytes:
                raise StorageQuotaExceededError(
                    f"Writing {key!r} would exceed the storage quota of {self.quota_bytes} bytes"
                )

            entry = session.execute(
                select(StorageEntry).where(StorageEntry.key == key)
            ).scalar_one_or_none()
            if entry is None:
                session.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value

    def remove_item(self, key: str) -> None:
        with get_session() as session:
            entry = session.execute(
                select(StorageEntry).where(StorageEntry.key == key)
            ).scalar_one_or_none()
            if entry is not None:
                session.delete(entry)

    def keys(self) -> list[str]:
        with get_session() as session:
            return list(session.execute(select(StorageEntry.key).order_by(StorageEntry.id)).scalars())
