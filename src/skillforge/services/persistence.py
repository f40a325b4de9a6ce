"""Persistence providers: one interface, a remote and a local implementation.

The data access layer talks to a single :class:`PersistenceProvider` chosen
once by :func:`select_persistence`; no method branches on backend mode.
Records handed to a provider use camelCase keys with ``datetime`` values;
the remote provider converts them to ISO-8601 strings on the way out and
the normalizer converts them back on the way in.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from skillforge.services.normalizer import normalize_records, parse_datetime
from skillforge.services.remote_backend import RemoteBackend
from skillforge.storage.local_store import LocalFallbackStore

logger = logging.getLogger(__name__)

__all__ = [
    "LocalPersistence",
    "PersistenceError",
    "PersistenceProvider",
    "RemotePersistence",
    "generate_id",
    "select_persistence",
]

PROFILE_DOCUMENT = "profile"
# Child nodes of ``users/{uid}`` that are collections, not profile fields.
USER_COLLECTIONS = ("goals", "roadmaps", "interviews", "activities", "notifications")


class PersistenceError(RuntimeError):
    """Raised to callers when a create/update/delete could not be persisted."""


def generate_id() -> str:
    """Return a local record id: millisecond timestamp plus a random suffix."""
    return f"{time.time_ns() // 1_000_000}-{secrets.token_hex(5)}"


def _to_wire(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {key: _to_wire(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_to_wire(item) for item in value]
    return value


class PersistenceProvider(ABC):
    """Collection and profile storage for one deployment mode."""

    name: str = "abstract"

    @abstractmethod
    async def list_records(
        self, uid: str, collection: str, *, sort_field: str = "createdAt"
    ) -> list[dict[str, Any]]:
        """Return all records of a collection, newest first."""

    @abstractmethod
    async def get_record(self, uid: str, collection: str, record_id: str) -> dict[str, Any] | None:
        """Return one record or None."""

    @abstractmethod
    async def add_record(
        self,
        uid: str,
        collection: str,
        record: dict[str, Any],
        *,
        limit: int | None = None,
    ) -> str:
        """Store a new record and return its generated id.

        ``limit`` caps the collection length where the backend supports it.
        """

    @abstractmethod
    async def update_record(
        self, uid: str, collection: str, record_id: str, fields: dict[str, Any]
    ) -> bool:
        """Merge ``fields`` into a record; False if it does not exist."""

    @abstractmethod
    async def update_records(
        self, uid: str, collection: str, updates: dict[str, dict[str, Any]]
    ) -> None:
        """Apply several ``{record_id: fields}`` merges at once."""

    @abstractmethod
    async def delete_record(self, uid: str, collection: str, record_id: str) -> bool:
        """Delete a record; False if it did not exist."""

    @abstractmethod
    async def get_profile(self, uid: str) -> dict[str, Any] | None:
        """Return the stored profile or None."""

    @abstractmethod
    async def set_profile(self, uid: str, profile: dict[str, Any]) -> None:
        """Write a complete profile."""

    @abstractmethod
    async def update_profile(self, uid: str, fields: dict[str, Any]) -> bool:
        """Merge ``fields`` into the profile; False if no profile exists."""


class LocalPersistence(PersistenceProvider):
    """Provider backed by the :class:`LocalFallbackStore`.

    Store calls block on the storage database, so each runs in a worker
    thread via ``asyncio.to_thread``.
    """

    name = "local"

    def __init__(self, store: LocalFallbackStore) -> None:
        self.store = store

    async def list_records(
        self, uid: str, collection: str, *, sort_field: str = "createdAt"
    ) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self.store.load, uid, collection)

    async def get_record(self, uid: str, collection: str, record_id: str) -> dict[str, Any] | None:
        for item in await asyncio.to_thread(self.store.load, uid, collection):
            if item.get("id") == record_id:
                return item
        return None

    async def add_record(
        self,
        uid: str,
        collection: str,
        record: dict[str, Any],
        *,
        limit: int | None = None,
    ) -> str:
        record_id = generate_id()
        await asyncio.to_thread(
            self.store.add_item, uid, collection, {**record, "id": record_id}, limit=limit
        )
        return record_id

    async def update_record(
        self, uid: str, collection: str, record_id: str, fields: dict[str, Any]
    ) -> bool:
        return await asyncio.to_thread(self.store.update_item, uid, collection, record_id, fields)

    def _merge_records(
        self, uid: str, collection: str, updates: dict[str, dict[str, Any]]
    ) -> None:
        items = self.store.load(uid, collection)
        for index, item in enumerate(items):
            fields = updates.get(item.get("id", ""))
            if fields:
                items[index] = {**item, **fields}
        self.store.save(uid, collection, items)

    async def update_records(
        self, uid: str, collection: str, updates: dict[str, dict[str, Any]]
    ) -> None:
        await asyncio.to_thread(self._merge_records, uid, collection, updates)

    async def delete_record(self, uid: str, collection: str, record_id: str) -> bool:
        return await asyncio.to_thread(self.store.delete_item, uid, collection, record_id)

    async def get_profile(self, uid: str) -> dict[str, Any] | None:
        return await asyncio.to_thread(self.store.load_document, uid, PROFILE_DOCUMENT)

    async def set_profile(self, uid: str, profile: dict[str, Any]) -> None:
        await asyncio.to_thread(self.store.save_document, uid, PROFILE_DOCUMENT, profile)

    def _merge_profile(self, uid: str, fields: dict[str, Any]) -> bool:
        profile = self.store.load_document(uid, PROFILE_DOCUMENT)
        if profile is None:
            return False
        self.store.save_document(uid, PROFILE_DOCUMENT, {**profile, **fields})
        return True

    async def update_profile(self, uid: str, fields: dict[str, Any]) -> bool:
        return await asyncio.to_thread(self._merge_profile, uid, fields)


class RemotePersistence(PersistenceProvider):
    """Provider backed by a :class:`RemoteBackend` tree."""

    name = "remote"

    def __init__(self, backend: RemoteBackend) -> None:
        self.backend = backend

    @staticmethod
    def _path(uid: str, collection: str | None = None, record_id: str | None = None) -> str:
        parts = ["users", uid]
        if collection:
            parts.append(collection)
        if record_id:
            parts.append(record_id)
        return "/".join(parts)

    async def list_records(
        self, uid: str, collection: str, *, sort_field: str = "createdAt"
    ) -> list[dict[str, Any]]:
        raw = await self.backend.get(self._path(uid, collection))
        return normalize_records(raw, sort_field=sort_field)

    async def get_record(self, uid: str, collection: str, record_id: str) -> dict[str, Any] | None:
        raw = await self.backend.get(self._path(uid, collection, record_id))
        if not isinstance(raw, Mapping):
            return None
        return normalize_records({record_id: raw})[0]

    async def add_record(
        self,
        uid: str,
        collection: str,
        record: dict[str, Any],
        *,
        limit: int | None = None,
    ) -> str:
        record_id = await self.backend.push(self._path(uid, collection))
        payload = {key: value for key, value in record.items() if key != "id"}
        await self.backend.set(self._path(uid, collection, record_id), _to_wire(payload))
        return record_id

    async def update_record(
        self, uid: str, collection: str, record_id: str, fields: dict[str, Any]
    ) -> bool:
        path = self._path(uid, collection, record_id)
        if await self.backend.get(path) is None:
            return False
        await self.backend.update(path, _to_wire(fields))
        return True

    async def update_records(
        self, uid: str, collection: str, updates: dict[str, dict[str, Any]]
    ) -> None:
        flattened = {
            f"{record_id}/{field}": value
            for record_id, fields in updates.items()
            for field, value in fields.items()
        }
        if flattened:
            await self.backend.update(self._path(uid, collection), _to_wire(flattened))

    async def delete_record(self, uid: str, collection: str, record_id: str) -> bool:
        path = self._path(uid, collection, record_id)
        if await self.backend.get(path) is None:
            return False
        await self.backend.remove(path)
        return True

    async def get_profile(self, uid: str) -> dict[str, Any] | None:
        raw = await self.backend.get(self._path(uid))
        if not isinstance(raw, Mapping):
            return None
        profile = {key: value for key, value in raw.items() if key not in USER_COLLECTIONS}
        if not profile:
            return None
        for field in ("createdAt", "updatedAt"):
            parsed = parse_datetime(profile.get(field))
            if parsed is None:
                profile.pop(field, None)
            else:
                profile[field] = parsed
        return profile

    async def set_profile(self, uid: str, profile: dict[str, Any]) -> None:
        # users/{uid} also holds the collections; merge, never replace.
        await self.backend.update(self._path(uid), _to_wire(profile))

    async def update_profile(self, uid: str, fields: dict[str, Any]) -> bool:
        if await self.get_profile(uid) is None:
            return False
        await self.backend.update(self._path(uid), _to_wire(fields))
        return True


def select_persistence(
    backend: RemoteBackend | None, local_store: LocalFallbackStore
) -> PersistenceProvider:
    """Pick the remote provider when the backend is ready, else the local fallback."""
    if backend is not None and backend.is_ready():
        logger.info("Using remote persistence backend")
        return RemotePersistence(backend)
    logger.info("Remote backend unavailable; using local fallback storage")
    return LocalPersistence(local_store)
