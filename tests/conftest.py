from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from skillforge.data.db import dispose_engine, init_db
from skillforge.services.data_service import DataService
from skillforge.services.persistence import LocalPersistence, RemotePersistence
from skillforge.services.remote_backend import RemoteBackend
from skillforge.storage import KeyValueStorage, LocalFallbackStore, StorageQuotaExceededError
from skillforge.storage.key_value import SqlKeyValueStorage


class MemoryStorage(KeyValueStorage):
    """In-memory key-value storage with an optional quota and forced failures."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.data: dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.fail_writes = 0

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            self.fail_writes -= 1
            raise StorageQuotaExceededError("forced failure")
        if self.quota_bytes is not None:
            used = sum(len(k) + len(v) for k, v in self.data.items() if k != key)
            if used + len(key) + len(value) > self.quota_bytes:
                raise StorageQuotaExceededError("quota exceeded")
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self.data)


class FakeRemoteBackend(RemoteBackend):
    """In-memory JSON tree mimicking the Realtime Database path API."""

    def __init__(self, ready: bool = True) -> None:
        self.tree: dict[str, Any] = {}
        self.ready = ready
        self.fail_writes = False
        self.counter = 0

    def is_ready(self) -> bool:
        return self.ready

    @staticmethod
    def _parts(path: str) -> list[str]:
        return [part for part in path.split("/") if part]

    def _node(self, parts: list[str], create: bool = False) -> Any:
        node: Any = self.tree
        for part in parts:
            if not isinstance(node, dict):
                return None
            if part not in node:
                if not create:
                    return None
                node[part] = {}
            node = node[part]
        return node

    def _check(self) -> None:
        if self.fail_writes:
            raise ConnectionError("backend unreachable")

    async def get(self, path: str) -> Any:
        node = self._node(self._parts(path))
        return node if node != {} else None

    async def set(self, path: str, value: Any) -> None:
        self._check()
        *parents, leaf = self._parts(path)
        self._node(parents, create=True)[leaf] = value

    async def update(self, path: str, fields: dict[str, Any]) -> None:
        self._check()
        base = self._parts(path)
        for key, value in fields.items():
            await self.set("/".join(base + self._parts(key)), value)

    async def remove(self, path: str) -> None:
        self._check()
        *parents, leaf = self._parts(path)
        parent = self._node(parents)
        if isinstance(parent, dict):
            parent.pop(leaf, None)

    async def push(self, path: str) -> str:
        self._check()
        self.counter += 1
        return f"-N{self.counter:04d}"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep provider and backend configuration out of every test."""
    for name in (
        "FIREBASE_CREDENTIALS",
        "FIREBASE_DATABASE_URL",
        "GEMINI_API_KEY",
        "OPENAI_API_KEY",
        "LLM_PROVIDER",
        "LLM_MODEL",
        "SKILLFORGE_STORAGE_QUOTA_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def temp_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Use a temporary SQLite DB for every test."""
    db_path = tmp_path / "skillforge.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    dispose_engine()
    init_db()
    yield
    dispose_engine()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def local_service() -> DataService:
    return DataService(LocalPersistence(LocalFallbackStore(SqlKeyValueStorage())))


@pytest.fixture
def fake_backend() -> FakeRemoteBackend:
    return FakeRemoteBackend()


@pytest.fixture
def remote_service(fake_backend: FakeRemoteBackend) -> DataService:
    return DataService(RemotePersistence(fake_backend))
