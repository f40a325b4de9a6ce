"""Remote persistence backend: a path-addressed JSON tree.

Paths follow ``users/{uid}/{collection}[/{id}]``. Values crossing this
boundary are plain JSON (ISO-8601 strings for dates, never datetime objects).
"""

from __future__ import annotations

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

FIREBASE_APP_NAME = "skillforge"


class RemoteBackend(ABC):
    """Path-addressed key-value tree."""

    @abstractmethod
    def is_ready(self) -> bool:
        """Return True when the backend is configured and reachable."""

    @abstractmethod
    async def get(self, path: str) -> Any:
        """Return the value at ``path`` or None."""

    @abstractmethod
    async def set(self, path: str, value: Any) -> None:
        """Overwrite the value at ``path``."""

    @abstractmethod
    async def update(self, path: str, fields: dict[str, Any]) -> None:
        """Merge ``fields`` into the object at ``path``.

        Keys may be nested relative paths (``"abc/read"``).
        """

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Delete the value at ``path``."""

    @abstractmethod
    async def push(self, path: str) -> str:
        """Reserve and return a new server-generated child key under ``path``."""


class FirebaseRealtimeBackend(RemoteBackend):
    """Firebase Realtime Database through the Admin SDK.

    The SDK is blocking, so every call runs in a worker thread to keep the
    event loop free.
    """

    def __init__(
        self,
        credentials_path: str | None = None,
        database_url: str | None = None,
    ) -> None:
        self.credentials_path = credentials_path or os.environ.get("FIREBASE_CREDENTIALS")
        self.database_url = database_url or os.environ.get("FIREBASE_DATABASE_URL")
        self._app = None
        self._initialize()

    def _initialize(self) -> None:
        if not self.credentials_path or not self.database_url:
            logger.info("Firebase not configured (FIREBASE_CREDENTIALS/FIREBASE_DATABASE_URL)")
            return
        if not os.path.exists(self.credentials_path):
            logger.error("Firebase credentials file not found at: %s", self.credentials_path)
            return

        import firebase_admin
        from firebase_admin import credentials

        try:
            self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
            return
        except ValueError:
            pass

        try:
            cred = credentials.Certificate(self.credentials_path)
            self._app = firebase_admin.initialize_app(
                cred, {"databaseURL": self.database_url}, name=FIREBASE_APP_NAME
            )
            logger.info("Firebase Realtime Database initialized: %s", self.database_url)
        except Exception:
            logger.exception("Failed to initialize Firebase")
            self._app = None

    def is_ready(self) -> bool:
        return self._app is not None

    def _ref(self, path: str):
        from firebase_admin import db

        return db.reference(path, app=self._app)

    async def get(self, path: str) -> Any:
        return await asyncio.to_thread(self._ref(path).get)

    async def set(self, path: str, value: Any) -> None:
        await asyncio.to_thread(self._ref(path).set, value)

    async def update(self, path: str, fields: dict[str, Any]) -> None:
        await asyncio.to_thread(self._ref(path).update, fields)

    async def remove(self, path: str) -> None:
        await asyncio.to_thread(self._ref(path).delete)

    async def push(self, path: str) -> str:
        # The SDK writes an empty placeholder child; callers overwrite it with set().
        child = await asyncio.to_thread(self._ref(path).push)
        return child.key
