"""Durable local storage: key-value collaborator and the fallback store built on it."""

from skillforge.storage.key_value import (
    KeyValueStorage,
    SqlKeyValueStorage,
    StorageQuotaExceededError,
)
from skillforge.storage.local_store import LocalFallbackStore

__all__ = [
    "KeyValueStorage",
    "LocalFallbackStore",
    "SqlKeyValueStorage",
    "StorageQuotaExceededError",
]
