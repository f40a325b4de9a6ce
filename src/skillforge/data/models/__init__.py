"""ORM models package for database tables.

- StorageEntry: one namespaced key/value pair of the durable local storage
- User: demo-mode account used when the remote auth backend is unavailable

All models inherit from the shared Base declarative class defined in data.db.
"""

from skillforge.data.db import Base
from skillforge.data.models.storage_entry import StorageEntry
from skillforge.data.models.user import User

__all__ = ["Base", "StorageEntry", "User"]
