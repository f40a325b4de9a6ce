"""StorageEntry model: a single durable key-value pair."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from skillforge.data.db import Base


class StorageEntry(Base):
    """Durable key-value entry.

    Attributes:
        id: Auto-incrementing primary key; also records insertion order,
            which is the key enumeration order.
        key: Unique storage key.
        value: Serialized string value.
        updated_at: UTC timestamp of the last write.
    """

    __tablename__ = "storage_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(512), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
