"""User account model for demo-mode authentication.

Used only when the remote authentication backend is not configured.
Passwords are stored as salted PBKDF2 hashes, never in plaintext.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from skillforge.data.db import Base


class User(Base):
    """Local application account.

    Attributes:
        id: Auto-incrementing primary key.
        uid: Opaque identity string shared with the persistence layer.
        email: Unique login email.
        display_name: Name shown in the dashboard.
        photo_url: Optional avatar reference.
        password_hash: Salted hash of the user's password (empty for federated demo users).
        created_at: UTC timestamp when the account was created.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uid: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    photo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
