"""Authentication collaborator.

``AuthBackend`` is the interface the rest of the application depends on.
``LocalAuthBackend`` is the demo-mode implementation used when no remote
identity provider is configured: accounts live in the local ``users``
table with salted PBKDF2 password hashes, and federated sign-in yields a
demo identity.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import re
import secrets
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import select

from skillforge.data.db import get_session
from skillforge.data.models import User
from skillforge.services.data_service import DataService

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 100_000
_SALT_BYTES = 16
_MIN_PASSWORD_LENGTH = 6
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

DEMO_FEDERATED_EMAIL = "demo@google.com"
DEMO_FEDERATED_NAME = "Demo User (Google)"


class AuthError(Exception):
    """Sign-in or sign-up failure with a message safe to show to the user."""


@dataclass(frozen=True, slots=True)
class AuthIdentity:
    """Opaque identity delivered to auth-state listeners."""

    uid: str
    email: str
    display_name: str
    photo_url: str | None = None


AuthCallback = Callable[[AuthIdentity | None], None]


def _hash_password(password: str) -> str:
    """Return a salted PBKDF2 hash for the given password.

    The result is stored as ``<salt_hex>:<hash_hex>``.
    """
    salt = os.urandom(_SALT_BYTES)
    derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"{salt.hex()}:{derived.hex()}"


def _verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored ``salt:hash`` string."""
    try:
        salt_hex, hash_hex = stored_hash.split(":", 1)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    candidate = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return hmac.compare_digest(candidate, expected)


def _demo_uid() -> str:
    return f"demo-{time.time_ns() // 1_000_000}-{secrets.token_hex(5)}"


def _identity(user: User) -> AuthIdentity:
    return AuthIdentity(
        uid=user.uid, email=user.email, display_name=user.display_name, photo_url=user.photo_url
    )


class AuthBackend(ABC):
    """Identity provider interface."""

    def __init__(self) -> None:
        self.current_user: AuthIdentity | None = None
        self._listeners: list[AuthCallback] = []

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthIdentity: ...

    @abstractmethod
    async def sign_up(self, email: str, password: str, display_name: str) -> AuthIdentity: ...

    @abstractmethod
    async def sign_in_with_federated_provider(self) -> AuthIdentity: ...

    async def sign_out(self) -> None:
        self._set_current_user(None)

    def on_auth_state_changed(self, callback: AuthCallback) -> Callable[[], None]:
        """Register ``callback``; it is called now and on every sign-in/out.

        Returns:
            A function that unregisters the callback.
        """
        self._listeners.append(callback)
        callback(self.current_user)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_current_user(self, identity: AuthIdentity | None) -> None:
        self.current_user = identity
        logger.info("Auth state changed: %s", identity.email if identity else "signed out")
        for listener in list(self._listeners):
            listener(identity)


class LocalAuthBackend(AuthBackend):
    """Demo-mode accounts stored in the local database."""

    def __init__(self, data_service: DataService) -> None:
        super().__init__()
        self.data_service = data_service

    async def sign_in(self, email: str, password: str) -> AuthIdentity:
        email_clean = email.strip().lower()
        if not _EMAIL_RE.match(email_clean):
            raise AuthError("Invalid email address.")

        with get_session() as session:
            user = session.execute(select(User).where(User.email == email_clean)).scalar_one_or_none()
            if user is None:
                raise AuthError("No account found with this email address.")
            if not _verify_password(password, user.password_hash):
                raise AuthError("Incorrect password.")
            identity = _identity(user)

        self._set_current_user(identity)
        return identity

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthIdentity:
        """Create an account and its default profile, then sign it in."""
        email_clean = email.strip().lower()
        if not _EMAIL_RE.match(email_clean):
            raise AuthError("Invalid email address.")
        if len(password) < _MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {_MIN_PASSWORD_LENGTH} characters.")

        with get_session() as session:
            existing = session.execute(
                select(User).where(User.email == email_clean)
            ).scalar_one_or_none()
            if existing is not None:
                raise AuthError("An account with this email already exists.")

            user = User(
                uid=_demo_uid(),
                email=email_clean,
                display_name=display_name.strip() or email_clean.split("@")[0],
                password_hash=_hash_password(password),
            )
            session.add(user)
            session.flush()
            identity = _identity(user)

        await self.data_service.create_user_profile(
            identity.uid, email=identity.email, display_name=identity.display_name
        )
        self._set_current_user(identity)
        return identity

    async def sign_in_with_federated_provider(self) -> AuthIdentity:
        """Sign in the shared demo federated account, creating it on first use."""
        with get_session() as session:
            user = session.execute(
                select(User).where(User.email == DEMO_FEDERATED_EMAIL)
            ).scalar_one_or_none()
            if user is None:
                user = User(
                    uid=_demo_uid(), email=DEMO_FEDERATED_EMAIL, display_name=DEMO_FEDERATED_NAME
                )
                session.add(user)
                session.flush()
            identity = _identity(user)

        if await self.data_service.get_user_profile(identity.uid) is None:
            await self.data_service.create_user_profile(
                identity.uid, email=identity.email, display_name=identity.display_name
            )
        self._set_current_user(identity)
        return identity
