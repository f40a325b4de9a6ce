"""SQL storage behind the durable key-value store and the local account table.

Both live in one SQLite file by default (``skillforge.db`` at the project
root). Set ``DB_URL`` to point somewhere else; tests use a temporary file.
The engine is built on first use and can be dropped with
:func:`dispose_engine` so a new ``DB_URL`` takes effect.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_FILENAME = "skillforge.db"


class Base(DeclarativeBase):
    """Declarative base for the storage and account tables."""


_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def get_database_url() -> str:
    env_url = os.getenv("DB_URL")
    if env_url:
        return env_url

    db_path = Path(__file__).resolve().parents[3] / DEFAULT_DB_FILENAME
    return URL.create("sqlite", database=str(db_path)).render_as_string(hide_password=False)


def get_engine() -> Engine:
    """Return the shared engine, creating it (and its tables) on first call."""
    global _engine
    if _engine is not None:
        return _engine

    url = make_url(get_database_url())
    connect_args: dict[str, object] = {}
    if url.get_backend_name() == "sqlite":
        # Sessions are opened from FastAPI worker threads as well as the loop thread.
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    _engine = create_engine(url, connect_args=connect_args)
    _create_tables(_engine)
    logger.debug("Opened storage database %s", url.render_as_string(hide_password=True))
    return _engine


def _create_tables(engine: Engine) -> None:
    # The model modules register their tables on Base when imported.
    from skillforge.data.models import storage_entry, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def init_db() -> None:
    """Make sure the database exists and has every table."""
    get_engine()


def dispose_engine() -> None:
    """Close pooled connections and forget the engine and session factory."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)

    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
