"""
Database connection and session management module.

Uses SQLAlchemy for ORM operations. Supports PostgreSQL (production/Docker)
and SQLite (local development and tests).

The Database object is the persistence gateway for the catalogs and the
registration ledger. It is constructed explicitly and handed to whoever
needs it, so tests can build one against an in-memory SQLite database.
"""

import os
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.pool import StaticPool

from app.logging_config import get_logger, log_with_context

# Read database URL from environment
# Fallback to SQLite for local development when PostgreSQL is not available
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./student_registration.db"
)
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "").lower() in ("1", "true", "yes")

logger = get_logger("db")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def _is_memory_sqlite(url: str) -> bool:
    database = make_url(url).database
    return not database or database == ":memory:"


def build_engine_kwargs(url: str) -> dict:
    """
    Engine options per backend.

    SQLite does not support pool_size, max_overflow, or pool_pre_ping.
    In-memory SQLite needs a StaticPool, otherwise every new connection
    would see its own empty database.
    """
    engine_kwargs = {"echo": DATABASE_ECHO}

    if url.startswith("postgresql"):
        engine_kwargs.update({
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        })
    elif url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            engine_kwargs["poolclass"] = StaticPool

    return engine_kwargs


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable WAL mode and foreign keys on every new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Persistence gateway wrapping an engine and a session factory.

    Each thread gets at most one live session handle. acquire() returns it
    (opening a new one when none is live) and release() closes it. The
    session() context manager pairs the two so the handle is released on
    every exit path.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or DATABASE_URL
        self.engine = create_engine(self.url, **build_engine_kwargs(self.url))

        if self.url.startswith("sqlite"):
            event.listen(self.engine, "connect", set_sqlite_pragma)

        # expire_on_commit=False keeps returned entities readable after
        # the session that loaded them has been closed
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )
        self._local = threading.local()

    def acquire(self) -> Session:
        """Return this thread's live session, opening one if needed."""
        handle = getattr(self._local, "session", None)
        if handle is not None and handle.is_active:
            return handle

        if handle is not None:
            # Left in a failed transaction; start over with a clean handle
            handle.close()

        handle = self.SessionLocal()
        self._local.session = handle
        return handle

    def release(self) -> None:
        """Close this thread's session handle, if any."""
        handle = getattr(self._local, "session", None)
        if handle is None:
            return
        self._local.session = None
        handle.close()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Scoped unit of work.

        Yields the thread's session and guarantees it is closed afterwards,
        even if the body raises.
        """
        db = self.acquire()
        try:
            yield db
        finally:
            self.release()

    def create_tables(self) -> None:
        """
        Create all database tables directly (used for SQLite local dev).
        For PostgreSQL, use Alembic migrations instead.
        """
        # Models register themselves on Base.metadata at import
        import app.models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        import app.models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)

    def check_connection(self) -> bool:
        """Run a trivial query to verify the store is reachable."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Database connectivity check failed",
                             extra_data={"url": self.describe(), "error": str(e)})
            return False

    def describe(self) -> str:
        """Connection URL with any password masked."""
        return make_url(self.url).render_as_string(hide_password=True)

    def dispose(self) -> None:
        self.release()
        self.engine.dispose()
