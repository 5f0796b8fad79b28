"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration with a pooled
PostgreSQL connection in deployments and an in-memory SQLite fallback when
running under pytest without an explicit database.

``get_db`` is the per-request session dependency for whatever transport
sits in front of the service; the sync engine itself opens sessions through
``core.db.transaction``.
"""
import logging
import os
import sqlite3
import sys

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.utils.settings import database_url_from_env, get_settings

logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite+pysqlite:///:memory:"


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while an individual test is running,
    so module import during collection is detected via ``sys.modules``.
    ``PYTEST_RUNNING=1`` forces the answer for explicit control.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if "pytest" in sys.modules:
        return True
    return False


def _resolve_database_url() -> str:
    explicit_test_db = os.getenv("MEDITACTIVE_TEST_DB")
    if explicit_test_db:
        return explicit_test_db
    url = get_settings().database_url
    if url:
        return url
    if _is_pytest_runtime():
        return SQLITE_MEMORY_URL
    # Re-raise the descriptive error naming the missing variables
    return database_url_from_env()


def engine_options(url: str) -> dict:
    """Return create_engine keyword arguments appropriate for ``url``.

    Server databases get a bounded pool: callers beyond ``size + max_overflow``
    wait up to ``timeout`` seconds for a connection instead of failing.
    """
    if url.startswith("sqlite"):
        opts = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.endswith("://"):
            # Keep one shared connection so the schema persists across sessions
            opts["poolclass"] = StaticPool
        return opts
    pool = get_settings().pool
    return {
        "pool_size": pool.size,
        "max_overflow": pool.max_overflow,
        "pool_timeout": pool.timeout,
        "pool_recycle": pool.recycle,
        "pool_pre_ping": True,
    }


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # pragma: no cover - driver hook
    # SQLite ignores REFERENCES clauses unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str | None = None) -> Engine:
    url = url or _resolve_database_url()
    eng = create_engine(url, **engine_options(url))
    logger.debug("database engine created for dialect %s", eng.dialect.name)
    return eng


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=bind)


engine = build_engine()

SessionLocal = build_session_factory(engine)


def create_schema(bind: Engine | None = None) -> None:
    """Create all tables directly from metadata (SQLite/test contexts).

    Deployments manage the schema with Alembic migrations instead.
    """
    from core.db import models  # local import to avoid circular import at module load
    models.Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Yield a database session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
