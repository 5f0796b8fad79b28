import pytest
from types import SimpleNamespace

from sqlalchemy import create_engine

from core.db import models
from core.db.database import build_session_factory, create_schema, engine_options
from core.services.member_sync_service import MemberSyncService
from core.utils.settings import refresh_settings_cache

# Catalog rows the seeding collaborator provides in a real deployment
GOAL_TITLES = ["Weight Loss", "Muscle Gain", "Maintenance", "Endurance", "Flexibility"]
SESSION_TYPES = [
    ("1 hour", 60, "One hour session"),
    ("1 day", 1440, "Full day session"),
    ("1 week", 10080, "One week session"),
]


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("DIAGNOSTIC_ERRORS", raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


@pytest.fixture
def engine(tmp_path):
    # File-backed so each session gets its own connection and transaction
    url = f"sqlite+pysqlite:///{tmp_path / 'meditactive.db'}"
    eng = create_engine(url, **engine_options(url))
    create_schema(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def catalog(session_factory):
    with session_factory() as db:
        goals = [models.Goal(title=title) for title in GOAL_TITLES]
        types = [models.SessionType(name=n, duration_minutes=d, description=desc) for n, d, desc in SESSION_TYPES]
        db.add_all(goals + types)
        db.commit()
        return SimpleNamespace(
            goals={g.title: g.id for g in goals},
            session_types={t.name: t.id for t in types},
        )


@pytest.fixture
def db(session_factory, catalog):
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def service(session_factory, catalog):
    return MemberSyncService(session_factory)