import pytest
from sqlalchemy.pool import StaticPool

import core.db.database as dbmod
from core.utils import settings as settings_mod


def _clear_db_env(monkeypatch):
    for var in ("DATABASE_URL", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB"):
        monkeypatch.delenv(var, raising=False)


def test_database_url_prefers_explicit_url(monkeypatch):
    _clear_db_env(monkeypatch)
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/app")
    assert settings_mod.database_url_from_env() == "postgresql://u:p@db:5432/app"


def test_database_url_composed_from_components(monkeypatch):
    _clear_db_env(monkeypatch)
    for var, value in {
        "POSTGRES_USER": "u", "POSTGRES_PASSWORD": "p", "POSTGRES_HOST": "h",
        "POSTGRES_PORT": "5433", "POSTGRES_DB": "d",
    }.items():
        monkeypatch.setenv(var, value)
    assert settings_mod.database_url_from_env() == "postgresql://u:p@h:5433/d"


def test_database_url_names_missing_components(monkeypatch):
    _clear_db_env(monkeypatch)
    monkeypatch.setenv("POSTGRES_USER", "u")
    with pytest.raises(ValueError) as exc_info:
        settings_mod.database_url_from_env()
    assert "POSTGRES_PASSWORD" in str(exc_info.value)
    assert "POSTGRES_USER" not in str(exc_info.value)


def test_settings_pool_and_flags(monkeypatch):
    _clear_db_env(monkeypatch)
    monkeypatch.setenv("DB_POOL_SIZE", "4")
    monkeypatch.setenv("DB_POOL_TIMEOUT", "5")
    monkeypatch.setenv("DIAGNOSTIC_ERRORS", "yes")
    settings_mod.refresh_settings_cache()
    cfg = settings_mod.get_settings()
    assert cfg.database_url is None
    assert cfg.pool.size == 4 and cfg.pool.timeout == 5 and cfg.pool.max_overflow == 0
    assert cfg.diagnostic_errors is True


def test_invalid_pool_size(monkeypatch):
    monkeypatch.setenv("DB_POOL_SIZE", "lots")
    settings_mod.refresh_settings_cache()
    with pytest.raises(ValueError):
        settings_mod.get_settings()


def test_engine_options_for_server_database(monkeypatch):
    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "2")
    settings_mod.refresh_settings_cache()
    opts = dbmod.engine_options("postgresql://u:p@h/d")
    assert opts["pool_size"] == 3
    assert opts["max_overflow"] == 2
    assert opts["pool_timeout"] == 30
    assert opts["pool_pre_ping"] is True


def test_engine_options_for_sqlite():
    assert dbmod.engine_options("sqlite+pysqlite:///:memory:")["poolclass"] is StaticPool
    file_opts = dbmod.engine_options("sqlite+pysqlite:////tmp/x.db")
    assert "poolclass" not in file_opts
    assert file_opts["connect_args"] == {"check_same_thread": False}


def test_pytest_runtime_falls_back_to_sqlite(monkeypatch):
    _clear_db_env(monkeypatch)
    monkeypatch.delenv("MEDITACTIVE_TEST_DB", raising=False)
    settings_mod.refresh_settings_cache()
    assert dbmod._is_pytest_runtime() is True
    assert dbmod._resolve_database_url() == dbmod.SQLITE_MEMORY_URL


def test_create_schema_builds_every_table(tmp_path):
    from sqlalchemy import create_engine, inspect

    url = f"sqlite+pysqlite:///{tmp_path / 'schema.db'}"
    eng = create_engine(url, **dbmod.engine_options(url))
    try:
        dbmod.create_schema(eng)
        tables = set(inspect(eng).get_table_names())
    finally:
        eng.dispose()
    assert {"members", "member_goals", "goals", "session_types", "sessions", "member_sessions"} <= tables


def test_get_db_yields_and_closes():
    gen = dbmod.get_db()
    session = next(gen)
    assert session is not None
    with pytest.raises(StopIteration):
        next(gen)
