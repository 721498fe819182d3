from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect, text

import fleetdesk.main as main_module
from fleetdesk.config import settings
from fleetdesk.db.migration_check import (
    assert_db_is_up_to_date,
    get_alembic_head_revision,
    get_current_db_revision,
    maybe_create_schema,
)
from fleetdesk.main import app

EXPECTED_TABLES = {"customers", "employees", "vehicles", "units", "orders", "tracking_events"}


@pytest.fixture
def sqlite_engine(tmp_path: Path):
    db_path = tmp_path / "migration-check.db"
    engine = create_engine(f"sqlite+pysqlite:///{db_path}")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def startup_settings():
    keys = ("app_mode", "testing", "auto_create_schema", "require_migrations")
    original_engine = main_module.engine
    originals = {key: getattr(settings, key) for key in keys}
    yield settings
    main_module.engine = original_engine
    for key, value in originals.items():
        setattr(settings, key, value)


def _stamp(engine, revision: str) -> None:
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL)"))
        connection.execute(
            text("INSERT INTO alembic_version (version_num) VALUES (:rev)"), {"rev": revision}
        )


def test_assert_db_is_up_to_date_fails_when_alembic_version_missing(sqlite_engine):
    with pytest.raises(RuntimeError, match="Database schema not up to date"):
        assert_db_is_up_to_date(sqlite_engine)


def test_assert_db_is_up_to_date_passes_at_head(sqlite_engine):
    head = get_alembic_head_revision()
    _stamp(sqlite_engine, head)

    assert get_current_db_revision(sqlite_engine) == head
    assert_db_is_up_to_date(sqlite_engine)


def test_maybe_create_schema_creates_tables_when_enabled(sqlite_engine, startup_settings):
    startup_settings.auto_create_schema = True
    startup_settings.app_mode = "development"

    maybe_create_schema(sqlite_engine)

    assert EXPECTED_TABLES <= set(inspect(sqlite_engine).get_table_names())


def test_maybe_create_schema_refuses_production(sqlite_engine, startup_settings):
    startup_settings.auto_create_schema = True
    startup_settings.app_mode = "production"

    with pytest.raises(RuntimeError, match="AUTO_CREATE_SCHEMA must be disabled"):
        maybe_create_schema(sqlite_engine)


def test_app_startup_fails_fast_in_production_when_revision_missing(
    sqlite_engine, startup_settings
):
    main_module.engine = sqlite_engine
    startup_settings.app_mode = "production"
    startup_settings.testing = True
    startup_settings.auto_create_schema = False
    startup_settings.require_migrations = True

    with pytest.raises(RuntimeError, match="Database schema not up to date"):
        with TestClient(app):
            pass


def test_app_startup_auto_creates_schema_in_development(sqlite_engine, startup_settings):
    main_module.engine = sqlite_engine
    startup_settings.app_mode = "development"
    startup_settings.testing = True
    startup_settings.auto_create_schema = True
    startup_settings.require_migrations = False

    with TestClient(app):
        pass

    assert "orders" in inspect(sqlite_engine).get_table_names()


def test_app_startup_passes_when_db_at_head(sqlite_engine, startup_settings):
    _stamp(sqlite_engine, get_alembic_head_revision())
    main_module.engine = sqlite_engine
    startup_settings.app_mode = "production"
    startup_settings.testing = True
    startup_settings.auto_create_schema = False
    startup_settings.require_migrations = True

    with TestClient(app):
        pass
