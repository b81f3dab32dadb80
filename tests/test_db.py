import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event, inspect, text
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.schema import CreateTable

from task_tracker.db import (
    mysql_updated_at_ddl,
    tasks,
    StorageGateway,
    StorageInitializationError,
    StorageNotInitializedError,
)
from task_tracker.main import create_app
from task_tracker.settings import get_settings


class TestStorageGateway:
    def test_pool_requested_before_initialize(self, settings):
        gw = StorageGateway(settings)
        assert gw.is_initialized is False
        with pytest.raises(StorageNotInitializedError):
            gw.get_connection_pool()

    def test_initialize_creates_tasks_table(self, gateway):
        pool = gateway.get_connection_pool()
        inspector = inspect(pool)
        assert "tasks" in inspector.get_table_names()
        columns = {c["name"] for c in inspector.get_columns("tasks")}
        assert columns == {"id", "title", "description", "completed", "created_at", "updated_at"}

    def test_initialize_is_idempotent(self, gateway):
        first = gateway.get_connection_pool()
        assert gateway.initialize() is first
        assert gateway.is_initialized

    def test_schema_bootstrap_keeps_existing_rows(self, settings):
        gw = StorageGateway(settings)
        with gw.initialize().begin() as conn:
            conn.execute(text("INSERT INTO tasks (title) VALUES ('kept')"))
        gw.dispose()

        again = StorageGateway(settings)
        try:
            with again.initialize().connect() as conn:
                rows = conn.execute(text("SELECT title, completed FROM tasks")).all()
        finally:
            again.dispose()
        assert [(r[0], bool(r[1])) for r in rows] == [("kept", False)]

    def test_sqlite_ids_use_autoincrement(self):
        ddl = str(CreateTable(tasks).compile(dialect=sqlite.dialect()))
        assert "AUTOINCREMENT" in ddl

    def test_mysql_refreshes_updated_at_on_update(self):
        assert event.contains(tasks, "after_create", mysql_updated_at_ddl)
        assert "ON UPDATE CURRENT_TIMESTAMP" in mysql_updated_at_ddl.statement
        assert mysql_updated_at_ddl.dialect == "mysql"
        assert "AUTO_INCREMENT" in str(CreateTable(tasks).compile(dialect=mysql.dialect()))

    def test_pool_capacity_comes_from_settings(self, gateway, settings):
        assert settings.db_pool_size == 3
        pool = gateway.get_connection_pool().pool
        assert pool.size() == 3
        assert pool._max_overflow == 0

    def test_dispose_returns_to_uninitialized(self, settings):
        gw = StorageGateway(settings)
        gw.initialize()
        gw.dispose()
        assert gw.is_initialized is False
        with pytest.raises(StorageNotInitializedError):
            gw.get_connection_pool()

    def test_unreachable_database_is_fatal(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'dir' / 'tasks.db'}")
        gw = StorageGateway(get_settings())
        with pytest.raises(StorageInitializationError):
            gw.initialize()
        assert gw.is_initialized is False

    def test_startup_aborts_when_database_is_unreachable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'tasks.db'}")
        app = create_app(get_settings())
        with pytest.raises(StorageInitializationError):
            with TestClient(app):
                pass

    def test_app_lifespan_initializes_and_disposes(self, app):
        gw = app.state.gateway
        assert gw.is_initialized is False
        with TestClient(app):
            assert gw.is_initialized is True
        assert gw.is_initialized is False
