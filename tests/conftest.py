from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from task_tracker.db import StorageGateway
from task_tracker.main import create_app
from task_tracker.settings import Settings, get_settings


@pytest.fixture()
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """
    Settings pointing at a throwaway SQLite database per test, so tests never
    need a MySQL server.
    """
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'tasks.sqlite3'}")
    monkeypatch.setenv("DB_POOL_SIZE", "3")
    return get_settings()


@pytest.fixture()
def gateway(settings: Settings) -> Iterator[StorageGateway]:
    gw = StorageGateway(settings)
    gw.initialize()
    yield gw
    gw.dispose()


@pytest.fixture()
def pool(gateway: StorageGateway):
    return gateway.get_connection_pool()


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    # Entering the context runs the lifespan, which initializes the gateway.
    with TestClient(app) as c:
        yield c
