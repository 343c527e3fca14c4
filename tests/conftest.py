from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from todo_mvp.db import SQLiteTaskRepository
from todo_mvp.main import create_app
from todo_mvp.repositories import InMemoryTaskRepository, TaskRepository
from todo_mvp.settings import Settings


@pytest.fixture()
def settings() -> Settings:
    """Memory backend, no environment lookups."""
    return Settings(persistence_backend="memory", api_base_url="http://testserver")


@pytest.fixture()
def repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture()
def app(settings: Settings, repository: InMemoryTaskRepository) -> FastAPI:
    """A fresh application over an empty store for every test."""
    return create_app(settings, repository)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    # Unhandled errors must come back as 500 envelopes, not propagate into the test.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture(params=["memory", "sqlite"])
def any_repository(request: pytest.FixtureRequest, tmp_path: Path) -> TaskRepository:
    """Every repository implementation, each starting empty."""
    if request.param == "sqlite":
        return SQLiteTaskRepository(str(tmp_path / "tasks.db"))
    return InMemoryTaskRepository()
