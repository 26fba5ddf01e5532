# tests/conftest.py

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from todo_api.config import Settings
from todo_api.database import Database
from todo_api.main import create_app
from todo_api.task.task_service import TaskService
from todo_api.task.task_store import TaskStore


@pytest.fixture()
def database() -> Iterator[Database]:
    """
    Fresh in-memory SQLite per test, so no test sees another test's rows.
    """
    db = Database("sqlite://").open()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(database: Database) -> TaskStore:
    return TaskStore(database)


@pytest.fixture()
def service(store: TaskStore) -> TaskService:
    return TaskService(store)


@pytest.fixture()
def settings() -> Settings:
    return Settings(database_url="sqlite://", api_prefix="/api")


@pytest.fixture()
def client(database: Database, settings: Settings) -> Iterator[TestClient]:
    app = create_app(database=database, settings=settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_task(client: TestClient):
    """POST a task through the API and return the JSON body."""

    def _make(**overrides):
        payload = {
            "title": "Test Task",
            "description": "Test Description",
            "priority": "medium",
            "completed": False,
            "dueDate": None,
        }
        payload.update(overrides)
        response = client.post("/api/tasks", json=payload)
        assert response.status_code == 201, response.text
        assert "id" in response.json()
        return response.json()

    return _make
