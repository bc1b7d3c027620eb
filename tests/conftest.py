import pytest
from fastapi.testclient import TestClient

from core.state_store import StateStore
from main import app
from storage import get_store


@pytest.fixture
def store(tmp_path) -> StateStore:
    return StateStore(tmp_path / "data")


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app, cookies={"accessCode": "room-a", "username": "Alice"})
    finally:
        app.dependency_overrides.clear()
