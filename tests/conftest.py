"""Shared test fixtures."""

import os
import tempfile
import time
import uuid

# Configure the app before it is imported
_DB_DIR = tempfile.mkdtemp(prefix="mentorship-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["RATE_LIMIT_AUTH"] = "100000"
os.environ.setdefault("BOOKING_CONFLICT_WINDOW_MINUTES", "30")

import pytest
from fastapi.testclient import TestClient

from src.main import app


@pytest.fixture(scope="module")
def client():
    # Context manager: runs the lifespan and keeps HTTP and WebSocket calls on one event loop
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="module")
def hub(client):
    return client.app.state.hub


@pytest.fixture
def register(client):
    """Register a user with the given role; returns the auth payload."""

    def _register(role: str = "student", password: str = "SecureTestPass123") -> dict:
        suffix = uuid.uuid4().hex[:8]
        resp = client.post(
            "/auth/register",
            json={
                "username": f"{role}_{suffix}",
                "email": f"{role}_{suffix}@example.com",
                "password": password,
                "role": role,
            },
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _register


@pytest.fixture
def student(register):
    return register("student")


@pytest.fixture
def mentor(register):
    return register("mentor")


@pytest.fixture
def bearer():
    def _bearer(auth: dict) -> dict:
        return {"Authorization": f"Bearer {auth['accessToken']}"}

    return _bearer


@pytest.fixture
def wait_until():
    """Poll a predicate from the test thread while the app loop makes progress."""

    def _wait(predicate, timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait
