"""Pytest configuration and shared fixtures."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from dashboard.config import Settings
from dashboard.main import create_app
from dashboard.seed import generate_mock_data
from dashboard.services.domain_store import DomainStore
from dashboard.services.identity import IdentityStore
from dashboard.storage import LocalStorage


class FrozenClock:
    """A clock that only moves when a test says so."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    """An empty domain store on a frozen clock."""
    return DomainStore(clock=clock)


@pytest.fixture
def seeded_store(clock):
    """A domain store holding the demo dataset."""
    store = DomainStore(clock=clock)
    store.seed(generate_mock_data(clock()))
    return store


@pytest.fixture
def storage(tmp_path):
    """SQLite-file durable storage in a per-test directory."""
    return LocalStorage.from_url(f"sqlite:///{tmp_path / 'local_storage.db'}")


@pytest.fixture
def identity(storage):
    """An identity store that has finished its initial restore."""
    identity = IdentityStore(storage)
    identity.restore()
    return identity


@pytest.fixture
def app():
    return create_app(Settings(LOCAL_STORAGE_URL="sqlite:///:memory:", LOG_LEVEL="WARNING"))


@pytest.fixture
def client(app):
    """Test client with the lifespan run, so the stores exist."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def login_as(client):
    """Sign the process-wide session in as one of the demo accounts."""
    passwords = {
        "admin@example.com": "admin123",
        "worker@example.com": "worker123",
        "user@example.com": "user123",
    }

    def _login(email: str):
        response = client.post("/api/auth/login", json={"email": email, "password": passwords[email]})
        assert response.status_code == 200
        return response.json()["user"]

    return _login
