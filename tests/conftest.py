"""Pytest configuration and fixtures."""

import os
import secrets
import tempfile
from pathlib import Path

import pytest

# Settings are cached on first import: point the service at a throwaway
# SQLite file and a per-run JWT secret before anything imports lockbox.
_TEST_DB = Path(tempfile.gettempdir()) / f"lockbox-test-{secrets.token_hex(8)}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB}"
os.environ["SECRET_KEY"] = f"test-only-{secrets.token_urlsafe(32)}"

import httpx  # noqa: E402
import pytest_asyncio  # noqa: E402

from lockbox.app.core.config import settings  # noqa: E402
from lockbox.app.db import init_models  # noqa: E402
from lockbox.app.main import app  # noqa: E402
from lockbox.app.security import timelock  # noqa: E402
from lockbox.client.engine import SyncEngine  # noqa: E402
from lockbox.client.store import HttpSecretStore  # noqa: E402
from tests.fakes import FakeClock, FakeStore, GatedStore  # noqa: E402

BASE_URL = f"http://testserver{settings.API_V1_STR}"


def pytest_sessionfinish(session, exitstatus):
    if _TEST_DB.exists():
        _TEST_DB.unlink()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return FakeStore(clock, password="correct horse")


@pytest.fixture
def gated_store(clock):
    return GatedStore(clock, password="correct horse")


@pytest.fixture
def engine(store, clock):
    return SyncEngine(store, clock=clock)


@pytest.fixture
def server_clock(monkeypatch):
    """Freeze the service clock; advance it with .advance(ms)."""
    fake = FakeClock()
    monkeypatch.setattr(timelock, "now_ms", fake)
    return fake


@pytest_asyncio.fixture
async def db():
    """Fresh tables for every test that talks to the service."""
    await init_models(drop=True)
    yield


@pytest_asyncio.fixture
async def api(db):
    """Raw HTTP client bound to the in-process FastAPI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest_asyncio.fixture
async def auth_headers(api):
    response = await api.post("/auth/setup", json={"password": "correct horse"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def http_store(db):
    """HttpSecretStore talking to the in-process app."""
    store = HttpSecretStore(base_url=BASE_URL, transport=httpx.ASGITransport(app=app))
    yield store
    await store.aclose()
