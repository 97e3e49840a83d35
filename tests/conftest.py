"""Pytest configuration and fixtures."""

import os

# Must be set before shortener modules read their settings
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from shortener.core.setting import EnvSettingsOptions, Settings, StoreBackend
from shortener.db import InMemoryURLStore, SQLURLStore
from shortener.main import create_app
from shortener.services.url_service import URLService

EXAMPLE_URL = "https://example.com"


@pytest.fixture
async def memory_store():
    """Create an empty in-memory store."""
    return InMemoryURLStore()


@pytest.fixture
async def sql_store(tmp_path):
    """Create a SQL store backed by a fresh SQLite file."""
    store = SQLURLStore(f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sql"])
async def store(request, tmp_path):
    """Run a test against both store implementations."""
    if request.param == "memory":
        yield InMemoryURLStore()
        return
    store = SQLURLStore(f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
async def url_service(memory_store):
    return URLService(memory_store)


@pytest.fixture
def app_settings():
    return Settings(
        ENV_SETTING=EnvSettingsOptions.development,
        STORE_BACKEND=StoreBackend.memory,
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture
def client(app_settings):
    """Create a test client; the store is created by the app on startup."""
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client
