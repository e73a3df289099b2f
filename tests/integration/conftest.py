"""Integration test fixtures — fresh app per test, seeded hub, HTTP and WebSocket clients."""

import os
import tempfile

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Force test config BEFORE any app imports
os.environ["DEBUG"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"
os.environ["LOG_DIR"] = os.path.join(tempfile.gettempdir(), "incident_sync_test_logs")

import incident_sync.dependencies as dep_mod
from incident_sync.engine.seed import default_catalog, seed_incidents


@pytest.fixture
def test_app():
    """Build an app against freshly reset singletons."""
    dep_mod.reset_singletons()
    from incident_sync.main import create_app

    yield create_app()
    dep_mod.reset_singletons()


@pytest.fixture
def ws_client(test_app):
    """Sync client that runs the lifespan, so the hub is seeded on entry."""
    with TestClient(test_app) as client:
        yield client


@pytest_asyncio.fixture
async def client(test_app):
    """Async HTTP client. ASGITransport skips the lifespan, so seed by hand."""
    dep_mod.get_hub().seed(seed_incidents(), default_catalog())
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
