"""Tests for the app shell: health endpoint and pool lifecycle."""

import pytest
from httpx import ASGITransport, AsyncClient

from social import main as main_module
from social.main import app, lifespan
from social.settings import Settings
from social.stores.storage import Storage


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health endpoint returns ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_lifespan_builds_storage_on_app_state(engine, monkeypatch: pytest.MonkeyPatch):
    settings = Settings(_env_file=None, query_timeout_seconds=1.5)
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "create_engine", lambda _settings: engine)

    async with lifespan(app):
        storage = app.state.storage
        assert isinstance(storage, Storage)
        assert storage.posts.timeout == 1.5
        assert app.state.engine is engine
