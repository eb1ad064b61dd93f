"""API test fixtures — FastAPI test client over a fresh engine.

Invariants:
    - Every test gets its own CoordinationEngine (root conftest `engine`)
    - get_engine dependency overridden; the module singleton is patched too so
      the readiness probe sees the same engine

Design Decisions:
    - ASGITransport does not run the lifespan, so the sweeper is never started
      unless a test starts it explicitly
"""

import pytest
from httpx import ASGITransport, AsyncClient

import pairgate.services.coordination_engine as engine_module
from pairgate.main import app
from pairgate.services.coordination_engine import get_engine


@pytest.fixture
async def client(engine):
    """FastAPI test client with the engine dependency overridden."""
    app.dependency_overrides[get_engine] = lambda: engine
    original_engine = engine_module.engine
    engine_module.engine = engine

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    engine_module.engine = original_engine
