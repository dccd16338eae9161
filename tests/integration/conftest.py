"""Shared fixtures for HTTP-level tests."""

from __future__ import annotations

import pytest_asyncio

# Bound before any test patches httpx.AsyncClient for provider calls
from httpx import ASGITransport, AsyncClient

from openprd.config import get_settings
from openprd.core.pipeline import GenerationPipeline
from openprd.db.database import get_db
from openprd.main import app


@pytest_asyncio.fixture
async def api_app(session_factory, registry, vault):
    """The application wired to the test database, without running its lifespan."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.state.registry = registry
    app.state.vault = vault
    app.state.pipeline = GenerationPipeline(session_factory, registry, vault, get_settings())
    app.dependency_overrides[get_db] = override_get_db

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(api_app):
    async with AsyncClient(
        transport=ASGITransport(app=api_app),
        base_url="http://testserver",
    ) as ac:
        yield ac
