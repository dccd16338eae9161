"""Pytest configuration and fixtures for OpenPRD tests."""

from __future__ import annotations

import os

# Set test environment variables BEFORE any openprd imports: settings,
# the module engine and the rate limiter read them at import time.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("KEY_VAULT_SECRET", "test-key-vault-secret-for-testing-only-0123456789")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")

from dataclasses import dataclass, field
from typing import Any, AsyncGenerator
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from openprd import models  # noqa: F401  registers all models on Base
from openprd.config import get_settings
from openprd.core.key_vault import KeyVault
from openprd.db.database import Base, seed_system_prompts
from openprd.llm.registry import ProviderRegistry, build_default_registry

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_VAULT_SECRET = "unit-test-master-secret-that-is-long-enough"


# === HTTP mocking ===

@dataclass
class RecordedRequest:
    """One outbound request captured by FakeHTTP."""

    method: str
    url: str
    headers: dict[str, str]
    params: dict[str, str]
    json: Any


@dataclass
class FakeHTTP:
    """Queue of canned provider responses replacing httpx.AsyncClient.

    Every request pops the next queued item; exceptions are raised.
    """

    queued: list[Any] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)

    def reply(self, status_code: int = 200, json: Any = None, text: str | None = None) -> FakeHTTP:
        if text is not None:
            self.queued.append(httpx.Response(status_code, text=text))
        else:
            self.queued.append(httpx.Response(status_code, json=json))
        return self

    def fail(self, exc: Exception) -> FakeHTTP:
        self.queued.append(exc)
        return self

    async def request(self, method, url, headers=None, params=None, json=None):
        self.requests.append(RecordedRequest(
            method=method,
            url=url,
            headers=dict(headers or {}),
            params=dict(params or {}),
            json=json,
        ))
        if not self.queued:
            raise AssertionError(f"Unexpected outbound request: {method} {url}")
        item = self.queued.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def fake_http():
    """Patch httpx.AsyncClient used by the provider clients."""
    fake = FakeHTTP()

    mock_client = AsyncMock()
    mock_client.request = AsyncMock(side_effect=fake.request)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)

    with patch("openprd.llm.base.httpx.AsyncClient", MagicMock(return_value=mock_client)):
        yield fake


def openai_reply(content: str) -> dict[str, Any]:
    """Chat completions payload with a single choice."""
    return {
        "id": "chatcmpl-test",
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


SAMPLE_PRD = """\
# Falcon: PDF Summarizer

Intro paragraph before the numbered sections.

# 1. Executive Summary
Falcon turns long PDFs into short briefs.

# 2. Problem Statement
Reading is slow.
## Details
- Users skim

# 3. Solution Overview
Upload, summarize, share.
"""


# === Core objects ===

@pytest.fixture
def registry() -> ProviderRegistry:
    return build_default_registry(get_settings())


@pytest.fixture
def vault() -> KeyVault:
    return KeyVault(TEST_VAULT_SECRET)


# === Database ===

@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest_asyncio.fixture
async def seeded_prompt(session_factory):
    """Store the default `main` system prompt."""
    async with session_factory() as session:
        await seed_system_prompts(session)
        await session.commit()


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()
