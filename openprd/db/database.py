"""Database configuration and session management."""
from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from openprd.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Engine configuration
_engine_kwargs: dict = {
    "echo": settings.db_echo,
    "future": True,
}

# Add connection pool settings for non-SQLite databases
if not settings.is_sqlite:
    _engine_kwargs.update({
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    })

engine = create_async_engine(settings.database_url, **_engine_kwargs)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get session factory for work that manages its own transactions.

    Returns:
        Callable that returns AsyncSession context manager.
    """
    return AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def seed_system_prompts(session: AsyncSession) -> bool:
    """Insert the default `main` prompt when no active one exists.

    Returns:
        True if a prompt was inserted.
    """
    from openprd.models.system_prompt import SystemPrompt
    from openprd.prompts import DEFAULT_MAIN_PROMPT, DEFAULT_PROMPT_VERSION

    stmt = select(SystemPrompt.id).where(
        SystemPrompt.prompt_key == "main",
        SystemPrompt.is_active.is_(True),
    )
    if (await session.execute(stmt)).first() is not None:
        return False

    session.add(SystemPrompt(
        version=DEFAULT_PROMPT_VERSION,
        prompt_key="main",
        prompt_content=DEFAULT_MAIN_PROMPT,
        is_active=True,
        changelog="Initial comprehensive PRD prompt",
    ))
    await session.flush()
    return True


async def init_db() -> None:
    """Initialize database tables and seed the default prompt.

    In production, use Alembic migrations instead:
        alembic upgrade head
    """
    if settings.is_production:
        return  # Production uses Alembic migrations

    # Import models to register them
    from openprd.models import (  # noqa: F401
        ApiKey,
        GenerationLog,
        PRD,
        Section,
        SystemPrompt,
        User,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        if await seed_system_prompts(session):
            logger.info("Seeded default system prompt")
        await session.commit()
