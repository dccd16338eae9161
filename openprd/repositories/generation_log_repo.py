"""Generation log repository."""
from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.models.generation_log import GenerationLog


class GenerationLogRepository:
    """Generation log repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, log: GenerationLog) -> GenerationLog:
        """Append a log row."""
        self.session.add(log)
        await self.session.flush()
        return log

    async def list_by_user(self, user_id: str, limit: int = 100) -> List[GenerationLog]:
        """List a user's log rows, newest first."""
        stmt = (
            select(GenerationLog)
            .where(GenerationLog.user_id == user_id)
            .order_by(GenerationLog.created_at.desc(), GenerationLog.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
