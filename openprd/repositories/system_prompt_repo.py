"""System prompt repository."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.models.system_prompt import SystemPrompt


class SystemPromptRepository:
    """System prompt repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active(self, prompt_key: str = "main") -> Optional[SystemPrompt]:
        """Get the newest active prompt for `prompt_key`.

        Args:
            prompt_key: Prompt family, e.g. "main"

        Returns:
            SystemPrompt or None
        """
        stmt = (
            select(SystemPrompt)
            .where(
                SystemPrompt.prompt_key == prompt_key,
                SystemPrompt.is_active.is_(True),
            )
            .order_by(SystemPrompt.created_at.desc(), SystemPrompt.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
