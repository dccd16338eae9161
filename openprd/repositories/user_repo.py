"""User repository."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.models.user import User


class UserRepository:
    """User repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert(self, user_id: str) -> None:
        """Create the user if missing, otherwise refresh `last_seen`.

        Args:
            user_id: Client-generated user ID
        """
        await self.session.execute(
            text(
                """INSERT INTO users (id, created_at, last_seen, usage_tier)
                   VALUES (:id, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP, 'free')
                   ON CONFLICT(id) DO UPDATE SET last_seen = CURRENT_TIMESTAMP"""
            ),
            {"id": user_id},
        )

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User or None
        """
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
