"""API key repository."""
from __future__ import annotations

from datetime import UTC, datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.models.api_key import ApiKey


class ApiKeyRepository:
    """Stored API key repository.

    Queries only ever return rows owned by the given user.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, api_key: ApiKey) -> ApiKey:
        """Create API key row.

        Args:
            api_key: ApiKey entity

        Returns:
            Created row with its assigned id
        """
        self.session.add(api_key)
        await self.session.flush()
        return api_key

    async def list_active(self, user_id: str) -> List[ApiKey]:
        """List active keys for a user, newest first."""
        stmt = (
            select(ApiKey)
            .where(ApiKey.user_id == user_id, ApiKey.is_active.is_(True))
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_latest_active(self, user_id: str, provider: str) -> Optional[ApiKey]:
        """Get the most recently created active key for a provider."""
        stmt = (
            select(ApiKey)
            .where(
                ApiKey.user_id == user_id,
                ApiKey.provider == provider,
                ApiKey.is_active.is_(True),
            )
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def touch(self, key_id: int) -> None:
        """Record that a key was just used."""
        await self.session.execute(
            update(ApiKey)
            .where(ApiKey.id == key_id)
            .values(last_used=datetime.now(UTC).replace(tzinfo=None))
        )

    async def deactivate(self, user_id: str, key_id: int) -> bool:
        """Clear the active flag.

        Returns:
            True if an active key owned by the user was found
        """
        result = await self.session.execute(
            update(ApiKey)
            .where(
                ApiKey.id == key_id,
                ApiKey.user_id == user_id,
                ApiKey.is_active.is_(True),
            )
            .values(is_active=False)
        )
        return result.rowcount > 0
