"""PRD and section repositories."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.models.prd import PRD, Section


class PRDRepository:
    """PRD repository."""

    def __init__(self, session: AsyncSession):
        """Initialize repository.

        Args:
            session: Database session
        """
        self.session = session

    async def create(self, prd: PRD) -> PRD:
        """Create PRD, flushing so that its id is assigned.

        Args:
            prd: PRD entity

        Returns:
            Created PRD
        """
        self.session.add(prd)
        await self.session.flush()
        return prd

    async def get_by_id(self, prd_id: int) -> Optional[PRD]:
        """Get PRD by ID, sections included.

        Args:
            prd_id: PRD ID

        Returns:
            PRD or None
        """
        stmt = select(PRD).where(PRD.id == prd_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> List[PRD]:
        """List PRDs of a user, newest first.

        Args:
            user_id: Owner ID
            limit: Maximum rows
            offset: Rows to skip

        Returns:
            List of PRDs
        """
        stmt = (
            select(PRD)
            .where(PRD.user_id == user_id)
            .order_by(PRD.created_at.desc(), PRD.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SectionRepository:
    """Section repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, sections: List[Section]) -> List[Section]:
        """Insert sections and assign their ids."""
        self.session.add_all(sections)
        await self.session.flush()
        return sections

    async def list_by_prd(self, prd_id: int) -> List[Section]:
        """List sections of a PRD in document order."""
        stmt = (
            select(Section)
            .where(Section.prd_id == prd_id)
            .order_by(Section.section_order)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
