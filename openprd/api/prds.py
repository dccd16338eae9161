"""Stored PRD endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.db.database import get_db
from openprd.dtos.prds import PRDDetail, PRDListResponse, PRDSection, PRDSummary
from openprd.errors.exceptions import PRDNotFoundError
from openprd.repositories.prd_repo import PRDRepository, SectionRepository

router = APIRouter(prefix="/api/prds", tags=["prds"])


@router.get("/user/{user_id}", response_model=PRDListResponse)
async def list_user_prds(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List a user's PRDs, newest first."""
    prds = await PRDRepository(db).list_by_user(user_id, limit=limit, offset=offset)
    return PRDListResponse(prds=[PRDSummary.model_validate(p) for p in prds])


@router.get("/{prd_id}", response_model=PRDDetail)
async def get_prd(prd_id: int, db: AsyncSession = Depends(get_db)):
    """Get one PRD with its sections."""
    prd = await PRDRepository(db).get_by_id(prd_id)
    if prd is None:
        raise PRDNotFoundError(prd_id)
    return PRDDetail.model_validate(prd)


@router.get("/{prd_id}/sections", response_model=list[PRDSection])
async def list_prd_sections(prd_id: int, db: AsyncSession = Depends(get_db)):
    """List a PRD's sections in document order."""
    if await PRDRepository(db).get_by_id(prd_id) is None:
        raise PRDNotFoundError(prd_id)
    sections = await SectionRepository(db).list_by_prd(prd_id)
    return [PRDSection.model_validate(s) for s in sections]
