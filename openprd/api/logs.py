"""Generation log endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.db.database import get_db
from openprd.dtos.logs import GenerationLogEntry, GenerationLogListResponse
from openprd.repositories.generation_log_repo import GenerationLogRepository

router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.get("/user/{user_id}", response_model=GenerationLogListResponse)
async def list_user_logs(
    user_id: str,
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """List a user's generation attempts, newest first."""
    logs = await GenerationLogRepository(db).list_by_user(user_id, limit=limit)
    return GenerationLogListResponse(logs=[GenerationLogEntry.model_validate(log) for log in logs])
