"""Generation log schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GenerationLogEntry(BaseModel):
    """One generation attempt; failed attempts carry `error` and no PRD."""

    id: int
    prd_id: int | None = Field(None, alias="prdId")
    action: str
    model_provider: str | None = Field(None, alias="modelProvider")
    model_name: str | None = Field(None, alias="modelName")
    tokens_total: int | None = Field(None, alias="totalTokens")
    cost_usd: float | None = Field(None, alias="costUsd")
    duration_ms: int | None = Field(None, alias="durationMs")
    error_message: str | None = Field(None, alias="error")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, protected_namespaces=())


class GenerationLogListResponse(BaseModel):
    logs: list[GenerationLogEntry]
