"""Stored PRD schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PRDSummary(BaseModel):
    """PRD list item."""

    id: int
    title: str | None = None
    input_mode: str = Field(..., alias="inputMode")
    output_mode: str = Field(..., alias="outputMode")
    model_provider: str | None = Field(None, alias="modelProvider")
    model_name: str | None = Field(None, alias="modelName")
    total_tokens: int | None = Field(None, alias="totalTokens")
    cost_usd: float | None = Field(None, alias="costUsd")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, protected_namespaces=())


class PRDSection(BaseModel):
    id: int
    section_type: str | None = Field(None, alias="sectionType")
    section_order: int | None = Field(None, alias="sectionOrder")
    content: str | None = None
    tokens: int | None = None
    version: int = 1

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class PRDDetail(PRDSummary):
    """PRD with its full content and sections."""

    input_text: str | None = Field(None, alias="inputText")
    generated_content: str | None = Field(None, alias="generatedContent")
    generation_time_ms: int | None = Field(None, alias="generationTimeMs")
    sections: list[PRDSection] = Field(default_factory=list)


class PRDListResponse(BaseModel):
    prds: list[PRDSummary]
