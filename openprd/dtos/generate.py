"""Generation request/response schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """PRD generation request.

    `apiKey` is optional when the user has a stored key for the provider.
    """

    user_id: str = Field(..., min_length=1, max_length=64, alias="userId")
    input: str = Field(..., min_length=1, description="Product description")
    mode: Literal["quick", "wizard"] = "quick"
    wizard_data: dict[str, Any] | None = Field(None, alias="wizardData")
    provider: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    output_mode: Literal["ai_agent", "human_dev"] = Field("ai_agent", alias="outputMode")
    api_key: str | None = Field(None, alias="apiKey")
    system_instructions: str | None = Field(None, alias="systemInstructions")

    model_config = ConfigDict(populate_by_name=True)


class SectionResponse(BaseModel):
    id: int
    type: str
    content: str
    tokens: int


class GenerateResponse(BaseModel):
    prd_id: int = Field(..., alias="prdId")
    content: str
    tokens: int
    cost: float
    filename: str
    sections: list[SectionResponse]

    model_config = ConfigDict(populate_by_name=True)
