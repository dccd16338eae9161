"""Provider and model schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from openprd.llm.types import ModelSpec


class ModelInfo(BaseModel):
    name: str = Field(..., description="Model identifier")
    context_window: int = Field(..., description="Max context tokens", alias="contextWindow")
    input_cost_per_1k: float = Field(..., description="USD per 1K input tokens", alias="inputCostPer1k")
    output_cost_per_1k: float = Field(..., description="USD per 1K output tokens", alias="outputCostPer1k")
    description: str | None = Field(None, description="Human-readable description")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_spec(cls, spec: ModelSpec) -> ModelInfo:
        return cls(
            name=spec.name,
            context_window=spec.context_window,
            input_cost_per_1k=spec.input_cost_per_1k,
            output_cost_per_1k=spec.output_cost_per_1k,
            description=spec.description,
        )


class ProvidersResponse(BaseModel):
    """Full registry keyed by provider id."""

    providers: dict[str, dict[str, Any]]


class ProviderModelsRequest(BaseModel):
    provider: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1, alias="apiKey")
    base_url: str | None = Field(None, alias="baseUrl", description="Regional endpoint override")

    model_config = ConfigDict(populate_by_name=True)


class ProviderModelsResponse(BaseModel):
    models: list[ModelInfo]


class ConnectionTestRequest(BaseModel):
    provider: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1, alias="apiKey")

    model_config = ConfigDict(populate_by_name=True)


class ConnectionTestResponse(BaseModel):
    valid: bool
    model: str | None = None
    context_window: int | None = Field(None, alias="contextWindow")
    error: str | None = None

    model_config = ConfigDict(populate_by_name=True)
