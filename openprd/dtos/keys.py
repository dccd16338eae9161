"""Stored API key schemas (key material is never returned)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SaveKeyRequest(BaseModel):
    """Key save request."""

    user_id: str = Field(..., min_length=1, max_length=64, alias="userId")
    provider: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1, alias="apiKey")
    label: str | None = Field(None, max_length=255)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "userId": "3f1c2a9e-5b7d-4e2f-9a61-0c8d7e6b5a43",
                "provider": "openai",
                "apiKey": "sk-...",
                "label": "personal",
            }
        },
    )


class SaveKeyResponse(BaseModel):
    id: int
    key_hint: str = Field(..., alias="keyHint")

    model_config = ConfigDict(populate_by_name=True)


class StoredKeyResponse(BaseModel):
    """Stored key metadata."""

    id: int
    provider: str
    key_hint: str = Field(..., alias="keyHint")
    label: str | None = None
    is_active: bool = Field(..., alias="isActive")
    created_at: datetime = Field(..., alias="createdAt")
    last_used: datetime | None = Field(None, alias="lastUsed")

    model_config = ConfigDict(populate_by_name=True)


class KeyListResponse(BaseModel):
    keys: list[StoredKeyResponse]
