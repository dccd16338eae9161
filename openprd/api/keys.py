"""Stored API key endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from openprd.core.key_vault import ApiKeyService
from openprd.core.rate_limiter import KEYS_LIMIT, limiter
from openprd.dtos.keys import KeyListResponse, SaveKeyRequest, SaveKeyResponse, StoredKeyResponse

from .deps import get_api_key_service

router = APIRouter(prefix="/api/keys", tags=["keys"])


@router.post("", response_model=SaveKeyResponse)
@limiter.limit(KEYS_LIMIT)
async def save_key(
    body: SaveKeyRequest,
    request: Request,
    service: ApiKeyService = Depends(get_api_key_service),
):
    """Encrypt and store a provider key for a user."""
    key_id, hint = await service.save(body.user_id, body.provider, body.api_key, body.label)
    return SaveKeyResponse(id=key_id, key_hint=hint)


@router.get("/{user_id}", response_model=KeyListResponse)
@limiter.limit(KEYS_LIMIT)
async def list_keys(
    user_id: str,
    request: Request,
    service: ApiKeyService = Depends(get_api_key_service),
):
    """List a user's active keys, newest first. Key material is never returned."""
    keys = await service.list_for_user(user_id)
    return KeyListResponse(keys=[
        StoredKeyResponse(
            id=k.id,
            provider=k.provider,
            key_hint=k.key_hint,
            label=k.label,
            is_active=k.is_active,
            created_at=k.created_at,
            last_used=k.last_used,
        )
        for k in keys
    ])


@router.delete("/{user_id}/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(KEYS_LIMIT)
async def delete_key(
    user_id: str,
    key_id: int,
    request: Request,
    service: ApiKeyService = Depends(get_api_key_service),
):
    """Deactivate a stored key."""
    await service.deactivate(user_id, key_id)
