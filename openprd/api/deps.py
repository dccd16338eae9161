"""Shared router dependencies.

Long-lived services are created once in the application lifespan and
kept on `app.state`.
"""
from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from openprd.core.key_vault import ApiKeyService, KeyVault
from openprd.core.pipeline import GenerationPipeline
from openprd.core.prober import ConnectivityProber
from openprd.db.database import get_db
from openprd.llm.registry import ProviderRegistry


def get_provider_registry(request: Request) -> ProviderRegistry:
    return request.app.state.registry


def get_key_vault(request: Request) -> KeyVault:
    return request.app.state.vault


def get_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.pipeline


def get_prober(registry: ProviderRegistry = Depends(get_provider_registry)) -> ConnectivityProber:
    return ConnectivityProber(registry)


def get_api_key_service(
    db: AsyncSession = Depends(get_db),
    vault: KeyVault = Depends(get_key_vault),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> ApiKeyService:
    return ApiKeyService(db, vault, registry)
