"""Provider catalog and key connectivity endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from openprd.core.prober import ConnectivityProber
from openprd.core.rate_limiter import CONNECTIVITY_LIMIT, limiter
from openprd.dtos.providers import (
    ConnectionTestRequest,
    ConnectionTestResponse,
    ModelInfo,
    ProviderModelsRequest,
    ProviderModelsResponse,
    ProvidersResponse,
)
from openprd.llm.registry import ProviderRegistry

from .deps import get_prober, get_provider_registry

router = APIRouter(prefix="/api", tags=["models"])


@router.get("/models", response_model=ProvidersResponse)
async def list_models(registry: ProviderRegistry = Depends(get_provider_registry)):
    """Return every registered provider with its static model catalog."""
    return ProvidersResponse(providers=registry.to_public_dict())


@router.post("/provider-models", response_model=ProviderModelsResponse)
@limiter.limit(CONNECTIVITY_LIMIT)
async def list_provider_models(
    body: ProviderModelsRequest,
    request: Request,
    prober: ConnectivityProber = Depends(get_prober),
):
    """Validate a key and list the models it can use.

    The key is used for this call only and is not stored.
    """
    models = await prober.validate_and_list(body.provider, body.api_key, base_url=body.base_url)
    return ProviderModelsResponse(models=[ModelInfo.from_spec(m) for m in models])


@router.post("/test-connection", response_model=ConnectionTestResponse, response_model_exclude_none=True)
@limiter.limit(CONNECTIVITY_LIMIT)
async def test_connection(
    body: ConnectionTestRequest,
    request: Request,
    prober: ConnectivityProber = Depends(get_prober),
):
    """Check whether a key works; provider failures come back as `valid: false`."""
    result = await prober.test_connection(body.provider, body.api_key)
    return ConnectionTestResponse(
        valid=result.valid,
        model=result.model,
        context_window=result.context_window,
        error=result.error,
    )
