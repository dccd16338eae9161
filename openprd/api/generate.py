"""PRD generation endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from openprd.core.pipeline import GenerationPipeline, GenerationRequest
from openprd.core.rate_limiter import GENERATE_LIMIT, limiter
from openprd.dtos.generate import GenerateRequest, GenerateResponse, SectionResponse

from .deps import get_pipeline

router = APIRouter(prefix="/api", tags=["generate"])


@router.post("/generate", response_model=GenerateResponse)
@limiter.limit(GENERATE_LIMIT)
async def generate(
    body: GenerateRequest,
    request: Request,
    pipeline: GenerationPipeline = Depends(get_pipeline),
):
    """Generate and store a PRD.

    Synchronous: the response is sent once the provider has answered and
    the document is stored.
    """
    result = await pipeline.generate(GenerationRequest(
        user_id=body.user_id,
        input=body.input,
        mode=body.mode,
        wizard_data=body.wizard_data,
        provider=body.provider,
        model=body.model,
        output_mode=body.output_mode,
        api_key=body.api_key,
        system_instructions=body.system_instructions,
    ))
    return GenerateResponse(
        prd_id=result.prd_id,
        content=result.content,
        tokens=result.tokens,
        cost=result.cost,
        filename=result.filename,
        sections=[
            SectionResponse(id=s.id, type=s.type, content=s.content, tokens=s.tokens)
            for s in result.sections
        ],
    )
