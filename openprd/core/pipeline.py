"""Generation pipeline.

Turns a user's product description into a stored PRD:

1. Upsert the user and resolve the API key (inline, else stored).
2. Resolve model metadata and the system prompt.
3. Estimate input tokens and enforce the context budget.
4. Call the provider once, then derive title, filename and sections.
5. Persist the PRD, its sections and a success log in one transaction.

Any failure after the key is resolved is recorded as a failure log row
in a separate transaction and re-raised.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from openprd.config import Settings, get_settings
from openprd.core.document import (
    codename_prompt,
    extract_project_name,
    extract_title,
    format_wizard_input,
    parse_sections,
    prd_filename,
    slugify_codename,
    slugify_title,
)
from openprd.core.key_vault import ApiKeyService, KeyVault
from openprd.errors.exceptions import (
    ApiKeyNotFoundError,
    GenerationFailedError,
    InputTooLongError,
    OpenPRDError,
    SystemPromptMissingError,
)
from openprd.llm.base import BaseLLMProvider
from openprd.llm.registry import ProviderRegistry
from openprd.llm.types import Message
from openprd.models.generation_log import GenerationLog
from openprd.models.prd import PRD, Section
from openprd.repositories.generation_log_repo import GenerationLogRepository
from openprd.repositories.prd_repo import PRDRepository, SectionRepository
from openprd.repositories.system_prompt_repo import SystemPromptRepository
from openprd.repositories.user_repo import UserRepository
from openprd.tracking.estimate import context_budget, estimate_generation_cost, estimate_tokens

logger = logging.getLogger(__name__)

MAIN_PROMPT_KEY = "main"
CODENAME_TEMPERATURE = 0.9
CODENAME_MAX_TOKENS = 20


@dataclass
class GenerationRequest:
    """Input of one generation."""

    user_id: str
    input: str
    provider: str
    model: str
    mode: str = "quick"
    output_mode: str = "ai_agent"
    wizard_data: Any = None
    api_key: str | None = None
    system_instructions: str | None = None


@dataclass(frozen=True)
class GeneratedSection:
    id: int
    type: str
    content: str
    tokens: int


@dataclass
class GenerationResult:
    """Stored PRD and what the caller needs to display it."""

    prd_id: int
    content: str
    tokens: int
    cost: float
    filename: str
    title: str
    sections: list[GeneratedSection] = field(default_factory=list)


class GenerationPipeline:
    """Runs generations against the provider registry and the database.

    Example:
        >>> pipeline = GenerationPipeline(get_session_factory(), get_registry(), vault)
        >>> result = await pipeline.generate(GenerationRequest(
        ...     user_id="u1", input="A habit tracker", provider="openai", model="gpt-4o-mini",
        ... ))
        >>> result.filename
        'nebula-prd.md'
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        registry: ProviderRegistry,
        vault: KeyVault,
        settings: Settings | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._registry = registry
        self._vault = vault
        self._settings = settings or get_settings()

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate, store and return a PRD.

        Raises:
            ApiKeyNotFoundError: No inline key and none stored for the provider.
            OpenPRDError: Classified failures, re-raised unchanged.
            GenerationFailedError: Any other failure.
        """
        started = time.monotonic()
        logger.info(
            "Generation started for user %s with %s/%s",
            request.user_id, request.provider, request.model,
            extra=_log_context(request),
        )

        async with self._session_factory() as session:
            await UserRepository(session).upsert(request.user_id)
            api_key = request.api_key
            if not api_key:
                api_key = await ApiKeyService(session, self._vault, self._registry).get_decrypted(
                    request.user_id, request.provider
                )
            await session.commit()

        if not api_key:
            raise ApiKeyNotFoundError(request.provider)

        try:
            result = await self._run(request, api_key, started)
        except Exception as e:
            await self._record_failure(request, e, started)
            if isinstance(e, OpenPRDError):
                raise
            raise GenerationFailedError(str(e) or type(e).__name__) from e

        logger.info(
            "Generation %s finished in %dms (%d tokens)",
            result.prd_id, _elapsed_ms(started), result.tokens,
            extra=_log_context(request),
        )
        return result

    async def _run(
        self,
        request: GenerationRequest,
        api_key: str,
        started: float,
    ) -> GenerationResult:
        spec = self._registry.get(request.provider)
        model_info = self._registry.resolve_model(request.provider, request.model)
        system_prompt = request.system_instructions or await self._load_system_prompt()

        final_input = request.input
        if request.mode == "wizard" and request.wizard_data:
            final_input = format_wizard_input(request.input, request.wizard_data)

        input_tokens = estimate_tokens(system_prompt + final_input)
        budget = context_budget(model_info, self._settings.context_budget_ratio)
        logger.debug("Estimated %d input tokens (budget %.0f)", input_tokens, budget)
        if not spec.is_dynamic and input_tokens > budget:
            raise InputTooLongError(input_tokens, int(budget))

        client = self._registry.create_client(request.provider, api_key)
        response = await client.complete(
            [Message.system(system_prompt), Message.user(final_input)],
            model=request.model,
            temperature=self._settings.llm_temperature,
            max_tokens=self._settings.llm_max_tokens,
        )
        content = response.content

        output_tokens = estimate_tokens(content)
        total_tokens = input_tokens + output_tokens
        cost = estimate_generation_cost(model_info, input_tokens, output_tokens)

        title = extract_title(content)
        filename = await self._filename(client, request, title)
        parsed = parse_sections(content)

        async with self._session_factory() as session:
            async with session.begin():
                prd = await PRDRepository(session).create(PRD(
                    user_id=request.user_id,
                    title=title,
                    input_text=request.input,
                    input_mode=request.mode,
                    wizard_responses=request.wizard_data or {},
                    generated_content=content,
                    output_mode=request.output_mode,
                    model_provider=request.provider,
                    model_name=request.model,
                    total_tokens=total_tokens,
                    generation_time_ms=_elapsed_ms(started),
                    cost_usd=cost,
                ))
                rows = await SectionRepository(session).create_many([
                    Section(
                        prd_id=prd.id,
                        section_type=section.type,
                        section_order=order,
                        content=section.content,
                        tokens=estimate_tokens(section.content),
                        version=1,
                    )
                    for order, section in enumerate(parsed, start=1)
                ])
                await GenerationLogRepository(session).create(GenerationLog(
                    user_id=request.user_id,
                    prd_id=prd.id,
                    action="generate",
                    model_provider=request.provider,
                    model_name=request.model,
                    tokens_input=input_tokens,
                    tokens_output=output_tokens,
                    tokens_total=total_tokens,
                    cost_usd=cost,
                    duration_ms=_elapsed_ms(started),
                ))
                prd_id = prd.id
                sections = [
                    GeneratedSection(
                        id=row.id,
                        type=row.section_type or "",
                        content=row.content or "",
                        tokens=row.tokens or 0,
                    )
                    for row in rows
                ]

        return GenerationResult(
            prd_id=prd_id,
            content=content,
            tokens=total_tokens,
            cost=cost,
            filename=filename,
            title=title,
            sections=sections,
        )

    async def _load_system_prompt(self) -> str:
        async with self._session_factory() as session:
            prompt = await SystemPromptRepository(session).get_active(MAIN_PROMPT_KEY)
        if prompt is None:
            raise SystemPromptMissingError(MAIN_PROMPT_KEY)
        return prompt.prompt_content

    async def _filename(
        self,
        client: BaseLLMProvider,
        request: GenerationRequest,
        title: str,
    ) -> str:
        """Pick the download filename.

        Preference: a name stated in the input, then a model-suggested
        codename, then the title slug.
        """
        name = extract_project_name(request.input)
        if name:
            return prd_filename(name)

        try:
            response = await client.complete(
                [Message.user(codename_prompt(request.input))],
                model=request.model,
                temperature=CODENAME_TEMPERATURE,
                max_tokens=CODENAME_MAX_TOKENS,
            )
        except OpenPRDError as e:
            logger.warning("Codename request failed, using title: %s", e.message)
        else:
            codename = slugify_codename(response.content)
            if codename:
                return prd_filename(codename)

        return prd_filename(slugify_title(title))

    async def _record_failure(
        self,
        request: GenerationRequest,
        error: Exception,
        started: float,
    ) -> None:
        message = error.message if isinstance(error, OpenPRDError) else str(error) or type(error).__name__
        logger.warning(
            "Generation failed for user %s with %s/%s: %s",
            request.user_id, request.provider, request.model, message,
            extra=_log_context(request),
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await GenerationLogRepository(session).create(GenerationLog(
                        user_id=request.user_id,
                        action="generate",
                        model_provider=request.provider,
                        model_name=request.model,
                        error_message=message,
                        duration_ms=_elapsed_ms(started),
                    ))
        except Exception:
            logger.exception("Could not record failed generation for user %s", request.user_id)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _log_context(request: GenerationRequest) -> dict[str, str]:
    return {"provider": request.provider, "model": request.model, "user_id": request.user_id}
