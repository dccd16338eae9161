"""LLM Provider Registry.

Static table of the providers a user can bring a key for: display name,
endpoint, model-list declaration, model catalog and the client class
that talks to it. Built once and never mutated afterwards.
"""

from __future__ import annotations

from typing import Any

from openprd.config import Settings, get_settings
from openprd.errors.exceptions import UnsupportedModelError, UnsupportedProviderError
from openprd.llm.base import BaseLLMProvider
from openprd.llm.types import (
    AuthMethod,
    BaseUrlOption,
    ModelListSpec,
    ModelSpec,
    ProviderSpec,
    ResponseFormat,
)

# Placeholder metadata for models of fully dynamic providers
DYNAMIC_CONTEXT_WINDOW = 128000
DYNAMIC_COST_PER_1K = 0.001


class ProviderRegistry:
    """Lookup of provider specs and factory for provider clients.

    Example:
        >>> registry = get_registry()
        >>> spec = registry.get("openai")
        >>> client = registry.create_client("openai", api_key="sk-...")
    """

    def __init__(self, providers: list[ProviderSpec], timeout: float = 120.0) -> None:
        self._providers: dict[str, ProviderSpec] = {p.key: p for p in providers}
        self._timeout = timeout

    def get(self, provider: str) -> ProviderSpec:
        """Return the spec for `provider`.

        Raises:
            UnsupportedProviderError: If the key is not registered.
        """
        if provider not in self:
            raise UnsupportedProviderError(provider)
        return self._providers[provider]

    def __contains__(self, provider: object) -> bool:
        return provider in self._providers

    def list_providers(self) -> list[str]:
        """List all registered provider keys."""
        return list(self._providers.keys())

    def get_model(self, provider: str, model: str) -> ModelSpec:
        """Return catalog metadata for a statically listed model."""
        found = self.get(provider).find_model(model)
        if found is None:
            raise UnsupportedModelError(model, provider=provider)
        return found

    def resolve_model(self, provider: str, model: str) -> ModelSpec:
        """Return metadata for `model`, synthesizing it for dynamic providers."""
        spec = self.get(provider)
        if spec.is_dynamic:
            return ModelSpec(
                name=model,
                context_window=DYNAMIC_CONTEXT_WINDOW,
                input_cost_per_1k=DYNAMIC_COST_PER_1K,
                output_cost_per_1k=DYNAMIC_COST_PER_1K,
                description=f"{spec.name} model",
            )
        return self.get_model(provider, model)

    def create_client(
        self,
        provider: str,
        api_key: str,
        base_url: str | None = None,
    ) -> BaseLLMProvider:
        """Instantiate the client class registered for `provider`."""
        spec = self.get(provider)
        return spec.factory(spec, api_key, base_url=base_url, timeout=self._timeout)

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize the registry for the public models endpoint."""
        return {key: spec.to_dict() for key, spec in self._providers.items()}


_default_registry: ProviderRegistry | None = None


def get_registry() -> ProviderRegistry:
    """Get the default provider registry, creating it lazily from settings."""
    global _default_registry
    if _default_registry is None:
        _default_registry = build_default_registry(get_settings())
    return _default_registry


def build_default_registry(settings: Settings) -> ProviderRegistry:
    """Build the registry of built-in providers with lazy client imports."""

    def _create_openai_compatible(spec: ProviderSpec, api_key: str, **kwargs: Any) -> BaseLLMProvider:
        from openprd.llm.openai_compat import OpenAICompatibleProvider
        return OpenAICompatibleProvider(spec, api_key, **kwargs)

    def _create_openrouter(spec: ProviderSpec, api_key: str, **kwargs: Any) -> BaseLLMProvider:
        from openprd.llm.openrouter import OpenRouterProvider
        return OpenRouterProvider(spec, api_key, **kwargs)

    def _create_anthropic(spec: ProviderSpec, api_key: str, **kwargs: Any) -> BaseLLMProvider:
        from openprd.llm.anthropic import AnthropicProvider
        return AnthropicProvider(spec, api_key, **kwargs)

    def _create_gemini(spec: ProviderSpec, api_key: str, **kwargs: Any) -> BaseLLMProvider:
        from openprd.llm.gemini import GeminiProvider
        return GeminiProvider(spec, api_key, **kwargs)

    def _bearer_list(fmt: ResponseFormat = ResponseFormat.OPENAI) -> ModelListSpec:
        return ModelListSpec(endpoint="/models", auth_method=AuthMethod.BEARER, response_format=fmt)

    providers = [
        ProviderSpec(
            key="openai",
            name="OpenAI",
            base_url="https://api.openai.com/v1",
            factory=_create_openai_compatible,
            model_list=_bearer_list(),
            models=(
                ModelSpec("gpt-4o", 128000, 0.005, 0.015),
                ModelSpec("gpt-4o-mini", 128000, 0.00015, 0.0006),
                ModelSpec("gpt-4-turbo", 128000, 0.01, 0.03),
            ),
        ),
        ProviderSpec(
            key="anthropic",
            name="Anthropic",
            base_url="https://api.anthropic.com/v1",
            factory=_create_anthropic,
            model_list=ModelListSpec(
                endpoint="/models",
                auth_method=AuthMethod.X_API_KEY,
                response_format=ResponseFormat.ANTHROPIC,
                headers={"anthropic-version": "2023-06-01"},
            ),
            models=(
                ModelSpec("claude-3-5-sonnet-20241022", 200000, 0.003, 0.015),
                ModelSpec("claude-3-haiku-20240307", 200000, 0.00025, 0.00125),
            ),
        ),
        ProviderSpec(
            key="google",
            name="Google",
            base_url="https://generativelanguage.googleapis.com/v1beta",
            factory=_create_gemini,
            model_list=ModelListSpec(
                endpoint="/models",
                auth_method=AuthMethod.QUERY_KEY,
                response_format=ResponseFormat.GOOGLE,
            ),
            models=(
                ModelSpec("gemini-1.5-pro-latest", 2000000, 0.00125, 0.005),
                ModelSpec("gemini-1.5-flash-latest", 1000000, 0.000075, 0.0003),
            ),
        ),
        ProviderSpec(
            key="openrouter",
            name="OpenRouter",
            base_url="https://openrouter.ai/api/v1",
            factory=_create_openrouter,
            model_list=_bearer_list(ResponseFormat.OPENROUTER),
            extra_headers={
                "HTTP-Referer": settings.app_referer,
                "X-Title": settings.app_title_header,
            },
        ),
        ProviderSpec(
            key="deepseek",
            name="DeepSeek",
            base_url="https://api.deepseek.com/v1",
            factory=_create_openai_compatible,
            model_list=_bearer_list(),
            models=(
                ModelSpec("deepseek-chat", 128000, 0.00014, 0.00028),
                ModelSpec("deepseek-coder", 128000, 0.00014, 0.00028),
            ),
        ),
        ProviderSpec(
            key="moonshot",
            name="Moonshot.ai",
            base_url="https://api.moonshot.ai/v1",
            factory=_create_openai_compatible,
            model_list=_bearer_list(),
            available_base_urls=(
                BaseUrlOption("Global", "https://api.moonshot.ai/v1"),
                BaseUrlOption("China", "https://api.moonshot.cn/v1"),
            ),
            models=(
                ModelSpec("moonshot-v1-8k", 8000, 0.001, 0.001),
                ModelSpec("moonshot-v1-32k", 32000, 0.002, 0.002),
                ModelSpec("moonshot-v1-128k", 128000, 0.005, 0.005),
            ),
        ),
        ProviderSpec(
            key="zai",
            name="Z.ai",
            base_url="https://api.z.ai/api/paas/v4",
            factory=_create_openai_compatible,
            models=(
                ModelSpec("glm-4.5", 128000, 0.0006, 0.0022),
                ModelSpec("glm-4-32b-0414-128k", 128000, 0.0001, 0.0001),
            ),
        ),
    ]
    return ProviderRegistry(providers, timeout=settings.llm_timeout)
