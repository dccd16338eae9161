"""LLM provider registry and client implementations."""

from openprd.llm.base import BaseLLMProvider
from openprd.llm.registry import ProviderRegistry, build_default_registry, get_registry
from openprd.llm.types import LLMResponse, Message, MessageRole, ModelSpec, ProviderSpec

__all__ = [
    "BaseLLMProvider",
    "LLMResponse",
    "Message",
    "MessageRole",
    "ModelSpec",
    "ProviderRegistry",
    "ProviderSpec",
    "build_default_registry",
    "get_registry",
]


# Lazy imports for the concrete clients
def __getattr__(name: str):
    if name == "OpenAICompatibleProvider":
        from openprd.llm.openai_compat import OpenAICompatibleProvider
        return OpenAICompatibleProvider
    elif name == "OpenRouterProvider":
        from openprd.llm.openrouter import OpenRouterProvider
        return OpenRouterProvider
    elif name == "AnthropicProvider":
        from openprd.llm.anthropic import AnthropicProvider
        return AnthropicProvider
    elif name == "GeminiProvider":
        from openprd.llm.gemini import GeminiProvider
        return GeminiProvider
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
