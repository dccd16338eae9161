"""Type definitions shared by the provider registry and provider clients.

Messages and responses use Pydantic like the rest of the API surface.
Registry entries are frozen dataclasses: the registry is built once at
start-up and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from openprd.llm.base import BaseLLMProvider


class MessageRole(str, Enum):
    """Role of a message in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single message in a conversation."""

    role: MessageRole = Field(..., description="Role of the message sender")
    content: str = Field(..., description="Content of the message")

    @classmethod
    def system(cls, content: str) -> Message:
        """Create a system message."""
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        """Create a user message."""
        return cls(role=MessageRole.USER, content=content)


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    content: str = Field(..., description="Generated content")
    model: str = Field(..., description="Model used for generation")
    finish_reason: str | None = Field(None, description="Reason for completion")
    raw_response: dict[str, Any] | None = Field(
        None, description="Raw response from the provider"
    )


class AuthMethod(str, Enum):
    """How a request carries the API key."""

    BEARER = "Bearer"
    X_API_KEY = "x-api-key"
    QUERY_KEY = "google-api-key"


class ResponseFormat(str, Enum):
    """Known shapes of a provider's model-list response."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    OPENROUTER = "openrouter"


@dataclass(frozen=True)
class ModelSpec:
    """One model in a provider catalog. Costs are USD per 1,000 tokens."""

    name: str
    context_window: int
    input_cost_per_1k: float
    output_cost_per_1k: float
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "contextWindow": self.context_window,
            "inputCostPer1k": self.input_cost_per_1k,
            "outputCostPer1k": self.output_cost_per_1k,
        }
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class ModelListSpec:
    """Dynamic model-list endpoint declared by a provider."""

    endpoint: str
    auth_method: AuthMethod
    response_format: ResponseFormat
    headers: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "endpoint": self.endpoint,
            "authMethod": self.auth_method.value,
            "responseFormat": self.response_format.value,
        }
        if self.headers:
            data["headers"] = dict(self.headers)
        return data


@dataclass(frozen=True)
class BaseUrlOption:
    """Alternative regional endpoint for a provider."""

    name: str
    url: str


@dataclass(frozen=True)
class ProviderSpec:
    """Static registry entry for one provider."""

    key: str
    name: str
    base_url: str
    factory: Callable[..., BaseLLMProvider]
    models: tuple[ModelSpec, ...] = ()
    model_list: ModelListSpec | None = None
    available_base_urls: tuple[BaseUrlOption, ...] = ()
    extra_headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_dynamic(self) -> bool:
        """Catalog is populated only from the provider's API."""
        return not self.models

    def find_model(self, name: str) -> ModelSpec | None:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "baseUrl": self.base_url,
            "models": [m.to_dict() for m in self.models],
        }
        if self.model_list is not None:
            data["modelList"] = self.model_list.to_dict()
        if self.available_base_urls:
            data["availableBaseUrls"] = [
                {"name": opt.name, "url": opt.url} for opt in self.available_base_urls
            ]
        return data
