"""OpenPRD exception hierarchy.

All exceptions inherit from OpenPRDError so the API layer can map them to
a status code and an error envelope in one place. Nothing here is retried:
the `status_code` only classifies the failure for the caller.
"""

from __future__ import annotations


class OpenPRDError(Exception):
    """Base exception for all OpenPRD errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# Caller / input errors
class InvalidArgumentError(OpenPRDError):
    """Request cannot be served as given."""

    status_code = 400
    code = "INVALID_ARGUMENT"


class UnsupportedProviderError(InvalidArgumentError):
    """Provider key is not in the registry."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class UnsupportedModelError(InvalidArgumentError):
    """Model is not in the provider's catalog."""

    def __init__(self, model: str, provider: str | None = None) -> None:
        super().__init__(f"Unsupported model: {model}")
        self.model = model
        self.provider = provider


class InputTooLongError(InvalidArgumentError):
    """Estimated input exceeds the model's context budget."""

    def __init__(self, estimated_tokens: int, budget: int) -> None:
        super().__init__("Input too long for selected model context window")
        self.estimated_tokens = estimated_tokens
        self.budget = budget


class NotFoundError(OpenPRDError):
    """Requested resource does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class ApiKeyNotFoundError(NotFoundError):
    """No inline key and no stored key for the provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(
            "No API key found for this provider. "
            "Please provide one or save it for future use."
        )
        self.provider = provider


class NoSupportedModelsError(NotFoundError):
    """Key is valid but grants access to none of the catalog models."""

    def __init__(self, provider_name: str) -> None:
        super().__init__(f"No supported {provider_name} models found for your API key.")
        self.provider_name = provider_name


class PRDNotFoundError(NotFoundError):
    """No stored PRD with the given id."""

    def __init__(self, prd_id: int) -> None:
        super().__init__(f"PRD {prd_id} not found")
        self.prd_id = prd_id


# Upstream provider errors
class LLMError(OpenPRDError):
    """Base class for errors returned by an LLM provider."""

    status_code = 502
    code = "UPSTREAM_ERROR"

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: str | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.model = model


class AuthenticationError(LLMError):
    """Provider rejected the API key."""

    status_code = 401
    code = "UNAUTHENTICATED"

    def __init__(self, message: str, *, provider: str) -> None:
        super().__init__(message, provider=provider)


class ProviderAPIError(LLMError):
    """Non-2xx response or transport failure talking to a provider."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, provider=provider, model=model)
        self.upstream_status = status_code


# Internal errors
class InternalError(OpenPRDError):
    """Opaque internal failure."""


class ConfigurationError(InternalError):
    """Missing or invalid deployment configuration."""

    code = "CONFIGURATION_ERROR"


class SystemPromptMissingError(ConfigurationError):
    """No active prompt template is stored."""

    def __init__(self, prompt_key: str = "main") -> None:
        super().__init__("System prompt not found")
        self.prompt_key = prompt_key


class KeyDecryptionError(InternalError):
    """Stored key payload is malformed or failed authentication."""

    code = "KEY_DECRYPTION_FAILED"


class GenerationFailedError(InternalError):
    """Unclassified failure during a generation."""

    code = "GENERATION_FAILED"

    def __init__(self, cause: str) -> None:
        super().__init__(f"Generation failed: {cause}")
        self.cause = cause
