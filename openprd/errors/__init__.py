"""Error types."""

from openprd.errors.exceptions import (
    ApiKeyNotFoundError,
    AuthenticationError,
    ConfigurationError,
    GenerationFailedError,
    InputTooLongError,
    InternalError,
    InvalidArgumentError,
    KeyDecryptionError,
    LLMError,
    NoSupportedModelsError,
    NotFoundError,
    OpenPRDError,
    PRDNotFoundError,
    ProviderAPIError,
    SystemPromptMissingError,
    UnsupportedModelError,
    UnsupportedProviderError,
)

__all__ = [
    "OpenPRDError",
    "InvalidArgumentError",
    "UnsupportedProviderError",
    "UnsupportedModelError",
    "InputTooLongError",
    "NotFoundError",
    "ApiKeyNotFoundError",
    "NoSupportedModelsError",
    "PRDNotFoundError",
    "LLMError",
    "AuthenticationError",
    "ProviderAPIError",
    "InternalError",
    "ConfigurationError",
    "SystemPromptMissingError",
    "KeyDecryptionError",
    "GenerationFailedError",
]
