"""Connectivity prober: validate a key and report the models it can use."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from openprd.errors.exceptions import AuthenticationError, LLMError, NotFoundError
from openprd.llm.registry import ProviderRegistry
from openprd.llm.types import ModelSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionResult:
    """Outcome of a connection test."""

    valid: bool
    model: str | None = None
    context_window: int | None = None
    error: str | None = None


class ConnectivityProber:
    """Checks user keys against providers without touching the database.

    Each operation makes at most one outbound call.
    """

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    async def validate_and_list(
        self,
        provider: str,
        api_key: str,
        base_url: str | None = None,
    ) -> list[ModelSpec]:
        """Validate `api_key` and return the models available to it.

        Providers with a model-list endpoint are asked for their list.
        Others get a single minimal completion against their first
        catalog model.

        Raises:
            UnsupportedProviderError: Unknown provider.
            AuthenticationError: The provider rejected the key.
            NoSupportedModelsError: The key grants none of the catalog models.
            ProviderAPIError: Any other upstream or transport failure.
        """
        spec = self._registry.get(provider)
        client = self._registry.create_client(provider, api_key, base_url=base_url)

        if spec.model_list is not None:
            models = await client.list_models()
            logger.info("%s key grants %d model(s)", provider, len(models))
            return models

        if not spec.models:
            return []

        await client.probe(spec.models[0].name)
        return list(spec.models)

    async def test_connection(
        self,
        provider: str,
        api_key: str,
        base_url: str | None = None,
    ) -> ConnectionResult:
        """Report whether a key works, with the first usable model.

        Provider failures are reported in the result; only an unknown
        provider raises.
        """
        self._registry.get(provider)
        try:
            models = await self.validate_and_list(provider, api_key, base_url=base_url)
        except AuthenticationError:
            return ConnectionResult(valid=False, error="Invalid API key")
        except (LLMError, NotFoundError) as e:
            return ConnectionResult(valid=False, error=e.message)

        if not models:
            return ConnectionResult(valid=True)
        first = models[0]
        return ConnectionResult(valid=True, model=first.name, context_window=first.context_window)
