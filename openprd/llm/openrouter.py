"""OpenRouter aggregator provider.

OpenRouter speaks the OpenAI protocol but publishes a fully described,
priced model list, so its catalog is built entirely from the API.
"""

from __future__ import annotations

from typing import Any

from openprd.llm.openai_compat import OpenAICompatibleProvider
from openprd.llm.types import ModelSpec

# Used when the aggregator omits a model's context length
DEFAULT_CONTEXT_LENGTH = 4096


class OpenRouterProvider(OpenAICompatibleProvider):
    """OpenRouter provider with dynamic model discovery."""

    async def list_models(self) -> list[ModelSpec]:
        """Return every model the aggregator offers, sorted by name.

        Prices arrive per token and are scaled to per-1k tokens.
        """
        data = await self._fetch_model_list()
        models = [
            self._to_model_spec(item)
            for item in self._list_field(data, "data")
            if isinstance(item, dict) and isinstance(item.get("id"), str)
        ]
        return sorted(models, key=lambda m: m.name)

    @staticmethod
    def _to_model_spec(item: dict[str, Any]) -> ModelSpec:
        input_cost = 0.0
        output_cost = 0.0
        pricing = item.get("pricing")
        if isinstance(pricing, dict) and pricing.get("prompt") and pricing.get("completion"):
            try:
                input_cost = float(pricing["prompt"]) * 1000
                output_cost = float(pricing["completion"]) * 1000
            except (TypeError, ValueError):
                input_cost = output_cost = 0.0

        return ModelSpec(
            name=item["id"],
            context_window=_as_int(item.get("context_length")) or DEFAULT_CONTEXT_LENGTH,
            input_cost_per_1k=input_cost,
            output_cost_per_1k=output_cost,
            description=item.get("description") or item.get("name") or item["id"],
        )


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
