"""Google Gemini (Generative Language API) provider.

The key travels as the `key` query parameter on every request. It is
passed to httpx as params so it never ends up in a logged URL.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from openprd.llm.base import BaseLLMProvider
from openprd.llm.types import AuthMethod, LLMResponse, Message, MessageRole

MODEL_NAME_PREFIX = "models/"


class GeminiProvider(BaseLLMProvider):
    """Google Gemini provider."""

    auth_method = AuthMethod.QUERY_KEY

    async def complete(
        self,
        messages: list[Message],
        *,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4000,
    ) -> LLMResponse:
        system_parts = [m.content for m in messages if m.role == MessageRole.SYSTEM]
        payload: dict[str, Any] = {
            "contents": [
                {
                    "role": "model" if m.role == MessageRole.ASSISTANT else "user",
                    "parts": [{"text": m.content}],
                }
                for m in messages
                if m.role != MessageRole.SYSTEM
            ],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if system_parts:
            payload["systemInstruction"] = {
                "parts": [{"text": "\n\n".join(system_parts)}]
            }

        data = await self._post_completion(
            f"{self._base_url}/models/{model}:generateContent", payload, model=model
        )

        try:
            candidate = data["candidates"][0]
            parts = candidate["content"]["parts"]
            return LLMResponse(
                content="".join(part.get("text", "") for part in parts),
                model=model,
                finish_reason=candidate.get("finishReason"),
                raw_response=data,
            )
        except (KeyError, IndexError, TypeError, AttributeError, ValidationError) as e:
            raise self._shape_error(model) from e

    def _parse_model_ids(self, data: Any) -> list[str]:
        """Gemini lists `{"models": [{"name": "models/<id>"}]}`."""
        ids = []
        for item in self._list_field(data, "models"):
            name = item.get("name") if isinstance(item, dict) else None
            if not isinstance(name, str) or not name:
                continue
            if name.startswith(MODEL_NAME_PREFIX):
                name = name[len(MODEL_NAME_PREFIX):]
            ids.append(name)
        return ids
