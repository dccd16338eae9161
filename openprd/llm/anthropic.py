"""Anthropic Messages API provider."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from openprd.llm.base import BaseLLMProvider
from openprd.llm.types import AuthMethod, LLMResponse, Message, MessageRole

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider.

    System messages are lifted into the top-level `system` field; the
    remaining turns go into `messages`.
    """

    auth_method = AuthMethod.X_API_KEY

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
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [
                {"role": m.role.value, "content": m.content}
                for m in messages
                if m.role != MessageRole.SYSTEM
            ],
        }
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)

        data = await self._post_completion(
            f"{self._base_url}/messages", payload, model=model
        )

        try:
            blocks = data["content"]
            if not isinstance(blocks, list):
                raise TypeError(f"content is {type(blocks).__name__}")
            text = "".join(
                block.get("text", "") for block in blocks if block.get("type") == "text"
            )
            return LLMResponse(
                content=text,
                model=data.get("model") or model,
                finish_reason=data.get("stop_reason"),
                raw_response=data,
            )
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise self._shape_error(model) from e

    def _completion_headers(self) -> dict[str, str]:
        return {"anthropic-version": ANTHROPIC_VERSION}
