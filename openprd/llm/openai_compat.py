"""OpenAI-compatible chat completions provider.

Serves OpenAI itself and the vendors that mirror its REST API
(DeepSeek, Moonshot, Z.ai). Requests go to `{base_url}/chat/completions`
with Bearer authentication.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from openprd.llm.base import BaseLLMProvider
from openprd.llm.types import AuthMethod, LLMResponse, Message


class OpenAICompatibleProvider(BaseLLMProvider):
    """Provider speaking the OpenAI chat completions protocol.

    Example:
        >>> provider = OpenAICompatibleProvider(spec, api_key="sk-...")
        >>> response = await provider.complete([Message.user("Hello")], model="gpt-4o")
    """

    auth_method = AuthMethod.BEARER

    async def complete(
        self,
        messages: list[Message],
        *,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4000,
    ) -> LLMResponse:
        payload: dict[str, Any] = {
            "model": model,
            "messages": self._convert_messages(messages),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        data = await self._post_completion(
            f"{self._base_url}/chat/completions", payload, model=model
        )

        try:
            choice = data["choices"][0]
            content = choice["message"].get("content") or ""
            if not isinstance(content, str):
                raise TypeError(f"content is {type(content).__name__}")
            return LLMResponse(
                content=content,
                model=data.get("model") or model,
                finish_reason=choice.get("finish_reason"),
                raw_response=data,
            )
        except (KeyError, IndexError, TypeError, AttributeError, ValidationError) as e:
            raise self._shape_error(model) from e

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        """Convert Message objects to OpenAI API format."""
        return [{"role": msg.role.value, "content": msg.content} for msg in messages]
