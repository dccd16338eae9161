"""Base LLM provider interface.

Every provider exposes the same three capabilities: complete a chat,
list the models a key can use, and probe a key with a minimal call.
HTTP plumbing and error classification live here so the concrete
providers only describe their request and response shapes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from openprd.errors.exceptions import (
    AuthenticationError,
    NoSupportedModelsError,
    ProviderAPIError,
)
from openprd.llm.types import (
    AuthMethod,
    LLMResponse,
    Message,
    ModelSpec,
    ProviderSpec,
    ResponseFormat,
)

logger = logging.getLogger(__name__)

PROBE_PROMPT = "Hi"
PROBE_MAX_TOKENS = 10


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Example:
        >>> provider = registry.create_client("openai", api_key="sk-...")
        >>> response = await provider.complete(
        ...     [Message.system("..."), Message.user("...")], model="gpt-4o-mini"
        ... )
        >>> print(response.content)
    """

    #: How chat requests authenticate. Model listing uses the registry's
    #: declared method instead.
    auth_method: AuthMethod = AuthMethod.BEARER

    def __init__(
        self,
        spec: ProviderSpec,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout: float = 120.0,
    ) -> None:
        """Initialize provider.

        Args:
            spec: Registry entry for the provider.
            api_key: User-supplied API key.
            base_url: Override for the registry base URL (regional endpoints).
            timeout: Request timeout in seconds.
        """
        self._spec = spec
        self._api_key = api_key
        self._base_url = (base_url or spec.base_url).rstrip("/")
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        """Return the registry key of the provider."""
        return self._spec.key

    @property
    def display_name(self) -> str:
        return self._spec.name

    @property
    def spec(self) -> ProviderSpec:
        return self._spec

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        *,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4000,
    ) -> LLMResponse:
        """Generate a completion for the given messages.

        Raises:
            AuthenticationError: If the provider rejects the key.
            ProviderAPIError: On any other non-2xx or transport failure.
        """
        ...

    async def probe(self, model: str) -> None:
        """Validate the key with one minimal completion, discarding the content."""
        await self.complete(
            [Message.user(PROBE_PROMPT)],
            model=model,
            max_tokens=PROBE_MAX_TOKENS,
        )

    async def list_model_ids(self) -> list[str]:
        """Fetch the model identifiers visible to this key."""
        return self._parse_model_ids(await self._fetch_model_list())

    async def _fetch_model_list(self) -> dict[str, Any]:
        """GET the provider's model-list endpoint and return the decoded body.

        Any non-2xx answer means the key is not usable, so it is reported
        as an authentication failure.
        """
        model_list = self._spec.model_list
        if model_list is None:
            raise ProviderAPIError(
                f"Provider {self.provider_name} does not support model listing",
                provider=self.provider_name,
            )

        headers, params = self._auth(model_list.auth_method)
        headers.update(model_list.headers)

        response = await self._send(
            "GET",
            f"{self._base_url}{model_list.endpoint}",
            headers=headers,
            params=params,
        )
        if not response.is_success:
            raise AuthenticationError(
                _error_message(response) or f"Invalid {self.display_name} API key",
                provider=self.provider_name,
            )
        return self._json_object(response)

    async def list_models(self) -> list[ModelSpec]:
        """Return catalog models available to this key.

        Raises:
            NoSupportedModelsError: If the key grants none of the catalog models.
        """
        available = set(await self.list_model_ids())
        models = [m for m in self._spec.models if m.name in available]
        if not models:
            raise NoSupportedModelsError(self.display_name)
        return models

    def _parse_model_ids(self, data: Any) -> list[str]:
        """Extract model ids from a `{"data": [{"id": ...}]}` payload."""
        fmt = self._spec.model_list.response_format if self._spec.model_list else None
        if fmt not in (ResponseFormat.OPENAI, ResponseFormat.ANTHROPIC, ResponseFormat.OPENROUTER):
            raise ProviderAPIError(
                f"Unsupported response format: {fmt}",
                provider=self.provider_name,
            )
        return [
            item["id"]
            for item in self._list_field(data, "data")
            if isinstance(item, dict) and isinstance(item.get("id"), str)
        ]

    def _auth(self, method: AuthMethod) -> tuple[dict[str, str], dict[str, str]]:
        """Build (headers, query params) carrying the API key."""
        headers = dict(self._spec.extra_headers)
        params: dict[str, str] = {}
        if method == AuthMethod.BEARER:
            headers["Authorization"] = f"Bearer {self._api_key}"
        elif method == AuthMethod.X_API_KEY:
            headers["x-api-key"] = self._api_key
        elif method == AuthMethod.QUERY_KEY:
            params["key"] = self._api_key
        return headers, params

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        model: str | None = None,
    ) -> httpx.Response:
        """Issue one HTTP request, mapping transport failures to ProviderAPIError."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method, url, headers=headers, params=params, json=json
                )
        except httpx.TimeoutException:
            raise ProviderAPIError(
                f"Request to {self.display_name} timed out after {self._timeout}s",
                provider=self.provider_name,
                model=model,
            )
        except httpx.HTTPError as e:
            raise ProviderAPIError(
                f"Connection to {self.display_name} failed: {e}",
                provider=self.provider_name,
                model=model,
            ) from e

        # url never carries the key; query-key auth goes through params
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    async def _post_completion(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        model: str,
    ) -> dict[str, Any]:
        """POST a completion request and return the decoded JSON body."""
        headers, params = self._auth(self.auth_method)
        headers.update(self._completion_headers())
        response = await self._send(
            "POST", url, headers=headers, params=params, json=payload, model=model
        )

        if response.status_code in (401, 403):
            raise AuthenticationError(
                _error_message(response) or "Invalid API key",
                provider=self.provider_name,
            )
        if not response.is_success:
            raise ProviderAPIError(
                f"{self.display_name} API error: {response.text}",
                provider=self.provider_name,
                model=model,
                status_code=response.status_code,
            )
        return self._json_object(response, model=model)

    def _json_object(self, response: httpx.Response, model: str | None = None) -> dict[str, Any]:
        """Decode a JSON object body; anything else is a malformed reply."""
        data = _json_body(response, self.provider_name)
        if not isinstance(data, dict):
            raise self._shape_error(model)
        return data

    def _list_field(self, data: dict[str, Any], key: str) -> list[Any]:
        """`data[key]` as a list; missing means empty."""
        items = data.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise self._shape_error()
        return items

    def _shape_error(self, model: str | None = None) -> ProviderAPIError:
        return ProviderAPIError(
            f"Unexpected {self.display_name} response shape",
            provider=self.provider_name,
            model=model,
        )

    def _completion_headers(self) -> dict[str, str]:
        """Extra headers for chat requests."""
        return {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider_name!r})"


def _json_body(response: httpx.Response, provider: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ProviderAPIError(
            f"Malformed response from {provider}: {response.text[:200]}",
            provider=provider,
            status_code=response.status_code,
        ) from e


def _error_message(response: httpx.Response) -> str | None:
    """Best-effort extraction of the provider's own error text."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if data.get("message"):
        return str(data["message"])
    return None
