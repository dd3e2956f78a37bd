from typing import Any

import httpx
from loguru import logger

from codeflow.exceptions import ConfigurationError, LLMError


class ChatCompletionClient:
    """
    Minimal client for an OpenAI-compatible chat completions endpoint.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._internal_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def complete(self, messages: list[dict[str, str]], model: str, **options: Any) -> str:
        """Return the content of the first choice.

        Args:
            messages: Chat messages with 'role' and 'content'.
            model: The model name.
            **options: Extra request fields (max_tokens, temperature, ...).

        Raises:
            ConfigurationError: If no API key is configured.
            LLMError: If the API rejects the request or returns no content.
        """
        if not self.api_key:
            raise ConfigurationError("OpenAI API key not configured")

        payload: dict[str, Any] = {"model": model, "messages": messages, **options}
        try:
            response = await self._client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise LLMError(f"OpenAI API error: {e}") from e

        if response.is_error:
            try:
                message = (response.json().get("error") or {}).get("message")
            except (ValueError, AttributeError):
                message = None
            logger.error(f"OpenAI API error: {response.text}")
            raise LLMError(f"OpenAI API error: {message or 'Unknown error'}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMError("OpenAI API error: malformed completion") from e
        return content or ""

    async def aclose(self) -> None:
        if self._internal_client:
            await self._client.aclose()
