"""HTTP client forwarding chat completion requests to an OpenAI-compatible API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from relay import config

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(RuntimeError):
    """No API key is configured for the completion endpoint."""


class LLMInvalidResponseError(RuntimeError):
    """The upstream answered successfully but the body is not JSON."""

    def __init__(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text
        super().__init__(f"Upstream returned non-JSON body (status {status_code})")


class LLMProxy:
    """Forwards chat completion bodies unchanged and returns the upstream response.

    The relay holds the API key so browsers never see it.
    """

    def __init__(self, api_key: str | None = None, api_url: str | None = None, timeout: float | None = None) -> None:
        self._api_key = config.settings.LLM_API_KEY if api_key is None else api_key
        self._api_url = api_url or config.settings.LLM_API_URL
        self._timeout = timeout or config.settings.LLM_TIMEOUT_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def chat_completions(self, body: dict[str, Any]) -> dict[str, Any]:
        """
        Send a chat completion request upstream.

        Args:
            body: Request body as received from the browser

        Returns:
            Decoded JSON response

        Raises:
            LLMNotConfiguredError: If no API key is set
            LLMInvalidResponseError: If a successful response is not JSON
            httpx.HTTPStatusError: If the upstream returns an error status
            httpx.HTTPError: If the upstream is unreachable or times out
        """
        if not self.configured:
            raise LLMNotConfiguredError("LLM_API_KEY is not configured")

        messages = body.get("messages")
        logger.info(
            "LLM request model=%s messages=%s",
            body.get("model"),
            len(messages) if isinstance(messages, list) else None,
        )

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                self._api_url,
                json=body,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
            try:
                return response.json()
            except ValueError as e:
                raise LLMInvalidResponseError(response.status_code, response.text) from e


llm_proxy = LLMProxy()
