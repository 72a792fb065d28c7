"""
Text-completion seam used by match generation.

Callers depend on the narrow ``CompletionClient`` protocol (prompt in, text
out). Production wires ``OpenAICompletionClient``; tests swap in a stub via
the ``get_completion_client`` dependency.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

from openai import OpenAI, OpenAIError

from ..config import OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL, OPENAI_TEMPERATURE, OPENAI_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Raised when the completion provider fails or returns nothing usable."""


class CompletionClient(Protocol):
    def complete(self, prompt: str) -> str:
        ...


class OpenAICompletionClient:
    """Chat-completions client asking for a JSON object response.

    The SDK client is built on first use so that a missing API key only
    surfaces when a completion is actually requested. Retries are disabled:
    every failure is reported to the caller as-is.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        base_url: str | None = None,
    ):
        self.api_key = api_key if api_key is not None else OPENAI_API_KEY
        self.model = model or OPENAI_MODEL
        self.temperature = OPENAI_TEMPERATURE if temperature is None else temperature
        self.timeout = OPENAI_TIMEOUT_SECONDS if timeout is None else timeout
        self.base_url = base_url if base_url is not None else OPENAI_BASE_URL
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            kwargs: dict[str, Any] = {
                "api_key": self.api_key or None,
                "timeout": self.timeout,
                "max_retries": 0,
            }
            if self.base_url:
                kwargs["base_url"] = self.base_url
            try:
                self._client = OpenAI(**kwargs)
            except OpenAIError as exc:
                raise CompletionError(f"OpenAI client could not be created: {exc}") from exc
        return self._client

    def complete(self, prompt: str) -> str:
        client = self._get_client()
        start = time.time()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=self.temperature,
            )
        except OpenAIError as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc

        latency_ms = int((time.time() - start) * 1000)
        if not response.choices:
            raise CompletionError("Completion response had no choices")
        content = response.choices[0].message.content or ""
        logger.info(f"[COMPLETION] model={self.model} latency_ms={latency_ms} chars={len(content)}")
        return content
