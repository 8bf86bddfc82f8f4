"""OpenAI-compatible chat completion client.

API docs: https://platform.openai.com/docs/api-reference/chat
Any endpoint speaking the same protocol (Perplexity, OpenRouter, local
gateways) works by overriding ``base_url``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from ..errors import ProviderError

logger = logging.getLogger(__name__)

API_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


class OpenAICompletionClient:
    """Completion provider backed by ``/chat/completions``."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = API_BASE,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("An API key is required for the completion provider")
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = httpx.Timeout(timeout, connect=10.0)
        self._transport = transport

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> str:
        """Send ``prompt`` as a user message and return the first choice's text."""
        messages: list[dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        body = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(f"{self.base_url}/chat/completions", json=body, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"Completion request failed with status {exc.response.status_code}",
                details={"model": body["model"], "status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(
                f"Completion request failed: {exc}",
                details={"model": body["model"]},
            ) from exc
        except ValueError as exc:
            raise ProviderError(
                "Completion response was not valid JSON",
                details={"model": body["model"]},
            ) from exc

        choices = (data.get("choices") if isinstance(data, dict) else None) or []
        if not choices:
            raise ProviderError("Completion response contained no choices", details={"model": body["model"]})

        logger.debug(
            "Completion from %s in %.0fms", body["model"], (time.perf_counter() - started) * 1000
        )
        return (choices[0].get("message") or {}).get("content") or ""
