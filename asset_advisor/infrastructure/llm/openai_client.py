"""
Chat-completion client for OpenAI-compatible endpoints.
One request, one response, hard timeout, no retries.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from asset_advisor.infrastructure.llm.errors import LLMResponseError, LLMTransportError

logger = logging.getLogger(__name__)

PLACEHOLDER_KEYS = {"", "your-api-key-here", "changeme"}


@dataclass(frozen=True)
class CompletionResult:
    text: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    model: str


class OpenAICompletionClient:
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 150,
        temperature: float = 0.3,
        timeout_seconds: float = 15.0,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    @property
    def is_configured(self) -> bool:
        return self.api_key not in PLACEHOLDER_KEYS

    def build_request(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def complete(self, prompt: str) -> CompletionResult:
        """
        Send one completion request.

        Raises:
            LLMTransportError: timeout, connection error, non-2xx status
            LLMResponseError: malformed or empty response envelope
        """
        try:
            payload = await asyncio.wait_for(
                self._post(self.build_request(prompt)),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise LLMTransportError(f"completion timed out after {self.timeout_seconds}s") from exc
        return self.parse_response(payload)

    async def _post(self, body: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                resp = await client.post(url, headers=headers, json=body)
        except httpx.TimeoutException as exc:
            raise LLMTransportError(f"completion timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise LLMTransportError(f"completion request failed: {exc}") from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            raise LLMTransportError(f"completion endpoint returned {resp.status_code}: {resp.text[:200]}")
        try:
            return resp.json()
        except ValueError as exc:
            raise LLMResponseError("completion response is not JSON") from exc

    def parse_response(self, payload: Any) -> CompletionResult:
        if not isinstance(payload, dict):
            raise LLMResponseError("completion response is not an object")
        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMResponseError("completion response has no message content") from exc
        if not isinstance(content, str) or not content.strip():
            raise LLMResponseError("empty completion content")

        usage = payload.get("usage") or {}
        prompt_tokens = _as_int(usage.get("prompt_tokens"))
        completion_tokens = _as_int(usage.get("completion_tokens"))
        total_tokens = _as_int(usage.get("total_tokens")) or prompt_tokens + completion_tokens
        logger.debug(
            "Completion received: %d prompt + %d completion tokens",
            prompt_tokens,
            completion_tokens,
        )

        return CompletionResult(
            text=content.strip(),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
            model=payload.get("model") or self.model,
        )


def _as_int(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0
