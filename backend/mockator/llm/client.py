"""Streaming text-completion clients for the supported LLM providers.

Every client exposes the same capability, ``stream_completion``, and differs
only in the wire protocol it speaks. Each call opens its own
``httpx.AsyncClient`` and closes the upstream stream on every exit path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass
import json
import logging
from typing import Any, ClassVar

import httpx

from ..core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.5
ANTHROPIC_VERSION = "2023-06-01"


@dataclass(frozen=True)
class CompletionClient(ABC):
    """Provider-independent streaming completion interface."""

    api_key: str
    model: str
    provider_name: str
    base_url: str = ""
    timeout_seconds: float = 60
    max_tokens: int = 4096
    transport: httpx.AsyncBaseTransport | None = None

    default_base_url: ClassVar[str] = ""

    @property
    def endpoint_base(self) -> str:
        return (self.base_url or self.default_base_url).rstrip("/")

    @abstractmethod
    def build_request(
        self, system_prompt: str, user_prompt: str, temperature: float
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return (url, headers, json payload) for a streaming request."""

    @abstractmethod
    def extract_text(self, event: dict[str, Any]) -> str:
        """Return the text carried by one stream event ("" if none)."""

    async def stream_completion(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> AsyncIterator[str]:
        """Stream completion text fragments in arrival order."""
        url, headers, payload = self.build_request(system_prompt, user_prompt, temperature)
        logger.debug(f"Calling {self.provider_name} with model={self.model}, temp={temperature}")

        chunks = 0
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                async with client.stream("POST", url, json=payload, headers=headers) as response:
                    if response.status_code >= 400:
                        await response.aread()
                        detail = _error_detail(response)
                        logger.error(f"{self.provider_name} HTTP error: {response.status_code} - {detail[:200]}")
                        raise UpstreamError(
                            f"{self.provider_name} request failed with status {response.status_code}: {detail}"
                        )

                    async for event in _iter_sse_events(response, self.provider_name):
                        text = self.extract_text(event)
                        if text:
                            chunks += 1
                            yield text
        except httpx.TimeoutException as e:
            logger.error(f"{self.provider_name} request timed out after {self.timeout_seconds}s")
            raise UpstreamError(f"{self.provider_name} request timed out after {self.timeout_seconds}s") from e
        except httpx.HTTPError as e:
            logger.error(f"{self.provider_name} connection error: {e}")
            raise UpstreamError(f"Failed to connect to {self.provider_name}: {e}") from e

        logger.debug(f"{self.provider_name} stream finished after {chunks} chunks")


class OpenAICompatibleClient(CompletionClient):
    """OpenAI Chat Completions protocol (also used by Groq)."""

    default_base_url: ClassVar[str] = "https://api.openai.com/v1"

    def build_request(self, system_prompt, user_prompt, temperature):
        payload = {
            "model": self.model,
            "stream": True,
            "temperature": temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        return f"{self.endpoint_base}/chat/completions", headers, payload

    def extract_text(self, event):
        _raise_event_error(event, self.provider_name)
        choices = event.get("choices")
        if not choices or not isinstance(choices, list):
            return ""
        delta = choices[0].get("delta") or {}
        content = delta.get("content")
        return content if isinstance(content, str) else ""


class AnthropicClient(CompletionClient):
    """Anthropic Messages protocol."""

    default_base_url: ClassVar[str] = "https://api.anthropic.com/v1"

    def build_request(self, system_prompt, user_prompt, temperature):
        payload = {
            "model": self.model,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
            "max_tokens": self.max_tokens,
            "temperature": temperature,
            "stream": True,
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        return f"{self.endpoint_base}/messages", headers, payload

    def extract_text(self, event):
        if event.get("type") == "error":
            _raise_event_error(event, self.provider_name)
        if event.get("type") != "content_block_delta":
            return ""
        delta = event.get("delta") or {}
        if delta.get("type") != "text_delta":
            return ""
        text = delta.get("text")
        return text if isinstance(text, str) else ""


class GoogleClient(CompletionClient):
    """Google Generative Language (Gemini) protocol."""

    default_base_url: ClassVar[str] = "https://generativelanguage.googleapis.com/v1beta"

    def build_request(self, system_prompt, user_prompt, temperature):
        model_path = self.model if self.model.startswith("models/") else f"models/{self.model}"
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        headers = {"x-goog-api-key": self.api_key}
        return f"{self.endpoint_base}/{model_path}:streamGenerateContent?alt=sse", headers, payload

    def extract_text(self, event):
        _raise_event_error(event, self.provider_name)
        candidates = event.get("candidates")
        if not candidates or not isinstance(candidates, list):
            return ""
        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


async def _iter_sse_events(response: httpx.Response, provider_name: str) -> AsyncIterator[dict[str, Any]]:
    """Yield decoded JSON payloads of server-sent ``data:`` lines."""
    async for line in response.aiter_lines():
        line = line.strip()
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if not data:
            continue
        if data == "[DONE]":
            return
        try:
            event = json.loads(data)
        except json.JSONDecodeError as e:
            logger.error(f"{provider_name} sent invalid stream data: {data[:200]}")
            raise UpstreamError(f"{provider_name} returned invalid stream data") from e
        if isinstance(event, dict):
            yield event


def _error_text(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error.get("type") or "")
    if isinstance(error, str):
        return error
    return ""


def _raise_event_error(event: dict[str, Any], provider_name: str) -> None:
    message = _error_text(event.get("error"))
    if message:
        logger.error(f"{provider_name} stream error: {message}")
        raise UpstreamError(f"{provider_name} error: {message}")


def _error_detail(response: httpx.Response) -> str:
    """Best-effort error message from a failed provider response."""
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text[:200] or response.reason_phrase

    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        message = _error_text(data.get("error")) or _error_text(data.get("message"))
        if message:
            return message
    return response.text[:200] or response.reason_phrase
