"""Client-side generation session.

A ``GenerationSession`` holds everything a UI keeps for one user: the
session-only API keys, the current input, and the output buffer. It is the
single writer of that buffer: ``generate`` resets it, then appends streamed
chunks in arrival order. Switching formats re-renders the buffered JSON
locally and never calls the API again.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import json
import logging

import httpx

from ..core.config import get_cached_settings
from ..core.models import InputMode, OutputFormat, ProviderId
from ..llm.prompts import MAX_INPUT_CHARS
from ..transform import DEFAULT_TABLE_NAME, render_output

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"
EMPTY_INPUT_MESSAGE = "Please enter some input before generating!"
MISSING_KEY_MESSAGE = "Please add your API key in Settings."
DEFAULT_ERROR_MESSAGE = "Failed to generate mock data"

DEFAULT_SCHEMA_INPUT = """interface User {
  id: number;
  name: string;
  email: string;
  createdAt: Date;
}"""


class GenerationFailed(Exception):
    """Raised internally when the API answers with an error status."""

    pass


def _default_api_url() -> str:
    return get_cached_settings().api_url


@dataclass
class GenerationSession:
    """State and actions of one client session."""

    api_url: str = field(default_factory=_default_api_url)
    active_provider: ProviderId = ProviderId.OPENAI
    input_mode: InputMode = InputMode.NATURAL_LANGUAGE
    natural_language_input: str = ""
    schema_input: str = DEFAULT_SCHEMA_INPUT
    row_count: int = 10
    output_format: OutputFormat = OutputFormat.JSON
    table_name: str = DEFAULT_TABLE_NAME
    timeout_seconds: float = 60
    transport: httpx.AsyncBaseTransport | None = None

    # Keys live only in memory for the lifetime of the session
    provider_keys: dict[ProviderId, str] = field(default_factory=dict, repr=False)
    output: str = ""
    error: str | None = None
    is_loading: bool = False

    def set_api_key(self, provider: ProviderId | str, api_key: str) -> None:
        provider_id = ProviderId(provider)
        key = api_key.strip()
        if key:
            self.provider_keys[provider_id] = key
        else:
            self.provider_keys.pop(provider_id, None)
        self._clear_error_if_ready()

    def select_provider(self, provider: ProviderId | str) -> None:
        self.active_provider = ProviderId(provider)
        self._clear_error_if_ready()

    def _clear_error_if_ready(self) -> None:
        # A stale error goes away once the active provider has a key
        if self.error and self.provider_keys.get(self.active_provider):
            self.error = None

    def clear_api_keys(self) -> None:
        self.provider_keys.clear()

    @property
    def current_input(self) -> str:
        if self.input_mode == InputMode.SCHEMA:
            return self.schema_input
        return self.natural_language_input

    def set_input(self, text: str) -> None:
        """Set the input for the current mode, truncated to the server limit."""
        text = text[:MAX_INPUT_CHARS]
        if self.input_mode == InputMode.SCHEMA:
            self.schema_input = text
        else:
            self.natural_language_input = text

    def reset_output(self) -> None:
        self.output = ""
        self.error = None

    def display_content(self) -> str:
        """Output rendered in the selected format (no network call)."""
        return render_output(self.output, self.output_format, self.table_name)

    async def generate(self, on_chunk: Callable[[str], None] | None = None) -> str:
        """Request a new generation and stream it into the output buffer.

        Always asks the API for JSON; other formats are rendered locally.
        Failures are stored in ``error`` and clear any partial output.
        """
        user_input = self.current_input
        if not user_input.strip():
            self.error = EMPTY_INPUT_MESSAGE
            return self.output

        api_key = self.provider_keys.get(self.active_provider)
        if not api_key:
            self.error = MISSING_KEY_MESSAGE
            return self.output

        self.is_loading = True
        self.reset_output()

        headers = {
            "Content-Type": "application/json",
            "X-Provider": self.active_provider.value,
            "X-Api-Key": api_key,
        }
        body = {
            "inputMode": self.input_mode.value,
            "input": user_input[:MAX_INPUT_CHARS],
            "rowCount": self.row_count,
            "format": OutputFormat.JSON.value,
        }

        logger.info(f"Generating via {self.active_provider.value} ({len(user_input)} chars, {self.row_count} rows)")
        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.timeout_seconds,
                transport=self.transport,
            ) as client:
                async with client.stream("POST", GENERATE_PATH, json=body, headers=headers) as response:
                    if response.is_error:
                        await response.aread()
                        raise GenerationFailed(_error_from_response(response))

                    async for chunk in response.aiter_text():
                        if chunk:
                            self.output += chunk
                            if on_chunk is not None:
                                on_chunk(chunk)
        except (GenerationFailed, httpx.HTTPError) as exc:
            message = str(exc) or DEFAULT_ERROR_MESSAGE
            logger.error(f"Generate error: {message}")
            self.error = message
            self.output = ""
        finally:
            self.is_loading = False

        return self.output


def _error_from_response(response: httpx.Response) -> str:
    fallback = f"HTTP Error: {response.status_code}"
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return fallback
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return fallback
