"""Shared fixtures for the test suite."""

from __future__ import annotations

import asyncio
import os
import sys
from types import SimpleNamespace

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from mockator.core.config import clear_settings_cache


class FakeCompletionClient:
    """Stands in for a provider client; records calls and whether it was closed."""

    def __init__(
        self,
        chunks: list[str] | None = None,
        error: BaseException | None = None,
        delays: list[float] | None = None,
    ):
        self.chunks = list(chunks or [])
        self.error = error
        # Seconds to wait before each chunk
        self.delays = list(delays or [])
        self.calls: list[dict] = []
        self.closed = False

    async def stream_completion(self, system_prompt: str, user_prompt: str, temperature: float = 0.5):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
            }
        )
        try:
            for index, chunk in enumerate(self.chunks):
                if index < len(self.delays) and self.delays[index]:
                    await asyncio.sleep(self.delays[index])
                yield chunk
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


@pytest.fixture(autouse=True)
def _fresh_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def fake_resolver(monkeypatch):
    """Replace provider resolution in the API with a fake client."""
    from mockator import main

    state = SimpleNamespace(
        client=FakeCompletionClient(chunks=['[{"id":1,', '"name":"Alice Johnson"}]']),
        calls=[],
    )

    def _resolve(provider_id, credential, settings=None):
        state.calls.append((provider_id, credential))
        return state.client, "fake-model"

    monkeypatch.setattr(main, "resolve_client", _resolve)
    return state
