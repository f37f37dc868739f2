"""Application configuration loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv(override=True)


@dataclass(frozen=True)
class Settings:
    """Application settings."""
    # Generation limits
    request_timeout: int
    max_output_tokens: int

    # HTTP server
    cors_origins: list[str]
    log_level: str

    # Client side (session controller and CLI)
    api_url: str

    # Provider base URL overrides keyed by provider id ("openai", "groq", ...)
    provider_base_urls: dict[str, str] = field(default_factory=dict)

    def base_url_for(self, provider_id: str) -> Optional[str]:
        """Get configured base URL override for a provider, if any."""
        return self.provider_base_urls.get(provider_id) or None


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _base_url_overrides() -> dict[str, str]:
    overrides = {}
    for provider_id in ("openai", "anthropic", "google", "groq"):
        value = os.getenv(f"{provider_id.upper()}_BASE_URL", "").strip()
        if value:
            overrides[provider_id] = value.rstrip("/")
    return overrides


def get_settings() -> Settings:
    """Load settings from environment variables."""
    return Settings(
        request_timeout=int(os.getenv("REQUEST_TIMEOUT", "60")),
        max_output_tokens=int(os.getenv("MAX_OUTPUT_TOKENS", "4096")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "http://localhost:3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        api_url=os.getenv("MOCKATOR_API_URL", "http://localhost:8000").rstrip("/"),
        provider_base_urls=_base_url_overrides(),
    )


# Singleton for caching settings
_settings_cache: Optional[Settings] = None


def get_cached_settings() -> Settings:
    """Get cached settings (loads once)."""
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = get_settings()
    return _settings_cache


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    global _settings_cache
    _settings_cache = None
