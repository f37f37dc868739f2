"""Provider profiles and client resolution.

The profile table is the only place that knows about individual providers:
adding a provider means adding a ``ProviderId`` member and one profile here.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from ..core.config import Settings, get_cached_settings
from ..core.exceptions import AuthError, ConfigurationError
from ..core.models import ProviderId, ProviderInfo
from .client import AnthropicClient, CompletionClient, GoogleClient, OpenAICompatibleClient

logger = logging.getLogger(__name__)

PROVIDER_MISSING_MESSAGE = "Provider is missing. Please select a provider in Settings."


@dataclass(frozen=True)
class ProviderProfile:
    """Static description of one provider."""
    id: ProviderId
    display_name: str
    default_model_id: str
    client_class: type[CompletionClient]
    base_url_override: str | None = None

    def to_info(self) -> ProviderInfo:
        return ProviderInfo(
            id=self.id,
            display_name=self.display_name,
            default_model_id=self.default_model_id,
        )


PROVIDER_PROFILES: dict[ProviderId, ProviderProfile] = {
    ProviderId.OPENAI: ProviderProfile(
        id=ProviderId.OPENAI,
        display_name="OpenAI",
        default_model_id="gpt-4o-mini",
        client_class=OpenAICompatibleClient,
    ),
    ProviderId.ANTHROPIC: ProviderProfile(
        id=ProviderId.ANTHROPIC,
        display_name="Anthropic",
        default_model_id="claude-3-haiku-20240307",
        client_class=AnthropicClient,
    ),
    ProviderId.GOOGLE: ProviderProfile(
        id=ProviderId.GOOGLE,
        display_name="Google",
        default_model_id="models/gemini-1.5-flash-latest",
        client_class=GoogleClient,
    ),
    ProviderId.GROQ: ProviderProfile(
        id=ProviderId.GROQ,
        display_name="Groq",
        default_model_id="llama3-70b-8192",
        client_class=OpenAICompatibleClient,
        base_url_override="https://api.groq.com/openai/v1",
    ),
}

DEFAULT_PROVIDER = ProviderId.OPENAI


def missing_key_message(display_name: str) -> str:
    return f"Missing API key for {display_name}. Please add your {display_name} API key in Settings."


def get_profile(provider_id: ProviderId | str | None) -> ProviderProfile:
    """Get the profile for a provider id, falling back to OpenAI for unknown ids."""
    try:
        return PROVIDER_PROFILES[ProviderId(provider_id)]
    except ValueError:
        logger.warning(f"Unknown provider {provider_id!r}, using {DEFAULT_PROVIDER.value}")
        return PROVIDER_PROFILES[DEFAULT_PROVIDER]


def parse_provider_id(provider_id: str | None) -> ProviderId:
    """Validate a provider id taken from a request header."""
    if not provider_id or not provider_id.strip():
        raise ConfigurationError(PROVIDER_MISSING_MESSAGE)
    try:
        return ProviderId(provider_id.strip())
    except ValueError:
        known = ", ".join(p.value for p in ProviderId)
        raise ConfigurationError(f"Unknown provider: {provider_id.strip()}. Use one of: {known}.") from None


def require_credential(provider_id: ProviderId | str | None, credential: str | None) -> str:
    """Return the stripped credential or raise AuthError naming the provider."""
    key = (credential or "").strip()
    if not key:
        raise AuthError(missing_key_message(get_profile(provider_id).display_name))
    return key


def list_providers() -> list[ProviderInfo]:
    return [profile.to_info() for profile in PROVIDER_PROFILES.values()]


def resolve_client(
    provider_id: ProviderId | str | None,
    credential: str | None,
    settings: Settings | None = None,
) -> tuple[CompletionClient, str]:
    """Map a provider id and credential to a configured client and model id.

    Raises:
        ConfigurationError: no provider selected
        AuthError: credential missing or empty
    """
    if not provider_id:
        raise ConfigurationError(PROVIDER_MISSING_MESSAGE)

    profile = get_profile(provider_id)
    api_key = require_credential(profile.id, credential)
    settings = settings or get_cached_settings()

    base_url = settings.base_url_for(profile.id.value) or profile.base_url_override or ""
    client = profile.client_class(
        api_key=api_key,
        model=profile.default_model_id,
        provider_name=profile.display_name,
        base_url=base_url,
        timeout_seconds=settings.request_timeout,
        max_tokens=settings.max_output_tokens,
    )
    logger.debug(f"Resolved provider {profile.id.value} with model {profile.default_model_id}")
    return client, profile.default_model_id
