"""LLM interaction module.

Contains the streaming provider clients, the provider profile table, and the
format-specific prompts for mock data generation.
"""

from .client import (
    DEFAULT_TEMPERATURE,
    AnthropicClient,
    CompletionClient,
    GoogleClient,
    OpenAICompatibleClient,
)
from .prompts import (
    MAX_INPUT_CHARS,
    MAX_ROWS,
    PromptPair,
    build_prompts,
    build_system_prompt,
    build_user_prompt,
    clamp_row_count,
    expected_prefix,
)
from .providers import (
    PROVIDER_MISSING_MESSAGE,
    PROVIDER_PROFILES,
    ProviderProfile,
    get_profile,
    list_providers,
    missing_key_message,
    parse_provider_id,
    require_credential,
    resolve_client,
)

__all__ = [
    "DEFAULT_TEMPERATURE",
    "AnthropicClient",
    "CompletionClient",
    "GoogleClient",
    "OpenAICompatibleClient",
    "MAX_INPUT_CHARS",
    "MAX_ROWS",
    "PromptPair",
    "build_prompts",
    "build_system_prompt",
    "build_user_prompt",
    "clamp_row_count",
    "expected_prefix",
    "PROVIDER_MISSING_MESSAGE",
    "PROVIDER_PROFILES",
    "ProviderProfile",
    "get_profile",
    "list_providers",
    "missing_key_message",
    "parse_provider_id",
    "require_credential",
    "resolve_client",
]
