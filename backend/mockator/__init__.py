"""Mockator mock data generator.

This package turns a prose description or a type schema into synthetic
tabular records by streaming them from one of several LLM providers, and
re-renders the generated JSON as SQL inserts or CSV locally.

Package Structure:
    core/       - Core infrastructure (config, request models, exceptions)
    llm/        - LLM interaction (provider profiles, streaming clients, prompts)
    security/   - Input validation and prompt-injection logging
    transform/  - JSON to CSV/SQL conversion
    client/     - Client session that drives the generation API
    main.py     - FastAPI application (POST /api/generate)
"""

# Core
from .core.config import Settings, get_settings, get_cached_settings, clear_settings_cache
from .core.exceptions import (
    AuthError,
    ConfigurationError,
    MockatorError,
    UnknownError,
    UpstreamError,
    ValidationError,
)
from .core.models import GenerationRequest, InputMode, OutputFormat, ProviderId

# LLM
from .llm.client import CompletionClient
from .llm.prompts import MAX_INPUT_CHARS, MAX_ROWS, PromptPair, build_prompts, clamp_row_count
from .llm.providers import PROVIDER_PROFILES, ProviderProfile, resolve_client

# Transform
from .transform.formats import parse_records, render_output, to_csv, to_sql

# Client
from .client.session import GenerationSession

__version__ = "0.1.0"

__all__ = [
    # Core
    "Settings",
    "get_settings",
    "get_cached_settings",
    "clear_settings_cache",
    "AuthError",
    "ConfigurationError",
    "MockatorError",
    "UnknownError",
    "UpstreamError",
    "ValidationError",
    "GenerationRequest",
    "InputMode",
    "OutputFormat",
    "ProviderId",
    # LLM
    "CompletionClient",
    "MAX_INPUT_CHARS",
    "MAX_ROWS",
    "PromptPair",
    "build_prompts",
    "clamp_row_count",
    "PROVIDER_PROFILES",
    "ProviderProfile",
    "resolve_client",
    # Transform
    "parse_records",
    "render_output",
    "to_csv",
    "to_sql",
    # Client
    "GenerationSession",
]
