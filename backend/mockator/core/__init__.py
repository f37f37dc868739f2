"""Core infrastructure module.

Contains configuration, request models, and exceptions.
"""

from .config import (
    Settings,
    get_settings,
    get_cached_settings,
    clear_settings_cache,
)
from .exceptions import (
    UNKNOWN_ERROR_MESSAGE,
    AuthError,
    ConfigurationError,
    MockatorError,
    UnknownError,
    UpstreamError,
    ValidationError,
    error_message,
)
from .models import (
    ErrorResponse,
    GenerationRequest,
    InputMode,
    OutputFormat,
    ProviderId,
    ProviderInfo,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_cached_settings",
    "clear_settings_cache",
    # Exceptions
    "UNKNOWN_ERROR_MESSAGE",
    "AuthError",
    "ConfigurationError",
    "MockatorError",
    "UnknownError",
    "UpstreamError",
    "ValidationError",
    "error_message",
    # Models
    "ErrorResponse",
    "GenerationRequest",
    "InputMode",
    "OutputFormat",
    "ProviderId",
    "ProviderInfo",
]
