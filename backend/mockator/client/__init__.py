"""Client session module.

Drives the generation API and keeps per-session state for a UI or CLI.
"""

from .session import (
    DEFAULT_SCHEMA_INPUT,
    EMPTY_INPUT_MESSAGE,
    MISSING_KEY_MESSAGE,
    GenerationFailed,
    GenerationSession,
)

__all__ = [
    "DEFAULT_SCHEMA_INPUT",
    "EMPTY_INPUT_MESSAGE",
    "MISSING_KEY_MESSAGE",
    "GenerationFailed",
    "GenerationSession",
]
