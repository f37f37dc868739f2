"""Security and validation module.

Contains input validation and prompt-injection logging.
"""

from .input_guard import (
    INPUT_REQUIRED_MESSAGE,
    INPUT_TOO_LONG_MESSAGE,
    SUSPICIOUS_PATTERNS,
    find_suspicious_pattern,
    validate_input,
)

__all__ = [
    "INPUT_REQUIRED_MESSAGE",
    "INPUT_TOO_LONG_MESSAGE",
    "SUSPICIOUS_PATTERNS",
    "find_suspicious_pattern",
    "validate_input",
]
