"""Input validation for generation requests.

The character limit is authoritative here even though clients truncate too.
Suspicious phrases are only logged: the format contract in the system prompt
is the primary protection and the input is embedded unchanged.
"""

from __future__ import annotations

import logging
import re

from ..core.exceptions import ValidationError
from ..llm.prompts import MAX_INPUT_CHARS

logger = logging.getLogger(__name__)

INPUT_REQUIRED_MESSAGE = "Input is required."
INPUT_TOO_LONG_MESSAGE = f"Input exceeds limit of {MAX_INPUT_CHARS} characters."

# Patterns that might indicate prompt injection attempts
SUSPICIOUS_PATTERNS = [
    r"ignore\s+(previous|all|above)\s+instructions?",
    r"disregard\s+(previous|all|above)",
    r"forget\s+(everything|all)",
    r"new\s+instructions?:",
    r"system\s*:",
    r"assistant\s*:",
    r"you\s+are\s+now\b",
]


def find_suspicious_pattern(text: str) -> str | None:
    """Return the first suspicious pattern found in the text, if any."""
    for pattern in SUSPICIOUS_PATTERNS:
        if re.search(pattern, text, re.IGNORECASE | re.DOTALL):
            return pattern
    return None


def validate_input(text: str | None) -> str:
    """Validate generation input and return it unchanged.

    Raises:
        ValidationError: input is missing/empty or longer than MAX_INPUT_CHARS
    """
    if not text:
        raise ValidationError(INPUT_REQUIRED_MESSAGE)

    if len(text) > MAX_INPUT_CHARS:
        logger.warning(f"Rejected input of {len(text)} chars (limit {MAX_INPUT_CHARS})")
        raise ValidationError(INPUT_TOO_LONG_MESSAGE)

    pattern = find_suspicious_pattern(text)
    if pattern:
        logger.warning(f"Suspicious pattern detected in user input: {pattern}")

    return text
