"""Input validation and error message sanitizing."""

import re
from typing import Any
from urllib.parse import urlparse

from prompt_refiner.errors import RefineErrorCode, RefinerError

MAX_PROMPT_LENGTH = 100_000

_CREDENTIALS_RE = re.compile(r'https?://[^:/\s]+:[^@\s]+@', re.IGNORECASE)
_MAX_MESSAGE_LENGTH = 500


def validate_prompt(prompt: Any) -> str:
    """Check a prompt and return it trimmed.

    Raises:
        RefinerError: EMPTY_PROMPT if the prompt is not a string, is blank,
            or is longer than MAX_PROMPT_LENGTH
    """
    if not isinstance(prompt, str):
        raise RefinerError("Prompt must be a string", RefineErrorCode.EMPTY_PROMPT)

    trimmed = prompt.strip()
    if not trimmed:
        raise RefinerError("Prompt cannot be empty", RefineErrorCode.EMPTY_PROMPT)

    if len(trimmed) > MAX_PROMPT_LENGTH:
        raise RefinerError(
            f"Prompt exceeds maximum length of {MAX_PROMPT_LENGTH} characters",
            RefineErrorCode.EMPTY_PROMPT
        )

    return trimmed


def validate_url(url: str) -> bool:
    """Check that a URL is http(s) with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def sanitize_error_message(error: Any) -> str:
    """Produce a message safe to show to a user."""
    if isinstance(error, RefinerError):
        return error.message

    if isinstance(error, BaseException):
        message = _CREDENTIALS_RE.sub('https://***:***@', str(error))
        if len(message) > _MAX_MESSAGE_LENGTH:
            message = message[:_MAX_MESSAGE_LENGTH] + '...'
        return message

    return "An unexpected error occurred"
