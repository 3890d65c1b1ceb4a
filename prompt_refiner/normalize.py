"""Helpers for turning loosely-typed webhook output into plain text."""

import json
from typing import Any, Optional


def normalize_output(value: Any) -> str:
    """Coerce a raw webhook value into a string.

    Providers sometimes double-encode their output, so a value wrapped in a
    single layer of double quotes is decoded as a JSON string literal. If that
    decoding fails the value is returned as-is. Booleans and None keep their
    JSON spelling (``true``, ``null``).
    """
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if not isinstance(value, str):
        return str(value)

    if value.startswith('"') and value.endswith('"'):
        try:
            decoded = json.loads(value)
        except ValueError:
            return value
        if isinstance(decoded, str):
            return decoded

    return value


def find_first_non_empty_string(value: Any) -> Optional[str]:
    """Depth-first search for the first string that is not blank.

    Walks an explicit stack so arbitrarily deep payloads cannot exhaust the
    interpreter's recursion limit. List order and key order are preserved.
    """
    stack = [value]
    while stack:
        current = stack.pop()

        if isinstance(current, str):
            if current.strip():
                return current
        elif isinstance(current, (list, tuple)):
            stack.extend(reversed(current))
        elif isinstance(current, dict):
            stack.extend(reversed(list(current.values())))

    return None


def is_empty(value: Optional[str]) -> bool:
    """Check if a string is missing, empty or whitespace only."""
    return not value or not value.strip()
