"""
Request validation and normalisation.

Everything here runs before the scheduler or store is touched, so a
rejected request has no side effects.
"""

import math
from typing import Any

from vanity_queue.constants import BASE58_EXCLUDED_CHARS, DEFAULT_COUNT, MAX_COUNT, MIN_COUNT
from vanity_queue.errors import InvalidInput


class InvalidSuffix(InvalidInput):
    """The requested suffix can never appear in a base58 address."""


def validate_suffix(suffix: Any, max_length: int) -> str:
    """
    Check that a suffix can appear at the end of a base58 address.

    Args:
        suffix: The raw suffix from the request.
        max_length: Longest suffix allowed.

    Returns:
        The suffix, unchanged.

    Raises:
        InvalidSuffix: With a message describing the first problem found.
    """
    if not suffix or not isinstance(suffix, str):
        raise InvalidSuffix("Missing or invalid suffix")

    excluded = list(dict.fromkeys(c for c in suffix if c in BASE58_EXCLUDED_CHARS))
    if excluded:
        raise InvalidSuffix(
            "Suffix contains characters not in the base58 alphabet: "
            + ", ".join(excluded)
        )

    if not (suffix.isascii() and suffix.isalnum()):
        raise InvalidSuffix("Suffix must be alphanumeric")

    if len(suffix) > max_length:
        raise InvalidSuffix(
            f"Suffix too long. Max {max_length} chars (longer = exponentially slower)"
        )

    return suffix


def _to_int(value: Any) -> int | None:
    """Parse a loosely typed number, returning None when it is unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return int(parsed) if math.isfinite(parsed) else None
    return None


def clamp_count(count: Any) -> int:
    """Clamp a requested keypair count to [1, 10]; unusable values become 1."""
    parsed = _to_int(count)
    if parsed is None:
        return DEFAULT_COUNT
    return min(max(MIN_COUNT, parsed), MAX_COUNT)


def clamp_timeout(timeout: Any, default_ms: int, max_ms: int) -> int:
    """
    Clamp a per-keypair timeout in milliseconds to [1, max_ms].

    Missing or non-numeric values fall back to `default_ms`; nothing is
    rejected.
    """
    parsed = _to_int(timeout)
    if parsed is None:
        parsed = default_ms
    return min(max(1, parsed), max_ms)
