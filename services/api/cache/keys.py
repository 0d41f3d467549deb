"""
Cache key normalisation.

Key format:
  weather:{normalised_city}        e.g. "  New York " -> "weather:new york"
  city-search:{normalised_query}   e.g. "<Lon>"       -> "city-search:lon"

Normalisation is trim + lowercase; search queries additionally drop the
characters < > " ' & so user-typed markup never ends up in a key. Both
normalisers are idempotent: normalising an already-normalised key is a no-op.
"""

from __future__ import annotations

import re

from services.api.errors import ValidationError

WEATHER_NAMESPACE = "weather"
CITY_SEARCH_NAMESPACE = "city-search"

MIN_KEY_LENGTH = 1
MAX_KEY_LENGTH = 100

_DISALLOWED_QUERY_CHARS = re.compile(r"[<>\"'&]")


def normalize_key(raw: str) -> str:
    """Trim surrounding whitespace and lowercase."""
    return raw.strip().lower()


def normalize_query(raw: str) -> str:
    """normalize_key plus removal of <>"'& (re-trimmed afterwards)."""
    return _DISALLOWED_QUERY_CHARS.sub("", raw).strip().lower()


def validate_key(normalized: str) -> str:
    """Return the key unchanged, or raise ValidationError if out of bounds."""
    if len(normalized) < MIN_KEY_LENGTH:
        raise ValidationError("Key must not be empty.")
    if len(normalized) > MAX_KEY_LENGTH:
        raise ValidationError(
            f"Key must be at most {MAX_KEY_LENGTH} characters (got {len(normalized)})."
        )
    return normalized


def cache_key(namespace: str, normalized: str) -> str:
    """Build the store key for an already-normalised key."""
    return f"{namespace}:{normalized}"
