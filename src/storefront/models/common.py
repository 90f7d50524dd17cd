"""Coercion helpers and shared model configuration."""

import math
from datetime import datetime, timezone
from typing import Any, Union

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

Number = Union[int, float]

# Records are stored and returned with camelCase keys (imageUrl, createdAt, ...)
RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


def normalize_number(value: Number) -> Number:
    """Return integral floats as int so 10.0 serializes as 10."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def to_number(value: Any) -> Number:
    """
    Coerce a JSON scalar to a finite number.

    Accepts ints, floats and numeric strings. Booleans, containers and
    non-numeric strings are rejected with ValueError.
    """
    if isinstance(value, bool):
        raise ValueError('must be a number')
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValueError('must be a number') from None
    if not isinstance(value, float) or not math.isfinite(value):
        raise ValueError('must be a number')
    return normalize_number(value)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
