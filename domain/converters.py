"""
Type Conversion Utilities for Domain Model Factories

Safe conversion functions for building domain models from store documents
and form input. Null values (None, NaN, pd.NA) fall back to a default.

Usage:
    ```python
    from domain.converters import safe_float, safe_str

    price = safe_float(doc.get('price'))  # Returns 0.0 if null
    name = safe_str(doc.get('name'))      # Returns "" if null
    ```
"""

from datetime import datetime, timezone

import pandas as pd


def _is_null(value) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Lists and other containers are never null
        return False


def safe_int(value, default: int = 0) -> int:
    """
    Convert value to int, returning default if null.

    Examples:
        >>> safe_int("3")
        3
        >>> safe_int(None, default=1)
        1
    """
    if _is_null(value):
        return default
    return int(value)


def safe_float(value, default: float = 0.0) -> float:
    """Convert value to float, returning default if null."""
    if _is_null(value):
        return default
    return float(value)


def safe_str(value, default: str = "") -> str:
    """Convert value to a stripped string, returning default if null."""
    if _is_null(value):
        return default
    return str(value).strip()


def parse_timestamp(value) -> datetime | None:
    """
    Parse an ISO-8601 string (or datetime) into an aware UTC datetime.

    Accepts the trailing "Z" form written by browsers. Naive values are
    assumed to be UTC. Returns None for null input.

    Raises:
        ValueError: If the value is not a datetime or ISO-8601 string
    """
    if _is_null(value):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Not a timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime | None) -> str | None:
    """Format an aware datetime as ISO-8601 with a trailing "Z"."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
