"""Shared parsing helpers for blueprints and services.

parse_date:       returns None on bad input (lenient, for optional fields)
parse_date_input: raises ValueError on bad input (strict, for required fields)
split_tags:       comma / full-width comma separated tag strings → list
"""
import re
from datetime import date, datetime


def parse_date(value):
    """Parse an ISO date string to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD (ISO format)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        return None


def parse_date_input(value):
    """Same as parse_date() but raises ValueError instead of returning None.

    Empty input still returns None so callers can apply their own default.
    """
    if not value:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return parsed


_TAG_SEPARATORS = re.compile(r"[,，]")


def split_tags(value) -> list[str]:
    """Split a tag string on ',' or '，', trimming and dropping empties.

    A list is accepted as-is (each item trimmed, empties dropped).
    """
    if value is None:
        return []
    parts = value if isinstance(value, list) else _TAG_SEPARATORS.split(str(value))
    return [str(t).strip() for t in parts if str(t).strip()]
