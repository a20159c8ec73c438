"""Instant parsing and window predicates shared by the resolver and the guards.

Every instant handled by the core is a timezone-aware UTC ``datetime``.
Naive values are read as UTC. Strings and epoch numbers are parsed with
Pydantic's datetime rules so the same inputs are accepted here as on the
input models.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from pydantic import TypeAdapter, ValidationError

WindowState = Literal["not_configured", "before", "open", "closed"]

_DATETIME = TypeAdapter(datetime)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: Any) -> datetime | None:
    """Parse a datetime, ISO string or epoch number into an aware UTC datetime.

    Returns None when the value cannot be interpreted as an instant. Booleans
    and blank strings are rejected rather than coerced.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str) and not value.strip():
        return None
    try:
        parsed = _DATETIME.validate_python(value.strip() if isinstance(value, str) else value)
    except ValidationError:
        return None
    return as_utc(parsed)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start) / timedelta(hours=1)


def window_state(now: datetime, start: datetime | None, end: datetime | None) -> WindowState:
    if start is None and end is None:
        return "not_configured"
    if start is not None and now < start:
        return "before"
    if end is not None and now > end:
        return "closed"
    return "open"


__all__ = [
    "WindowState",
    "as_utc",
    "hours_between",
    "parse_instant",
    "window_state",
]
