"""Event date validation.

Participants may always be given more time, never less, and history is
never rewritten: once an event starts its start date is frozen and its end
date can only move later; once it ends nothing changes.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from .config import DEFAULT_POLICY, PolicyConfig
from .timeutil import parse_instant
from .types import Verdict

logger = logging.getLogger(__name__)


def validate_event_dates(
    start: Any,
    end: Any,
    now: datetime,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    """Validate a proposed (start, end) pair.

    Unparsable dates are reported as errors and short-circuit the remaining
    checks. Durations outside the usual range only warn.
    """
    verdict = Verdict()
    now = parse_instant(now) or now
    start_at = parse_instant(start)
    end_at = parse_instant(end)

    if start_at is None:
        verdict.error("Start date is invalid")
    if end_at is None:
        verdict.error("End date is invalid")
    if start_at is None or end_at is None:
        return verdict

    if end_at <= start_at:
        verdict.error("End date must be after start date")
    if end_at <= now:
        verdict.error("End date cannot be in the past")
    if start_at <= now:
        verdict.warn("Start date is in the past - hackathon will start immediately")

    duration = end_at - start_at
    if duration < config.min_event_duration:
        verdict.error(f"Hackathon must be at least {format_duration(config.min_event_duration)} long")
    if duration > config.long_event_warning:
        verdict.warn(
            f"Hackathon duration is longer than {config.long_event_warning.days} days"
        )
    if start_at - now > config.far_future_warning:
        verdict.warn("Start date is more than 1 year in the future")

    if not verdict.is_valid:
        logger.debug(f"Rejected event dates {start!r}..{end!r}: {verdict.errors}")
    return verdict


def validate_date(value: Any, field_name: str = "Date") -> Verdict:
    if parse_instant(value) is None:
        return Verdict.fail(f"{field_name} is invalid")
    return Verdict.ok()


def validate_date_update(
    current_start: Any,
    current_end: Any,
    new_start: Any,
    new_end: Any,
    status: str,
    now: datetime,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    """Validate moving an existing event from (current_*) to (new_*)."""
    verdict = validate_event_dates(new_start, new_end, now, config)
    if not verdict.is_valid:
        return verdict

    now = parse_instant(now) or now
    old_start = parse_instant(current_start)
    old_end = parse_instant(current_end)
    start_at = parse_instant(new_start)
    end_at = parse_instant(new_end)
    if old_start is None or old_end is None:
        # Stored dates are broken; the new pair already passed on its own.
        logger.warning(f"Stored event dates are invalid: {current_start!r}..{current_end!r}")
        return verdict

    if now >= old_end:
        verdict.error("Cannot modify dates of a hackathon that has already ended")
        return verdict

    if now >= old_start:
        if start_at != old_start:
            verdict.error("Cannot change start date of a hackathon that has already started")
        if end_at < old_end:
            verdict.error("Cannot shorten a hackathon that has already started")
        if end_at <= now:
            verdict.error("Cannot set end date to past when hackathon is already running")

    if status == "published":
        verdict.warn("Changing dates of a published hackathon may affect registered participants")

    return verdict


def is_date_in_past(value: Any, now: datetime) -> bool:
    parsed = parse_instant(value)
    return parsed is not None and parsed <= (parse_instant(now) or now)


def is_event_active(start: Any, end: Any, now: datetime) -> bool:
    start_at = parse_instant(start)
    end_at = parse_instant(end)
    if start_at is None or end_at is None:
        return False
    now = parse_instant(now) or now
    return start_at <= now <= end_at


def event_duration(start: Any, end: Any) -> timedelta | None:
    start_at = parse_instant(start)
    end_at = parse_instant(end)
    if start_at is None or end_at is None:
        return None
    return end_at - start_at


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_duration(duration: timedelta) -> str:
    """Render a duration as 'N days M hours', 'N hours M minutes' or 'N minutes'.

    A whole number of hours with no days renders as just 'N hour(s)'.
    """
    total_minutes = max(int(duration.total_seconds() // 60), 0)
    days, rem = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rem, 60)
    if days > 0:
        return f"{_plural(days, 'day')} {_plural(hours, 'hour')}"
    if hours > 0:
        if minutes == 0:
            return _plural(hours, "hour")
        return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"
    return _plural(minutes, "minute")


__all__ = [
    "event_duration",
    "format_duration",
    "is_date_in_past",
    "is_event_active",
    "validate_date",
    "validate_date_update",
    "validate_event_dates",
]
