from datetime import datetime, timedelta, timezone

import pytest

from hackathon_core import PolicyConfig, format_duration, validate_date, validate_date_update, validate_event_dates
from hackathon_core.dates import event_duration, is_date_in_past, is_event_active

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
H = timedelta(hours=1)
D = timedelta(days=1)


def test_valid_future_event():
    verdict = validate_event_dates(NOW + D, NOW + 3 * D, NOW)
    assert verdict.is_valid
    assert verdict.warnings == []


def test_accepts_iso_strings():
    verdict = validate_event_dates("2026-03-05T09:00:00Z", "2026-03-06T18:00:00Z", NOW)
    assert verdict.is_valid


def test_unparsable_dates_short_circuit():
    verdict = validate_event_dates("soon", "later", NOW)
    assert verdict.errors == ["Start date is invalid", "End date is invalid"]


def test_end_before_start():
    verdict = validate_event_dates(NOW + 3 * D, NOW + D, NOW)
    assert "End date must be after start date" in verdict.errors


def test_end_in_past():
    verdict = validate_event_dates(NOW - 3 * D, NOW - D, NOW)
    assert "End date cannot be in the past" in verdict.errors
    assert any("Start date is in the past" in w for w in verdict.warnings)


def test_minimum_duration():
    verdict = validate_event_dates(NOW + D, NOW + D + 30 * timedelta(minutes=1), NOW)
    assert verdict.errors == ["Hackathon must be at least 1 hour long"]


def test_minimum_duration_is_configurable():
    config = PolicyConfig(min_event_duration=3 * H)
    verdict = validate_event_dates(NOW + D, NOW + D + 2 * H, NOW, config)
    assert verdict.errors == ["Hackathon must be at least 3 hours long"]


def test_long_and_far_future_events_only_warn():
    verdict = validate_event_dates(NOW + 400 * D, NOW + 440 * D, NOW)
    assert verdict.is_valid
    assert "Hackathon duration is longer than 30 days" in verdict.warnings
    assert "Start date is more than 1 year in the future" in verdict.warnings


def test_validate_date():
    assert validate_date("2026-03-01T00:00:00Z").is_valid
    assert validate_date("", "Start date").errors == ["Start date is invalid"]
    assert not validate_date(True).is_valid


def test_update_before_start_may_move_freely():
    verdict = validate_date_update(NOW + 2 * D, NOW + 4 * D, NOW + D, NOW + 2 * D, "draft", NOW)
    assert verdict.is_valid
    assert verdict.warnings == []


def test_update_published_warns():
    verdict = validate_date_update(NOW + 2 * D, NOW + 4 * D, NOW + 3 * D, NOW + 5 * D, "published", NOW)
    assert verdict.is_valid
    assert verdict.warnings == [
        "Changing dates of a published hackathon may affect registered participants"
    ]


def test_update_running_event_may_extend():
    start = NOW - D
    verdict = validate_date_update(start, NOW + D, start, NOW + 2 * D, "draft", NOW)
    assert verdict.is_valid


def test_update_running_event_start_is_frozen():
    verdict = validate_date_update(NOW - D, NOW + D, NOW - 2 * D, NOW + D, "draft", NOW)
    assert "Cannot change start date of a hackathon that has already started" in verdict.errors


def test_update_running_event_cannot_shorten():
    start = NOW - D
    verdict = validate_date_update(start, NOW + 2 * D, start, NOW + D, "draft", NOW)
    assert verdict.errors == ["Cannot shorten a hackathon that has already started"]


def test_update_ended_event_is_refused():
    verdict = validate_date_update(NOW - 5 * D, NOW - H, NOW + D, NOW + 2 * D, "draft", NOW)
    assert verdict.errors == ["Cannot modify dates of a hackathon that has already ended"]


def test_update_rejects_invalid_new_pair_first():
    verdict = validate_date_update(NOW - 5 * D, NOW - H, NOW + 2 * D, NOW + D, "draft", NOW)
    assert verdict.errors == ["End date must be after start date"]


def test_update_with_broken_stored_dates_checks_only_new_pair():
    verdict = validate_date_update("garbage", None, NOW + D, NOW + 2 * D, "published", NOW)
    assert verdict.is_valid
    assert verdict.warnings == []


@pytest.mark.parametrize(
    "duration, expected",
    [
        (timedelta(hours=1), "1 hour"),
        (timedelta(hours=5), "5 hours"),
        (timedelta(hours=2, minutes=30), "2 hours 30 minutes"),
        (timedelta(minutes=45), "45 minutes"),
        (timedelta(minutes=1), "1 minute"),
        (timedelta(days=1, hours=3), "1 day 3 hours"),
        (timedelta(days=2), "2 days 0 hours"),
    ],
)
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


def test_small_helpers():
    assert is_date_in_past(NOW - H, NOW)
    assert is_date_in_past(NOW, NOW)
    assert not is_date_in_past(NOW + H, NOW)
    assert not is_date_in_past("nope", NOW)

    assert is_event_active(NOW - H, NOW + H, NOW)
    assert not is_event_active(NOW + H, NOW + 2 * H, NOW)
    assert not is_event_active(None, NOW + H, NOW)

    assert event_duration(NOW, NOW + 2 * H) == 2 * H
    assert event_duration("x", NOW) is None
