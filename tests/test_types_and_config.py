from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from hackathon_core import (
    DEFAULT_POLICY,
    EventTimeline,
    InputSanitizer,
    PeriodControls,
    PolicyConfig,
    SubmissionData,
    Verdict,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ==================== CONFIG ====================


def test_default_policy():
    assert DEFAULT_POLICY.closing_soon_fraction == 0.1
    assert DEFAULT_POLICY.starts_soon_window == timedelta(hours=24)
    assert DEFAULT_POLICY.max_batch_size == 50


def test_policy_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_POLICY.max_batch_size = 10


@pytest.mark.parametrize(
    "fields",
    [
        {"team_name_min": 60, "team_name_max": 50},
        {"min_event_duration": timedelta(0)},
        {"closing_soon_fraction": 1.5},
        {"token_min_length": 8},
    ],
)
def test_policy_rejects_bad_bounds(fields):
    with pytest.raises(ValidationError):
        PolicyConfig(**fields)


# ==================== INPUT RECORDS ====================


def test_timeline_normalizes_to_utc():
    plus_two = timezone(timedelta(hours=2))
    timeline = EventTimeline(
        event_start=datetime(2026, 3, 1, 14, 0, tzinfo=plus_two),
        event_end="2026-03-03T12:00:00",
    )
    assert timeline.event_start == NOW
    assert timeline.event_start.tzinfo == timezone.utc
    assert timeline.event_end.tzinfo == timezone.utc
    assert not timeline.has_phase_timeline()


def test_timeline_requires_event_bounds():
    with pytest.raises(ValidationError):
        EventTimeline(event_start=NOW)


def test_timeline_ignores_unknown_columns():
    timeline = EventTimeline(event_start=NOW, event_end=NOW, judging_starts_at=NOW, venue="Hall B")
    assert timeline.has_phase_timeline()


def test_period_controls():
    assert PeriodControls().registration == "auto"
    with pytest.raises(ValidationError):
        PeriodControls(submission="paused")


# ==================== VERDICTS ====================


def test_verdict_helpers():
    verdict = Verdict().warn("careful").error("broken")
    assert not verdict.is_valid
    verdict.extend(Verdict.fail("inner"), prefix="Score 1")
    assert verdict.errors == ["broken", "Score 1: inner"]
    assert verdict.warnings == ["careful"]
    assert Verdict.ok().is_valid


# ==================== SANITIZER ====================


def test_sanitize_string():
    assert InputSanitizer.sanitize_string("  hi\0 there  ") == "hi there"
    assert InputSanitizer.sanitize_string(12345, max_length=3) == "123"
    assert InputSanitizer.sanitize_string("x" * 300) == "x" * 255


def test_sanitize_team_name():
    assert InputSanitizer.sanitize_team_name("  <b>Café</b>   Crew; ") == "bCafé/b Crew"
    assert InputSanitizer.sanitize_team_name("Team\tRocket") == "TeamRocket"


def test_sanitize_submission_keeps_values():
    data = SubmissionData(project_name="SplitIt", description="Shared expense tracker")
    assert InputSanitizer.sanitize_submission(data).technologies == []
