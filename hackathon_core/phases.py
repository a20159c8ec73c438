"""Event phase resolution (pure, recomputed on every read).

resolve_phase() projects (now, timeline, overrides) onto a single Phase plus a
human-readable label. Nothing is stored between calls, so an organizer
override takes effect on the very next read.

Evaluation order, first match wins:
1. now > event_end -> COMPLETED ("Winners Announced" once winners are out).
2. Manual overrides: building=open, submission=open, judging=open,
   registration=closed, registration=open.
3. Timeline walk over registration, building, submission, judging, results.
   Windows are closed-closed. A missing start is unbounded backwards; a
   missing end runs until the next configured window starts.
4. Coarse fallback on event_start/event_end: UPCOMING, LIVE.

The module also carries the coarse draft/live/ended display state used by
listings, and the timing primitives reused by the submission and team guards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Sequence

from .config import DEFAULT_POLICY, PolicyConfig
from .timeutil import parse_instant, window_state
from .types import EventTimeline, PeriodControls, Phase, PhaseResolution, SubmissionWindow

logger = logging.getLogger(__name__)

DisplayState = Literal["draft", "live", "ended"]
VALID_DISPLAY_STATES: tuple[DisplayState, ...] = ("draft", "live", "ended")

LABEL_UPCOMING = "Upcoming"
LABEL_LIVE = "Live"
LABEL_COMPLETED = "Completed"
LABEL_WINNERS_ANNOUNCED = "Winners Announced"


@dataclass(frozen=True)
class _WindowSpec:
    key: str
    name: str
    start_field: str
    end_field: str | None
    open_phase: Phase
    closed_phase: Phase
    open_label: str
    closing_label: str | None
    soon_label: str
    closed_label: str


_WINDOWS: tuple[_WindowSpec, ...] = (
    _WindowSpec(
        "registration", "Registration", "registration_opens_at", "registration_closes_at",
        Phase.REGISTRATION_OPEN, Phase.REGISTRATION_CLOSED,
        "Registration Open", "Registration Closing Soon",
        "Registration Opens Soon", "Registration Closed",
    ),
    _WindowSpec(
        "building", "Building", "building_starts_at", "building_ends_at",
        Phase.BUILDING, Phase.LIVE,
        "Building", "Building Ends Soon",
        "Building Starts Soon", "Building Ended",
    ),
    _WindowSpec(
        "submission", "Submissions", "submission_opens_at", "submission_closes_at",
        Phase.SUBMISSIONS_OPEN, Phase.SUBMISSIONS_CLOSED,
        "Submissions Open", "Submissions Closing Soon",
        "Submissions Open Soon", "Submissions Closed",
    ),
    _WindowSpec(
        "judging", "Judging", "judging_starts_at", "judging_ends_at",
        Phase.JUDGING, Phase.RESULTS_PENDING,
        "Judging", "Judging Ends Soon",
        "Judging Starts Soon", "Judging Ended",
    ),
    # Results run from the announcement until the event ends.
    _WindowSpec(
        "results", "Results", "results_announced_at", None,
        Phase.RESULTS, Phase.RESULTS,
        "Results Announced", None,
        "Results Coming Soon", "Results Announced",
    ),
)


@dataclass(frozen=True)
class _Window:
    spec: _WindowSpec
    start: datetime | None
    end: datetime | None
    # True when `end` was borrowed from the next window's start.
    end_exclusive: bool = False

    def contains(self, now: datetime) -> bool:
        if self.start is not None and now < self.start:
            return False
        if self.end is None:
            return True
        return now < self.end if self.end_exclusive else now <= self.end


def _configured_windows(timeline: EventTimeline) -> list[_Window]:
    raw: list[tuple[_WindowSpec, datetime | None, datetime | None]] = []
    for spec in _WINDOWS:
        start = getattr(timeline, spec.start_field)
        if spec.end_field is None:
            end = timeline.event_end if start is not None else None
        else:
            end = getattr(timeline, spec.end_field)
        if start is None and end is None:
            continue
        raw.append((spec, start, end))

    windows: list[_Window] = []
    for idx, (spec, start, end) in enumerate(raw):
        if end is not None:
            windows.append(_Window(spec, start, end))
            continue
        next_start = next((s for _, s, _ in raw[idx + 1 :] if s is not None), None)
        windows.append(_Window(spec, start, next_start, end_exclusive=next_start is not None))
    return windows


def _control_for(controls: PeriodControls, key: str) -> str:
    return getattr(controls, key, "auto")


def _open_label(now: datetime, window: _Window, config: PolicyConfig) -> str:
    spec = window.spec
    if spec.closing_label and window.start is not None and window.end is not None:
        duration = window.end - window.start
        if duration.total_seconds() > 0 and now >= window.end - duration * config.closing_soon_fraction:
            return spec.closing_label
    return spec.open_label


def _gap_resolution(
    now: datetime,
    previous: _Window | None,
    upcoming: _Window,
    upcoming_start: datetime,
    config: PolicyConfig,
) -> PhaseResolution:
    starts_soon = upcoming_start - now <= config.starts_soon_window
    if previous is None:
        label = upcoming.spec.soon_label if starts_soon else LABEL_UPCOMING
        return PhaseResolution(Phase.UPCOMING, label)

    if starts_soon:
        label = upcoming.spec.soon_label
    elif previous.end is not None and now - previous.end <= config.starts_soon_window:
        label = f"{previous.spec.name} Just Closed"
    else:
        label = f"Awaiting {upcoming.spec.name}"
    return PhaseResolution(previous.spec.closed_phase, label)


def _resolve_override(controls: PeriodControls) -> PhaseResolution | None:
    if controls.building == "open":
        return PhaseResolution(Phase.BUILDING, "Building")
    if controls.submission == "open":
        return PhaseResolution(Phase.SUBMISSIONS_OPEN, "Submissions Open")
    if controls.judging == "open":
        return PhaseResolution(Phase.JUDGING, "Judging")
    if controls.registration == "closed":
        return PhaseResolution(Phase.REGISTRATION_CLOSED, "Registration Closed")
    if controls.registration == "open":
        return PhaseResolution(Phase.REGISTRATION_OPEN, "Registration Open")
    return None


def _resolve_timeline(
    now: datetime,
    windows: Sequence[_Window],
    controls: PeriodControls,
    config: PolicyConfig,
) -> PhaseResolution:
    previous: _Window | None = None
    for window in windows:
        if window.start is not None and now < window.start:
            return _gap_resolution(now, previous, window, window.start, config)
        if window.contains(now):
            if _control_for(controls, window.spec.key) == "closed":
                return PhaseResolution(window.spec.closed_phase, window.spec.closed_label)
            return PhaseResolution(window.spec.open_phase, _open_label(now, window, config))
        previous = window

    # Past every configured window but the event is still running.
    last = windows[-1].spec
    return PhaseResolution(last.closed_phase, last.closed_label)


def resolve_phase(
    now: datetime,
    timeline: EventTimeline,
    controls: PeriodControls | None = None,
    winners_announced: bool = False,
    config: PolicyConfig = DEFAULT_POLICY,
) -> PhaseResolution:
    """Compute the active phase and its status label.

    Args:
        now: Current instant, supplied by the caller (naive values are UTC)
        timeline: Event boundaries; unset fields are not timeline-governed
        controls: Organizer overrides (defaults to all 'auto')
        winners_announced: Switches the completed label to "Winners Announced"
        config: Thresholds for the "closing soon" and "starts soon" labels

    Returns:
        PhaseResolution; never raises for any combination of inputs.
    """
    now = parse_instant(now) or now
    controls = controls or PeriodControls()

    if now > timeline.event_end:
        label = LABEL_WINNERS_ANNOUNCED if winners_announced else LABEL_COMPLETED
        return PhaseResolution(Phase.COMPLETED, label)

    overridden = _resolve_override(controls)
    if overridden is not None:
        logger.debug(f"Phase forced by override: {overridden.phase.value}")
        return overridden

    if timeline.has_phase_timeline():
        return _resolve_timeline(now, _configured_windows(timeline), controls, config)

    if now < timeline.event_start:
        return PhaseResolution(Phase.UPCOMING, LABEL_UPCOMING)
    return PhaseResolution(Phase.LIVE, LABEL_LIVE)


# ==================== TIMING PRIMITIVES ====================


def has_event_ended(now: datetime, timeline: EventTimeline) -> bool:
    return (parse_instant(now) or now) > timeline.event_end


def is_registration_open(
    now: datetime, timeline: EventTimeline, controls: PeriodControls | None = None
) -> bool:
    """Registration accepts sign-ups: override first, then window, else until the end."""
    now = parse_instant(now) or now
    controls = controls or PeriodControls()
    if has_event_ended(now, timeline):
        return False
    if controls.registration != "auto":
        return controls.registration == "open"
    state = window_state(now, timeline.registration_opens_at, timeline.registration_closes_at)
    if state == "not_configured":
        return True
    return state == "open"


def is_submission_open(
    now: datetime, timeline: EventTimeline, controls: PeriodControls | None = None
) -> bool:
    """Submissions accepted: override first, then window, else while the event runs."""
    now = parse_instant(now) or now
    controls = controls or PeriodControls()
    if has_event_ended(now, timeline):
        return False
    if controls.submission != "auto":
        return controls.submission == "open"
    window = submission_window(timeline, controls)
    opens_at = window.opens_at or window.event_start
    closes_at = window.closes_at or window.event_end
    if window.closes_exclusive and now >= closes_at:
        return False
    return window_state(now, opens_at, closes_at) == "open"


def submission_bounds(timeline: EventTimeline) -> tuple[datetime | None, datetime | None, bool]:
    """(opens_at, closes_at, closes_exclusive) of the submission window as resolve_phase sees it.

    An open-ended submission window closes when the next configured window
    starts; that borrowed close is exclusive.
    """
    for window in _configured_windows(timeline):
        if window.spec.key == "submission":
            return window.start, window.end, window.end_exclusive
    return None, None, False


def submission_window(
    timeline: EventTimeline,
    controls: PeriodControls | None = None,
    status: str = "published",
) -> SubmissionWindow:
    opens_at, closes_at, closes_exclusive = submission_bounds(timeline)
    return SubmissionWindow(
        status=status,
        event_start=timeline.event_start,
        event_end=timeline.event_end,
        opens_at=opens_at,
        closes_at=closes_at,
        closes_exclusive=closes_exclusive,
        control=(controls or PeriodControls()).submission,
    )


# ==================== DISPLAY STATE ====================


def get_display_state(status: str | None, end_date: Any, now: datetime) -> DisplayState:
    """Coarse listing state: 'ended' after end_date, 'live' when published, else 'draft'.

    An unparsable end date cannot be placed in time, so the event is shown
    as a draft.
    """
    end = parse_instant(end_date)
    if end is None:
        logger.warning(f"Invalid end_date for display state: {end_date!r}")
        return "draft"
    if (parse_instant(now) or now) > end:
        return "ended"
    if (status or "draft").lower() == "published":
        return "live"
    return "draft"


def is_valid_display_state(state: Any) -> bool:
    return state in VALID_DISPLAY_STATES


def can_register(status: str | None, end_date: Any, now: datetime) -> bool:
    return get_display_state(status, end_date, now) == "live"


def can_edit_event(status: str | None, end_date: Any, now: datetime) -> tuple[bool, bool]:
    """Return (can_edit, requires_approval). Published events edit freely until they end."""
    state = get_display_state(status, end_date, now)
    return state != "ended", False


def can_submit(status: str | None, start_date: Any, end_date: Any, now: datetime) -> bool:
    if get_display_state(status, end_date, now) != "live":
        return False
    start = parse_instant(start_date)
    if start is None:
        return False
    return (parse_instant(now) or now) >= start


__all__ = [
    "DisplayState",
    "LABEL_COMPLETED",
    "LABEL_LIVE",
    "LABEL_UPCOMING",
    "LABEL_WINNERS_ANNOUNCED",
    "VALID_DISPLAY_STATES",
    "can_edit_event",
    "can_register",
    "can_submit",
    "get_display_state",
    "has_event_ended",
    "is_registration_open",
    "is_submission_open",
    "is_valid_display_state",
    "resolve_phase",
    "submission_bounds",
    "submission_window",
]
