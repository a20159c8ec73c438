"""Input records and verdict types for the lifecycle policy engine.

Input records are frozen Pydantic models: callers build them from whatever
rows they loaded, and structurally impossible snapshots (a team larger than
its cap, a criterion whose max is below its min) are rejected at
construction. Verdicts are plain dataclasses returned by every guard.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .timeutil import as_utc

PeriodControl = Literal["auto", "open", "closed"]
TeamStatus = Literal["active", "disbanded"]
MemberRole = Literal["leader", "member"]
MemberStatus = Literal["active", "pending", "left"]
SubmissionStatus = Literal["draft", "submitted", "disqualified"]


class Phase(str, Enum):
    """Lifecycle phase considered active for an event at a given instant."""

    UPCOMING = "upcoming"
    REGISTRATION_OPEN = "registration_open"
    REGISTRATION_CLOSED = "registration_closed"
    BUILDING = "building"
    SUBMISSIONS_OPEN = "submissions_open"
    SUBMISSIONS_CLOSED = "submissions_closed"
    JUDGING = "judging"
    RESULTS_PENDING = "results_pending"
    RESULTS = "results"
    LIVE = "live"
    COMPLETED = "completed"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# ==================== TIMELINE ====================


class EventTimeline(_Record):
    """Phase boundaries of one event. Unset fields are not timeline-governed."""

    event_start: datetime
    event_end: datetime

    registration_opens_at: Optional[datetime] = None
    registration_closes_at: Optional[datetime] = None
    building_starts_at: Optional[datetime] = None
    building_ends_at: Optional[datetime] = None
    submission_opens_at: Optional[datetime] = None
    submission_closes_at: Optional[datetime] = None
    judging_starts_at: Optional[datetime] = None
    judging_ends_at: Optional[datetime] = None
    results_announced_at: Optional[datetime] = None

    @field_validator("*")
    @classmethod
    def normalize_instants(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store every instant as aware UTC"""
        if v is None:
            return v
        return as_utc(v)

    def has_phase_timeline(self) -> bool:
        return any(
            getattr(self, name) is not None
            for name in type(self).model_fields
            if name not in ("event_start", "event_end")
        )


class PeriodControls(_Record):
    """Organizer overrides; 'auto' defers to the timeline."""

    registration: PeriodControl = "auto"
    building: PeriodControl = "auto"
    submission: PeriodControl = "auto"
    judging: PeriodControl = "auto"


# ==================== TEAMS ====================


class Team(_Record):
    id: str
    name: str = ""
    leader_id: str
    max_size: int = Field(..., ge=1)
    current_size: int = Field(0, ge=0)
    status: TeamStatus = "active"
    event_id: Optional[str] = None
    code: Optional[str] = None

    @model_validator(mode="after")
    def validate_size(self) -> Self:
        if self.current_size > self.max_size:
            raise ValueError(
                f"current_size ({self.current_size}) cannot exceed max_size ({self.max_size})"
            )
        return self

    @property
    def is_full(self) -> bool:
        return self.current_size >= self.max_size


class TeamMember(_Record):
    user_id: str
    team_id: str
    role: MemberRole = "member"
    status: MemberStatus = "active"


# ==================== SUBMISSIONS ====================


class SubmissionRecord(_Record):
    """Stored submission as seen by the team and submission guards."""

    id: str
    status: SubmissionStatus = "draft"
    team_id: Optional[str] = None
    user_id: Optional[str] = None
    event_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_owner(self) -> Self:
        if self.team_id and self.user_id:
            raise ValueError("a submission is owned by a team or a user, not both")
        return self


class SubmissionData(_Record):
    """Proposed submission content. Loosely typed so the guard reports bad values."""

    project_name: str = ""
    description: str = ""
    demo_url: Optional[str] = None
    github_repo: Optional[str] = None
    video_url: Optional[str] = None
    technologies: Optional[List[Any]] = None
    team_id: Optional[str] = None
    event_id: Optional[str] = None


class SubmissionWindow(_Record):
    """Event facts needed to decide whether submissions are accepted now."""

    status: str = "published"
    event_start: datetime
    event_end: datetime
    opens_at: Optional[datetime] = None
    closes_at: Optional[datetime] = None
    # True when `closes_at` is the start of the next window rather than a set close.
    closes_exclusive: bool = False
    control: PeriodControl = "auto"

    @field_validator("event_start", "event_end", "opens_at", "closes_at")
    @classmethod
    def normalize_instants(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return v
        return as_utc(v)


# ==================== JUDGING ====================


class ScoringCriterion(_Record):
    id: str
    name: str = ""
    description: str = ""
    min_score: float = 0.0
    max_score: float = 10.0
    weight: float = Field(1.0, ge=0.0)
    required: bool = False

    @model_validator(mode="after")
    def validate_range(self) -> Self:
        if self.max_score <= self.min_score:
            raise ValueError("max_score must be greater than min_score")
        return self

    @property
    def label(self) -> str:
        return self.name or self.id


class JudgeScore(_Record):
    """A judge's proposed scores. Values stay untyped until the guard checks them."""

    judge_id: Optional[str] = None
    submission_id: Optional[str] = None
    criteria_scores: Dict[str, Any] = Field(default_factory=dict)
    overall_score: Any = None
    feedback: Optional[str] = None
    scored_at: Optional[datetime] = None


class JudgeToken(_Record):
    token: str
    judge_id: str
    event_id: str
    expires_at: datetime
    revoked: bool = False

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v: datetime) -> datetime:
        return as_utc(v)


# ==================== ACCOUNTS ====================


class UserDeletionContext(_Record):
    """Entanglement counts for one user, loaded by the caller."""

    user_id: str
    role: str = "user"
    owned_events: int = Field(0, ge=0)
    active_team_leaderships: int = Field(0, ge=0)
    active_registrations: int = Field(0, ge=0)
    submitted_projects: int = Field(0, ge=0)
    judge_assignments: int = Field(0, ge=0)
    co_organizer_roles: int = Field(0, ge=0)


# ==================== VERDICTS ====================


@dataclass
class Verdict:
    """Result of a guard: errors refuse the action, warnings only inform."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, message: str) -> "Verdict":
        self.errors.append(message)
        return self

    def warn(self, message: str) -> "Verdict":
        self.warnings.append(message)
        return self

    def extend(self, other: "Verdict", prefix: str | None = None) -> "Verdict":
        lead = f"{prefix}: " if prefix else ""
        self.errors.extend(f"{lead}{msg}" for msg in other.errors)
        self.warnings.extend(f"{lead}{msg}" for msg in other.warnings)
        return self

    @classmethod
    def ok(cls) -> "Verdict":
        return cls()

    @classmethod
    def fail(cls, message: str) -> "Verdict":
        return cls(errors=[message])


@dataclass
class DeletionVerdict:
    """Verdict for account and role changes; blockers must be resolved first."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    blockers: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def can_delete(self) -> bool:
        return not self.blockers


@dataclass
class DeletionPlan:
    can_proceed: bool
    steps: List[str]
    warnings: List[str]
    data_impact: List[str]


@dataclass(frozen=True)
class PhaseResolution:
    phase: Phase
    label: str


__all__ = [
    "DeletionPlan",
    "DeletionVerdict",
    "EventTimeline",
    "JudgeScore",
    "JudgeToken",
    "MemberRole",
    "MemberStatus",
    "PeriodControl",
    "PeriodControls",
    "Phase",
    "PhaseResolution",
    "ScoringCriterion",
    "SubmissionData",
    "SubmissionRecord",
    "SubmissionStatus",
    "SubmissionWindow",
    "Team",
    "TeamMember",
    "TeamStatus",
    "UserDeletionContext",
    "Verdict",
]
