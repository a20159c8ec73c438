"""Team membership guards.

A team has exactly one active leader until it is disbanded. Any change that
could orphan the leader (leaving, handing over to a non-member) is refused
here rather than repaired afterwards.
"""
from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime
from typing import Iterable, Literal, Optional

from .config import DEFAULT_POLICY, PolicyConfig
from .email_quality import is_valid_email_format
from .phases import has_event_ended
from .types import EventTimeline, MemberRole, SubmissionRecord, Team, TeamMember, Verdict

logger = logging.getLogger(__name__)

TEAM_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
TEAM_CODE_LENGTH = 6
_TEAM_CODE_RE = re.compile(rf"^[A-Z0-9]{{{TEAM_CODE_LENGTH}}}$")

# Advisory only: matches produce warnings.
FLAGGED_TEAM_NAME_WORDS = ("spam", "test", "admin", "moderator", "null", "undefined")

LEADER_ONLY_ACTIONS = frozenset({"invite", "remove", "disband", "transfer_leadership"})

TeamAction = Literal["invite", "remove", "disband", "transfer_leadership"]


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _reject(message: str) -> Verdict:
    logger.debug(f"Team action rejected: {message}")
    return Verdict.fail(message)


def _event_locked(timeline: EventTimeline | None, now: datetime | None) -> bool:
    return timeline is not None and now is not None and has_event_ended(now, timeline)


def validate_team_creation(
    team_name: str,
    max_team_size: int,
    user_id: str,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    verdict = Verdict()
    name = (team_name or "").strip()

    if not name:
        verdict.error("Team name is required")
    elif len(name) < config.team_name_min:
        verdict.error(f"Team name must be at least {config.team_name_min} characters long")
    elif len(name) > config.team_name_max:
        verdict.error(f"Team name must be less than {config.team_name_max} characters")

    lowered = name.lower()
    for word in FLAGGED_TEAM_NAME_WORDS:
        if word in lowered:
            verdict.warn(f"Team name contains potentially inappropriate word: {word}")

    if max_team_size < 1:
        verdict.error("Team must allow at least 1 member")
    elif max_team_size > config.recommended_team_size:
        verdict.warn(
            f"Team size larger than {config.recommended_team_size} may be difficult to manage"
        )

    if _blank(user_id):
        verdict.error("User ID is required")
    return verdict


def validate_team_join(
    team: Team | None,
    user_id: str,
    current_team_id: Optional[str] = None,
) -> Verdict:
    """Check a user joining `team`; `current_team_id` is their team in this event, if any."""
    if current_team_id:
        return _reject("You are already on a team for this hackathon")
    if team is None:
        return _reject("Team not found")
    if team.status != "active":
        return _reject("Team is no longer active")
    if team.is_full:
        return _reject(f"Team is full (maximum {team.max_size} members)")
    if team.leader_id == user_id:
        return _reject("You are already the leader of this team")

    if _blank(user_id):
        return Verdict.fail("User ID is required")
    return Verdict.ok()


def validate_team_leave(
    team: Team | None,
    user_id: str,
    role: MemberRole,
    submission: SubmissionRecord | None = None,
    *,
    timeline: EventTimeline | None = None,
    now: datetime | None = None,
) -> Verdict:
    """Leaders never leave directly; members cannot leave once the project is submitted."""
    if team is None:
        return _reject("Team not found")
    if role == "leader" or team.leader_id == user_id:
        return _reject(
            "Team leaders cannot leave directly. Please disband the team or transfer leadership first."
        )
    if submission is not None and submission.status == "submitted":
        return _reject("Cannot leave team after project submission")
    if _event_locked(timeline, now):
        return _reject("Cannot leave a team after the hackathon has ended")

    if _blank(user_id):
        return Verdict.fail("User ID is required")
    return Verdict.ok()


def validate_team_disband(
    team: Team | None,
    user_id: str,
    submission: SubmissionRecord | None = None,
    *,
    timeline: EventTimeline | None = None,
    now: datetime | None = None,
) -> Verdict:
    if team is None:
        return _reject("Team not found")
    if team.leader_id != user_id:
        return _reject("Only the team leader can disband the team")
    if _event_locked(timeline, now):
        return _reject("Cannot disband a team after the hackathon has ended")

    verdict = Verdict()
    if submission is not None and submission.status == "submitted":
        verdict.warn("Disbanding team after project submission may affect judging")
    if _blank(user_id):
        verdict.error("User ID is required")
    return verdict


def validate_leadership_transfer(
    team: Team | None,
    current_leader_id: str,
    new_leader_id: str,
    new_leader: TeamMember | None,
) -> Verdict:
    """`new_leader` is the recipient's membership row in this team, or None."""
    if team is None:
        return _reject("Team not found")
    if team.leader_id != current_leader_id:
        return _reject("Only the current team leader can transfer leadership")
    if current_leader_id == new_leader_id:
        return _reject("Cannot transfer leadership to yourself")
    if (
        new_leader is None
        or new_leader.user_id != new_leader_id
        or new_leader.team_id != team.id
        or new_leader.status != "active"
    ):
        return _reject("New leader must be a team member")

    verdict = Verdict()
    if _blank(current_leader_id):
        verdict.error("Current leader ID is required")
    if _blank(new_leader_id):
        verdict.error("New leader ID is required")
    return verdict


def validate_team_invitation(team: Team | None, inviter_id: str, invitee_email: str) -> Verdict:
    if team is None:
        return _reject("Team not found")
    if team.status != "active":
        return _reject("Team is no longer active")
    if team.leader_id != inviter_id:
        return _reject("Only the team leader can send invitations")
    if team.is_full:
        return _reject(f"Team is full (maximum {team.max_size} members)")

    verdict = Verdict()
    if not is_valid_email_format(invitee_email):
        verdict.error("Invalid email format")
    if _blank(inviter_id):
        verdict.error("Inviter ID is required")
    verdict.extend(validate_team_size_limit(team.current_size, team.max_size, "invite"))
    return verdict


def validate_team_size_limit(
    current_size: int, max_size: int, action: Literal["join", "invite"]
) -> Verdict:
    if current_size >= max_size:
        return Verdict.fail(f"Team is full (maximum {max_size} members)")
    if current_size + 1 == max_size and action == "invite":
        return Verdict(warnings=["This will be the last member that can join the team"])
    return Verdict.ok()


def validate_team_member_permissions(role: MemberRole, action: TeamAction) -> Verdict:
    if action in LEADER_ONLY_ACTIONS and role != "leader":
        return Verdict.fail(f"Only team leaders can {action.replace('_', ' ')}")
    return Verdict.ok()


def validate_team_name_uniqueness(team_name: str, existing_names: Iterable[str]) -> Verdict:
    """Exact (case-insensitive) duplicates fail; names containing this one warn."""
    verdict = Verdict()
    wanted = team_name.strip().lower()
    existing = [name.strip().lower() for name in existing_names]
    if wanted in existing:
        verdict.error("A team with this name already exists in this hackathon")
    for name in existing:
        if name != wanted and wanted and wanted in name:
            verdict.warn(f"Similar team name already exists: {name}")
    return verdict


def generate_team_code() -> str:
    """Random join code; the store is responsible for uniqueness."""
    return "".join(secrets.choice(TEAM_CODE_ALPHABET) for _ in range(TEAM_CODE_LENGTH))


def validate_team_code(code: str) -> bool:
    return isinstance(code, str) and bool(_TEAM_CODE_RE.match(code))


__all__ = [
    "FLAGGED_TEAM_NAME_WORDS",
    "LEADER_ONLY_ACTIONS",
    "TeamAction",
    "generate_team_code",
    "validate_leadership_transfer",
    "validate_team_code",
    "validate_team_creation",
    "validate_team_disband",
    "validate_team_invitation",
    "validate_team_join",
    "validate_team_leave",
    "validate_team_member_permissions",
    "validate_team_name_uniqueness",
    "validate_team_size_limit",
]
