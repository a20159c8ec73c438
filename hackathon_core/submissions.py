"""Project submission guards.

Submissions are created and edited while the submission window is open and
frozen once it closes or the event ends, whichever governs. Content
screening (placeholder words, unexpected hosts, duplicate technologies) is
advisory and never blocks.
"""
from __future__ import annotations

import ipaddress
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from urllib.parse import urlsplit

from pydantic import ValidationError

from .config import DEFAULT_POLICY, PolicyConfig
from .timeutil import hours_between, parse_instant, window_state
from .types import SubmissionData, SubmissionRecord, SubmissionWindow, Verdict
from .validation import InputSanitizer

logger = logging.getLogger(__name__)

ALLOWED_URL_SCHEMES = ("http", "https")
GITHUB_HOSTS = ("github.com",)
VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com", "loom.com", "drive.google.com")
DEFAULT_UPLOAD_TYPES = ("image/jpeg", "image/png", "image/gif", "video/mp4")

# Advisory only: matches produce warnings.
PLACEHOLDER_WORDS = ("spam", "test", "fake", "placeholder", "lorem ipsum")

_FIELD_LABELS = {
    "project_name": "Project name",
    "description": "Project description",
    "demo_url": "Demo URL",
    "github_repo": "GitHub repository URL",
    "video_url": "Video URL",
    "technologies": "Technologies",
    "team_id": "Team ID",
    "event_id": "Hackathon ID",
}


def _host_matches(host: str, candidates: Sequence[str]) -> bool:
    return any(host == c or host.endswith("." + c) for c in candidates)


def _is_local_host(host: str) -> bool:
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        addr = ipaddress.ip_address(host)
    except ValueError:
        return False
    return addr.is_private or addr.is_loopback or addr.is_unspecified or addr.is_link_local


def _hostname(url: str) -> str:
    try:
        return (urlsplit(url.strip()).hostname or "").lower()
    except ValueError:
        return ""


def validate_url(
    url: Optional[str], field_name: str = "URL", config: PolicyConfig = DEFAULT_POLICY
) -> Verdict:
    """Empty values pass (optional fields); otherwise http(s), bounded length, public host."""
    verdict = Verdict()
    if url is None:
        return verdict
    if not isinstance(url, str):
        return verdict.error(f"{field_name} is not a valid URL format")
    if not url.strip():
        return verdict

    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
    except ValueError:
        return verdict.error(f"{field_name} is not a valid URL format")

    if not parts.scheme:
        return verdict.error(f"{field_name} is not a valid URL format")
    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES:
        verdict.error(f"{field_name} must use HTTP or HTTPS protocol")
    elif not host:
        return verdict.error(f"{field_name} is not a valid URL format")

    if host and _is_local_host(host):
        verdict.warn(f"{field_name} appears to be a local URL - make sure it's accessible publicly")
    if len(url) > config.url_max_length:
        verdict.error(f"{field_name} is too long (maximum {config.url_max_length} characters)")
    return verdict


def validate_submission_timing(
    window: SubmissionWindow,
    now: datetime,
    is_update: bool = False,
) -> Verdict:
    """Decide whether a submission may be created (or edited) at `now`.

    A forced-open window is still bounded by the event end; a forced-closed
    one rejects outright. In 'auto' the submission window governs, falling
    back to the event's own start and end.
    """
    now = parse_instant(now) or now
    if window.status != "published":
        return Verdict.fail("Submissions are not open - hackathon is not published")
    if window.control == "closed":
        return Verdict.fail("Submissions are closed by the organizer")

    if window.control == "open":
        opens_at = None
        closes_at = window.event_end
    else:
        opens_at = window.opens_at or window.event_start
        closes_at = window.closes_at or window.event_end

    state = window_state(now, opens_at, closes_at)
    if window.closes_exclusive and window.control == "auto" and now >= closes_at:
        state = "closed"
    if state == "before":
        return Verdict.fail("Submissions are not open yet - hackathon has not started")
    if state == "closed" or now > window.event_end:
        if is_update:
            return Verdict.fail("Submission period has ended - projects are now read-only")
        return Verdict.fail("Submission period has ended - no new submissions allowed")

    verdict = Verdict()
    hours_left = hours_between(now, closes_at)
    if hours_left <= 1:
        verdict.warn("Less than 1 hour remaining until submission deadline")
    elif hours_left <= 24:
        verdict.warn("Less than 24 hours remaining until submission deadline")
    return verdict


def _check_length(
    verdict: Verdict, value: str, label: str, low: int, high: int
) -> None:
    text = (value or "").strip()
    if not text:
        verdict.error(f"{label} is required")
    elif len(text) < low:
        verdict.error(f"{label} must be at least {low} characters long")
    elif len(text) > high:
        verdict.error(f"{label} must be less than {high} characters")


def _check_technologies(verdict: Verdict, technologies: Any, config: PolicyConfig) -> None:
    if not isinstance(technologies, list):
        verdict.error("Technologies must be an array")
        return
    if len(technologies) > config.max_technologies:
        verdict.error(f"Maximum {config.max_technologies} technologies allowed")

    for tech in technologies:
        if not isinstance(tech, str):
            verdict.error("All technologies must be strings")
            return
        if not tech.strip():
            verdict.error("Technology names cannot be empty")
            break
        if len(tech) > config.technology_max_length:
            verdict.error(
                f"Technology names must be less than {config.technology_max_length} characters"
            )
            break

    if all(isinstance(tech, str) for tech in technologies):
        if len({tech.strip().lower() for tech in technologies}) != len(technologies):
            verdict.warn("Duplicate technologies detected")


def validate_submission_data(
    data: SubmissionData, config: PolicyConfig = DEFAULT_POLICY
) -> Verdict:
    verdict = Verdict()
    _check_length(
        verdict, data.project_name, "Project name", config.project_name_min, config.project_name_max
    )
    _check_length(
        verdict, data.description, "Project description", config.description_min, config.description_max
    )

    if data.demo_url:
        verdict.extend(validate_url(data.demo_url, "Demo URL", config))

    if data.github_repo:
        github = validate_url(data.github_repo, "GitHub repository URL", config)
        verdict.extend(github)
        if github.is_valid and not _host_matches(_hostname(data.github_repo), GITHUB_HOSTS):
            verdict.warn("GitHub repository URL should be from github.com")

    if data.video_url:
        video = validate_url(data.video_url, "Video URL", config)
        verdict.extend(video)
        if video.is_valid and not _host_matches(_hostname(data.video_url), VIDEO_HOSTS):
            verdict.warn(
                "Video URL should be from a known video platform (YouTube, Vimeo, Loom, etc.)"
            )

    if data.technologies is not None:
        _check_technologies(verdict, data.technologies, config)

    name = (data.project_name or "").lower()
    description = (data.description or "").lower()
    for word in PLACEHOLDER_WORDS:
        if word in name:
            verdict.warn(f"Project name contains potentially inappropriate word: {word}")
        if word in description:
            verdict.warn(f"Description contains potentially inappropriate word: {word}")

    if not verdict.is_valid:
        logger.debug(f"Submission data rejected: {verdict.errors}")
    return verdict


def validate_submission_update(
    existing: SubmissionRecord,
    current_data: SubmissionData,
    changes: Dict[str, Any],
    window: SubmissionWindow,
    now: datetime,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    """Validate editing `existing` (whose content is `current_data`) with `changes`."""
    verdict = validate_submission_timing(window, now, is_update=True)
    if not verdict.is_valid:
        return verdict

    if existing.status == "disqualified":
        return verdict.error("Cannot update disqualified submissions")

    fields = SubmissionData.model_fields
    update = {key: value for key, value in changes.items() if key in fields}
    try:
        merged = SubmissionData.model_validate({**current_data.model_dump(), **update})
    except ValidationError as e:
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "submission"
            verdict.error(f"{_FIELD_LABELS.get(field, field)} has an invalid value")
        logger.debug(f"Submission update rejected before content checks: {verdict.errors}")
        return verdict
    verdict.extend(validate_submission_data(merged, config))

    new_event = changes.get("event_id")
    if new_event and new_event != (existing.event_id or current_data.event_id):
        verdict.error("Cannot change hackathon ID")
    new_team = changes.get("team_id")
    if new_team and new_team != existing.team_id:
        verdict.warn("Changing team assignment - make sure this is intentional")
    return verdict


def validate_file_upload(
    size: int,
    content_type: str,
    name: str,
    allowed_types: Sequence[str] = DEFAULT_UPLOAD_TYPES,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    verdict = Verdict()
    max_bytes = config.upload_max_mb * 1024 * 1024
    if size > max_bytes:
        verdict.error(f"File size exceeds maximum allowed ({config.upload_max_mb}MB)")
    if content_type not in allowed_types:
        verdict.error(f"File type not allowed. Allowed types: {', '.join(allowed_types)}")
    if len(name) > 255:
        verdict.error("File name is too long (maximum 255 characters)")
    if size > max_bytes * 0.8:
        verdict.warn(f"Large file size ({round(size / 1024 / 1024)}MB) - consider compressing")
    return verdict


def validate_team_submission_permissions(
    user_id: str,
    team_id: Optional[str],
    team_leader_id: Optional[str],
    is_team_submission: bool = False,
) -> Verdict:
    """Only a team's leader may create or edit its submission; solo submitters always may."""
    if not is_team_submission:
        if team_id:
            return Verdict(warnings=["You are part of a team but creating an individual submission"])
        return Verdict.ok()

    if not team_id:
        return Verdict.fail("Team ID is required for team submissions")
    if not team_leader_id:
        return Verdict.fail("Team leader not found")
    if user_id != team_leader_id:
        logger.debug(f"User {user_id} is not leader of team {team_id}")
        return Verdict.fail("Only the team leader can create or update team submissions")
    return Verdict.ok()


def sanitize_submission_data(data: SubmissionData) -> SubmissionData:
    return InputSanitizer.sanitize_submission(data)


def submission_is_frozen(window: SubmissionWindow, now: datetime) -> bool:
    """True once edits are read-only: the governing close or the event end has passed."""
    now = parse_instant(now) or now
    if now > window.event_end:
        return True
    if window.control == "closed":
        return True
    if window.control == "open":
        return False
    closes_at = window.closes_at or window.event_end
    if window.closes_exclusive:
        return now >= closes_at
    return now > closes_at


__all__ = [
    "PLACEHOLDER_WORDS",
    "VIDEO_HOSTS",
    "sanitize_submission_data",
    "submission_is_frozen",
    "validate_file_upload",
    "validate_submission_data",
    "validate_submission_timing",
    "validate_submission_update",
    "validate_team_submission_permissions",
    "validate_url",
]
