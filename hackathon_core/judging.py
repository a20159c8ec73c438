"""Judge score validation.

Scores are checked against each criterion's inclusive [min, max] range.
The judge-entered overall score is compared with the weight-normalized
average of the criterion scores; a divergence is surfaced as a warning so
the judge's override stands.

Weighted average: each score is normalized to 0..1 within its criterion,
multiplied by the criterion weight, divided by the total weight of the
scored criteria, and scaled to 0..100.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import DEFAULT_POLICY, PolicyConfig
from .timeutil import parse_instant
from .types import JudgeScore, ScoringCriterion, Verdict

logger = logging.getLogger(__name__)

# Advisory only: matches produce warnings.
FLAGGED_FEEDBACK_WORDS = ("spam", "fake", "cheat", "stupid", "terrible", "awful")

OVERALL_MIN = 0.0
OVERALL_MAX = 100.0


def _as_number(value: Any) -> float | None:
    """Return a finite float for real numbers; None for anything else (bools included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        # ints beyond float range
        return None
    if not math.isfinite(number):
        return None
    return number


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _decimal_places(value: float) -> int:
    try:
        exponent = Decimal(str(value)).as_tuple().exponent
    except InvalidOperation:
        return 0
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0


def validate_criterion_score(
    score: Any,
    criterion: ScoringCriterion,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    """Range-check one score; precision and extreme values only warn."""
    name = criterion.label
    value = _as_number(score)
    if value is None:
        return Verdict.fail(f"{name}: Score must be a valid number")

    verdict = Verdict()
    if value < criterion.min_score:
        verdict.error(f"{name}: Score cannot be less than {_fmt(criterion.min_score)}")
    if value > criterion.max_score:
        verdict.error(f"{name}: Score cannot be greater than {_fmt(criterion.max_score)}")

    if _decimal_places(value) > config.score_decimal_places:
        verdict.warn(f"{name}: Score will be rounded to {config.score_decimal_places} decimal places")

    position = (value - criterion.min_score) / (criterion.max_score - criterion.min_score)
    if position <= config.extreme_score_fraction:
        verdict.warn(f"{name}: Very low score ({_fmt(value)}/{_fmt(criterion.max_score)})")
    elif position >= 1 - config.extreme_score_fraction:
        verdict.warn(f"{name}: Very high score ({_fmt(value)}/{_fmt(criterion.max_score)})")
    return verdict


def _weighted_average(
    criteria_scores: Dict[str, Any], criteria: Iterable[ScoringCriterion]
) -> float | None:
    total_weighted = 0.0
    total_weight = 0.0
    for criterion in criteria:
        value = _as_number(criteria_scores.get(criterion.id))
        if value is None:
            continue
        normalized = (value - criterion.min_score) / (criterion.max_score - criterion.min_score)
        total_weighted += normalized * criterion.weight
        total_weight += criterion.weight
    if total_weight == 0:
        return None
    return total_weighted / total_weight * 100


def calculate_normalized_score(
    criteria_scores: Dict[str, Any], criteria: Iterable[ScoringCriterion]
) -> float:
    """Weighted average on a 0..100 scale; 0 when nothing weighted was scored."""
    average = _weighted_average(criteria_scores, criteria)
    return 0.0 if average is None else average


def round_score(score: float, decimal_places: int = 2) -> float:
    """Round half up (away from the banker's rounding of round())."""
    quantum = Decimal(1).scaleb(-decimal_places)
    return float(Decimal(str(score)).quantize(quantum, rounding=ROUND_HALF_UP))


def validate_overall_score(
    overall_score: Any,
    criteria_scores: Dict[str, Any],
    criteria: Sequence[ScoringCriterion],
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    value = _as_number(overall_score)
    if value is None:
        return Verdict.fail("Overall score must be a valid number")

    verdict = Verdict()
    expected = _weighted_average(criteria_scores, criteria)
    if expected is None:
        return verdict.warn("No weighted criteria found for overall score calculation")

    if abs(value - expected) > config.overall_tolerance:
        verdict.warn(
            f"Overall score ({_fmt(value)}) differs significantly from weighted average ({expected:.1f})"
        )
    if value < OVERALL_MIN:
        verdict.error("Overall score cannot be negative")
    if value > OVERALL_MAX:
        verdict.error("Overall score cannot exceed 100")
    return verdict


def validate_judge_score(
    score: JudgeScore,
    criteria: Sequence[ScoringCriterion],
    required_ids: Optional[Iterable[str]] = None,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    """Validate a full score sheet.

    `required_ids` defaults to the criteria flagged `required`. Unknown
    criterion ids warn but do not fail.
    """
    verdict = Verdict()
    if not score.judge_id:
        verdict.error("Judge ID is required")
    if not score.submission_id:
        verdict.error("Submission ID is required")
    if not score.criteria_scores:
        return verdict.error("At least one criterion score is required")

    by_id = {criterion.id: criterion for criterion in criteria}
    if required_ids is None:
        required_ids = [criterion.id for criterion in criteria if criterion.required]
    for required_id in required_ids:
        if required_id not in score.criteria_scores:
            name = by_id[required_id].label if required_id in by_id else required_id
            verdict.error(f'Required criterion "{name}" is missing')

    for criterion_id, value in score.criteria_scores.items():
        criterion = by_id.get(criterion_id)
        if criterion is None:
            verdict.warn(f"Unknown criterion: {criterion_id}")
            continue
        verdict.extend(validate_criterion_score(value, criterion, config))

    if score.overall_score is not None:
        verdict.extend(
            validate_overall_score(score.overall_score, score.criteria_scores, criteria, config)
        )

    if score.feedback:
        if len(score.feedback) > config.feedback_max_length:
            verdict.error(f"Feedback cannot exceed {config.feedback_max_length} characters")
        lowered = score.feedback.lower()
        for word in FLAGGED_FEEDBACK_WORDS:
            if word in lowered:
                verdict.warn(f"Feedback contains potentially inappropriate language: {word}")

    if not verdict.is_valid:
        logger.debug(
            f"Score from judge {score.judge_id} for {score.submission_id} rejected: {verdict.errors}"
        )
    return verdict


def validate_batch_scores(
    scores: Sequence[JudgeScore],
    criteria: Sequence[ScoringCriterion],
    max_batch_size: Optional[int] = None,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Verdict:
    """Validate a batch; messages are prefixed with the 1-based position of the score."""
    limit = config.max_batch_size if max_batch_size is None else max_batch_size
    if not scores:
        return Verdict.fail("No scores provided")
    if len(scores) > limit:
        return Verdict.fail(f"Batch size cannot exceed {limit} scores")

    verdict = Verdict()
    seen: set[str] = set()
    for position, score in enumerate(scores, start=1):
        if score.submission_id:
            if score.submission_id in seen:
                verdict.error(f"Duplicate submission ID in batch: {score.submission_id}")
            seen.add(score.submission_id)
        verdict.extend(validate_judge_score(score, criteria, config=config), prefix=f"Score {position}")
    return verdict


def validate_score_update(
    existing: JudgeScore,
    changes: Dict[str, Any],
    now: datetime,
    allow_updates: bool = True,
) -> Verdict:
    """Judge and submission ids are immutable; revising an old score warns."""
    if not allow_updates:
        return Verdict.fail("Score updates are not allowed for this hackathon")

    verdict = Verdict()
    new_judge = changes.get("judge_id")
    if new_judge and new_judge != existing.judge_id:
        verdict.error("Cannot change judge ID in score update")
    new_submission = changes.get("submission_id")
    if new_submission and new_submission != existing.submission_id:
        verdict.error("Cannot change submission ID in score update")

    scored_at = parse_instant(existing.scored_at)
    now = parse_instant(now) or now
    if scored_at is not None and now - scored_at > timedelta(hours=24):
        verdict.warn("Updating score that was submitted more than 24 hours ago")
    return verdict


def validate_judge_submission_access(
    submission_id: str,
    event_id: str,
    token_event_id: str,
    assigned_submissions: Optional[List[str]] = None,
) -> Verdict:
    """A token opens one event; with assignments in use, only the assigned submissions."""
    if token_event_id != event_id:
        return Verdict.fail("Judge token is not valid for this hackathon")
    if assigned_submissions and submission_id not in assigned_submissions:
        return Verdict.fail("Judge is not assigned to score this submission")
    return Verdict.ok()


__all__ = [
    "FLAGGED_FEEDBACK_WORDS",
    "calculate_normalized_score",
    "round_score",
    "validate_batch_scores",
    "validate_criterion_score",
    "validate_judge_score",
    "validate_judge_submission_access",
    "validate_overall_score",
    "validate_score_update",
]
