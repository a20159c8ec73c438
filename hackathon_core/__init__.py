from .accounts import (
    generate_user_deletion_plan,
    validate_admin_role_revocation,
    validate_data_export_request,
    validate_event_ownership_transfer,
    validate_organizer_role_revocation,
    validate_team_leadership_handover,
    validate_user_deletion,
)
from .config import DEFAULT_POLICY, PolicyConfig
from .dates import (
    format_duration,
    validate_date,
    validate_date_update,
    validate_event_dates,
)
from .email_quality import (
    EmailCheck,
    MxOracle,
    is_disposable_domain,
    is_safe_domain,
    validate_email,
    validate_email_quick,
)
from .judge_tokens import (
    TokenAuthResult,
    authenticate_token,
    generate_secure_token,
    validate_judge_token,
)
from .judging import (
    calculate_normalized_score,
    validate_batch_scores,
    validate_criterion_score,
    validate_judge_score,
    validate_overall_score,
)
from .phases import (
    can_edit_event,
    can_register,
    can_submit,
    get_display_state,
    is_registration_open,
    is_submission_open,
    resolve_phase,
    submission_window,
)
from .submissions import (
    validate_submission_data,
    validate_submission_timing,
    validate_submission_update,
    validate_team_submission_permissions,
    validate_url,
)
from .teams import (
    validate_leadership_transfer,
    validate_team_creation,
    validate_team_disband,
    validate_team_invitation,
    validate_team_join,
    validate_team_leave,
)
from .types import (
    DeletionPlan,
    DeletionVerdict,
    EventTimeline,
    JudgeScore,
    JudgeToken,
    PeriodControls,
    Phase,
    PhaseResolution,
    ScoringCriterion,
    SubmissionData,
    SubmissionRecord,
    SubmissionWindow,
    Team,
    TeamMember,
    UserDeletionContext,
    Verdict,
)
from .validation import InputSanitizer

__all__ = [
    "DEFAULT_POLICY",
    "DeletionPlan",
    "DeletionVerdict",
    "EmailCheck",
    "EventTimeline",
    "InputSanitizer",
    "JudgeScore",
    "JudgeToken",
    "MxOracle",
    "PeriodControls",
    "Phase",
    "PhaseResolution",
    "PolicyConfig",
    "ScoringCriterion",
    "SubmissionData",
    "SubmissionRecord",
    "SubmissionWindow",
    "Team",
    "TeamMember",
    "TokenAuthResult",
    "UserDeletionContext",
    "Verdict",
    "authenticate_token",
    "calculate_normalized_score",
    "can_edit_event",
    "can_register",
    "can_submit",
    "format_duration",
    "generate_secure_token",
    "generate_user_deletion_plan",
    "get_display_state",
    "is_disposable_domain",
    "is_registration_open",
    "is_safe_domain",
    "is_submission_open",
    "resolve_phase",
    "submission_window",
    "validate_admin_role_revocation",
    "validate_batch_scores",
    "validate_criterion_score",
    "validate_data_export_request",
    "validate_date",
    "validate_date_update",
    "validate_email",
    "validate_email_quick",
    "validate_event_dates",
    "validate_event_ownership_transfer",
    "validate_judge_score",
    "validate_judge_token",
    "validate_leadership_transfer",
    "validate_organizer_role_revocation",
    "validate_overall_score",
    "validate_submission_data",
    "validate_submission_timing",
    "validate_submission_update",
    "validate_team_creation",
    "validate_team_disband",
    "validate_team_invitation",
    "validate_team_join",
    "validate_team_leave",
    "validate_team_leadership_handover",
    "validate_team_submission_permissions",
    "validate_url",
    "validate_user_deletion",
]
