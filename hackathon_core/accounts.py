"""Account deletion and role/ownership change guards.

Blockers refuse the change until something is resolved elsewhere (ownership
transferred, leadership handed over); warnings describe what the change will
do to related data. Submitted projects are anonymized, never deleted, so
judging history and leaderboards survive the account.
"""
from __future__ import annotations

import logging
from typing import Iterable

from .roles import is_elevated_role
from .types import DeletionPlan, DeletionVerdict, UserDeletionContext

logger = logging.getLogger(__name__)


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}{'' if n == 1 else 's'}"


def _finish(verdict: DeletionVerdict, summary: str) -> DeletionVerdict:
    if not verdict.can_delete:
        verdict.errors.append(summary)
        logger.debug(f"{summary}: {verdict.blockers}")
    return verdict


def validate_user_deletion(context: UserDeletionContext) -> DeletionVerdict:
    """Decide whether the account can be deleted and what deleting it affects."""
    verdict = DeletionVerdict()

    if context.owned_events > 0:
        verdict.blockers.append(f"User owns {_count(context.owned_events, 'hackathon')}")
        verdict.suggestions.append(
            "Transfer hackathon ownership to another organizer before deletion"
        )

    if context.active_team_leaderships > 0:
        verdict.blockers.append(
            f"User is team leader of {_count(context.active_team_leaderships, 'active team')}"
        )
        verdict.suggestions.append("Transfer team leadership or disband teams before deletion")

    if context.role == "organizer" and (context.owned_events > 0 or context.co_organizer_roles > 0):
        verdict.blockers.append("User has active organizer responsibilities")
        verdict.suggestions.append(
            "Complete or transfer all organizer responsibilities before deletion"
        )

    if context.role == "admin":
        verdict.blockers.append("Admin users cannot be deleted through this process")
        verdict.suggestions.append("Contact super admin to revoke admin role first")

    if context.active_registrations > 0:
        verdict.warnings.append(
            f"User has {_count(context.active_registrations, 'active hackathon registration')} "
            "that will be cancelled"
        )
    if context.submitted_projects > 0:
        verdict.warnings.append(
            f"User has {_count(context.submitted_projects, 'submitted project')} that will be anonymized"
        )
    if context.judge_assignments > 0:
        verdict.warnings.append(
            f"User has {_count(context.judge_assignments, 'judge assignment')} that will be removed"
        )
    if context.co_organizer_roles > 0:
        verdict.warnings.append(
            f"User has {_count(context.co_organizer_roles, 'co-organizer role')} that will be removed"
        )

    return _finish(verdict, "User cannot be deleted due to active responsibilities")


def generate_user_deletion_plan(context: UserDeletionContext) -> DeletionPlan:
    """Ordered cleanup steps for an allowed deletion, or the prerequisites for a refused one."""
    verdict = validate_user_deletion(context)
    if not verdict.can_delete:
        return DeletionPlan(
            can_proceed=False,
            steps=list(verdict.suggestions),
            warnings=list(verdict.warnings),
            data_impact=[],
        )

    actions: list[str] = ["Cancel all active hackathon registrations"]
    impact: list[str] = []
    if context.submitted_projects > 0:
        actions.append("Anonymize submitted projects (preserve for judging/results)")
        impact.append(f"{_count(context.submitted_projects, 'project submission')} will be anonymized")
    if context.judge_assignments > 0:
        actions.append("Remove judge assignments and invalidate judge tokens")
        impact.append(f"{_count(context.judge_assignments, 'judge assignment')} will be removed")
    if context.co_organizer_roles > 0:
        actions.append("Remove co-organizer roles from hackathons")
        impact.append(f"{_count(context.co_organizer_roles, 'co-organizer role')} will be removed")
    actions.append("Anonymize activity feed entries (preserve audit trail)")
    actions.append("Delete user profile and authentication data")

    impact.append("User profile and personal data will be permanently deleted")
    impact.append("Activity history will be preserved but anonymized")

    return DeletionPlan(
        can_proceed=True,
        steps=[f"{idx}. {action}" for idx, action in enumerate(actions, start=1)],
        warnings=list(verdict.warnings),
        data_impact=impact,
    )


def validate_organizer_role_revocation(owned_events: int, co_organizer_roles: int) -> DeletionVerdict:
    verdict = DeletionVerdict()
    if owned_events > 0:
        verdict.blockers.append(f"User owns {_count(owned_events, 'hackathon')}")
        verdict.suggestions.append("Transfer hackathon ownership before revoking organizer role")
    if co_organizer_roles > 0:
        verdict.warnings.append(
            f"User has {_count(co_organizer_roles, 'co-organizer role')} that will be removed"
        )
    return _finish(verdict, "Cannot revoke organizer role due to active responsibilities")


def validate_admin_role_revocation(
    user_id: str,
    user_role: str,
    acting_admin_id: str,
    total_admins: int,
) -> DeletionVerdict:
    """`user_id` loses admin rights at the hands of `acting_admin_id`."""
    verdict = DeletionVerdict()
    if user_id == acting_admin_id:
        verdict.blockers.append("Cannot revoke your own admin role")
        verdict.suggestions.append("Ask another admin to revoke your role")
    if user_role == "super_admin":
        verdict.blockers.append("Super admin role cannot be revoked")
        verdict.suggestions.append("Contact system administrator")
    if total_admins <= 1:
        verdict.warnings.append("This is the last admin user - platform will have no administrators")
    return _finish(verdict, "Cannot revoke admin role")


def validate_team_leadership_handover(
    current_leader_id: str,
    new_leader_id: str,
    team_member_ids: Iterable[str],
    has_active_submission: bool,
) -> DeletionVerdict:
    """Leadership handover in the blocker shape, used while clearing deletion blockers."""
    verdict = DeletionVerdict()
    if new_leader_id not in set(team_member_ids):
        verdict.blockers.append("New leader must be a team member")
        verdict.suggestions.append("Add the new leader to the team first")
    if current_leader_id == new_leader_id:
        verdict.blockers.append("Cannot transfer leadership to yourself")
    if has_active_submission:
        verdict.warnings.append("Team has an active submission - new leader will have full control")
    return _finish(verdict, "Cannot transfer team leadership")


def validate_event_ownership_transfer(
    current_owner_id: str,
    new_owner_id: str,
    new_owner_role: str,
    event_status: str,
    has_active_registrations: bool,
) -> DeletionVerdict:
    verdict = DeletionVerdict()
    if not is_elevated_role(new_owner_role):
        verdict.blockers.append("New owner must have organizer or admin role")
        verdict.suggestions.append("Grant organizer role to the new owner first")
    if current_owner_id == new_owner_id:
        verdict.blockers.append("Cannot transfer ownership to yourself")
    if event_status == "published":
        verdict.warnings.append("Hackathon is currently published - new owner will have full control")
    if has_active_registrations:
        verdict.warnings.append(
            "Hackathon has active registrations - participants will be notified of ownership change"
        )
    return _finish(verdict, "Cannot transfer hackathon ownership")


def validate_data_export_request(user_id: str, requested_by: str, user_consent: bool) -> DeletionVerdict:
    verdict = DeletionVerdict()
    if not user_consent:
        verdict.blockers.append("User consent required for data export")
        verdict.suggestions.append("Obtain explicit user consent before proceeding")
    if user_id != requested_by:
        verdict.warnings.append("Data export requested by admin - ensure proper authorization")
    return _finish(verdict, "Cannot proceed with data export")


__all__ = [
    "generate_user_deletion_plan",
    "validate_admin_role_revocation",
    "validate_data_export_request",
    "validate_event_ownership_transfer",
    "validate_organizer_role_revocation",
    "validate_team_leadership_handover",
    "validate_user_deletion",
]
