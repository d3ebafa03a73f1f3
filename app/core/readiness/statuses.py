"""Per-category status derivation and the overall roll-up."""

from enum import Enum

from app.core.readiness.errors import ComputationInvariantError
from app.core.readiness.snapshot import ConfigurationSnapshot, lookahead_days
from app.core.readiness.types import (
    CATEGORY_ENUMS,
    AssignmentGap,
    AssignmentProgress,
    AssignmentsStatus,
    CategoryStatuses,
    LocationsStatus,
    OverallStatus,
    RolesStatus,
    TalentStatus,
    TeamStatus,
)


def locations_status(snapshot: ConfigurationSnapshot) -> LocationsStatus:
    if snapshot.locations_finalized:
        return LocationsStatus.FINALIZED
    if snapshot.location_count > 0 and not snapshot.has_only_default_locations:
        return LocationsStatus.CONFIGURED
    return LocationsStatus.DEFAULT_ONLY


def roles_status(snapshot: ConfigurationSnapshot) -> RolesStatus:
    if snapshot.roles_finalized:
        return RolesStatus.FINALIZED
    if snapshot.role_template_count > 0 and not snapshot.has_only_default_roles:
        return RolesStatus.CONFIGURED
    return RolesStatus.DEFAULT_ONLY


def team_status(snapshot: ConfigurationSnapshot) -> TeamStatus:
    if snapshot.team_finalized:
        return TeamStatus.FINALIZED
    if snapshot.staff_assigned_count > 0:
        return TeamStatus.PARTIAL
    return TeamStatus.NONE


def talent_status(snapshot: ConfigurationSnapshot) -> TalentStatus:
    if snapshot.talent_finalized:
        return TalentStatus.FINALIZED
    if snapshot.talent_count > 0:
        return TalentStatus.PARTIAL
    return TalentStatus.NONE


def assignment_ratio(snapshot: ConfigurationSnapshot) -> float:
    """Share of possible daily escort slots that are filled (0 when none are possible)."""
    total = snapshot.total_possible_daily_assignments
    if total == 0:
        return 0.0
    ratio = snapshot.completed_daily_assignments / total
    if not 0.0 <= ratio <= 1.0:
        raise ComputationInvariantError(f"Assignment ratio {ratio} outside [0, 1]")
    return ratio


def assignments_status(snapshot: ConfigurationSnapshot) -> AssignmentsStatus:
    ratio = assignment_ratio(snapshot)
    if ratio == 0.0:
        return AssignmentsStatus.NONE
    if ratio < 1.0:
        return AssignmentsStatus.PARTIAL
    if snapshot.assignments_finalized:
        return AssignmentsStatus.COMPLETE
    return AssignmentsStatus.CURRENT


def derive_category_statuses(snapshot: ConfigurationSnapshot) -> CategoryStatuses:
    return CategoryStatuses(
        locations_status=locations_status(snapshot),
        roles_status=roles_status(snapshot),
        team_status=team_status(snapshot),
        talent_status=talent_status(snapshot),
        assignments_status=assignments_status(snapshot),
    )


def is_maximal(status: Enum) -> bool:
    return status is list(type(status))[-1]


def roll_up(statuses: CategoryStatuses) -> OverallStatus:
    """
    Overall status as a strict function of the five category statuses.

    Default-only locations and roles are usable and never block ``operational``;
    a team or talent roster at ``none`` always does.
    """
    values = []
    for name, enum_type in CATEGORY_ENUMS.items():
        value = getattr(statuses, name)
        if not isinstance(value, enum_type):
            raise ComputationInvariantError(f"{name}={value!r} is not a {enum_type.__name__}")
        values.append(value)

    if all(is_maximal(value) for value in values):
        return OverallStatus.PRODUCTION_READY
    if statuses.team_status != TeamStatus.NONE and statuses.talent_status != TalentStatus.NONE:
        return OverallStatus.OPERATIONAL
    return OverallStatus.GETTING_STARTED


def build_assignment_progress(
    snapshot: ConfigurationSnapshot, lookahead: int = 3
) -> AssignmentProgress:
    """Assignment totals plus escort gaps for the coming days."""
    total = snapshot.total_possible_daily_assignments
    completed = snapshot.completed_daily_assignments
    rate = round(assignment_ratio(snapshot) * 100)
    if completed < total:
        rate = min(rate, 99)

    gaps = []
    if snapshot.talent_count > 0:
        for offset, day in lookahead_days(snapshot, lookahead):
            missing = snapshot.talent_count - snapshot.escorted_by_day.get(day, 0)
            if missing > 0:
                gaps.append(AssignmentGap(day=day, missing_assignments=missing, days_from_now=offset))

    urgent = next((gap.missing_assignments for gap in gaps if gap.days_from_now == 1), 0)

    return AssignmentProgress(
        total_entities=snapshot.talent_count,
        project_days=snapshot.project_days,
        total_possible=total,
        completed=completed,
        assignment_rate=rate,
        urgent_issues=urgent,
        upcoming_gaps=gaps,
    )
