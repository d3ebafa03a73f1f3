"""Feature gates unlocked by readiness state."""

from app.core.readiness.types import (
    AssignmentsStatus,
    CategoryStatuses,
    FeatureAvailability,
    LocationsStatus,
    OverallStatus,
    ReadinessCounts,
    ReadinessRecord,
    TalentStatus,
    TeamStatus,
)

TIME_TRACKING = "time_tracking"
ASSIGNMENTS = "assignments"
LOCATION_TRACKING = "location_tracking"
SUPERVISOR_CHECKOUT = "supervisor_checkout"
TALENT_MANAGEMENT = "talent_management"
PROJECT_OPERATIONS = "project_operations"
NOTIFICATIONS = "notifications"

ALL_FEATURES = (
    TIME_TRACKING,
    ASSIGNMENTS,
    LOCATION_TRACKING,
    SUPERVISOR_CHECKOUT,
    TALENT_MANAGEMENT,
    PROJECT_OPERATIONS,
    NOTIFICATIONS,
)


def derive_feature_availability(
    statuses: CategoryStatuses,
    overall: OverallStatus,
    counts: ReadinessCounts,
) -> dict[str, FeatureAvailability]:
    has_team = statuses.team_status != TeamStatus.NONE
    has_talent = statuses.talent_status != TalentStatus.NONE
    custom_locations = statuses.locations_status != LocationsStatus.DEFAULT_ONLY
    has_assignments = statuses.assignments_status != AssignmentsStatus.NONE
    has_supervisor = has_team and counts.supervisor_count > 0
    has_escorts = has_team and counts.escort_count > 0

    features = {}

    features[TIME_TRACKING] = FeatureAvailability(
        available=has_team,
        requirement="At least one staff member assigned",
        guidance=None if has_team else "Assign team members to enable time tracking",
        action_route=None if has_team else "/roles-team",
    )

    if not has_talent:
        guidance, route = "Add talent to enable assignments", "/talent-roster"
    elif not has_team:
        guidance, route = "Assign team members to enable assignments", "/roles-team"
    else:
        guidance, route = None, None
    features[ASSIGNMENTS] = FeatureAvailability(
        available=has_talent and has_team,
        requirement="Both talent and team members assigned",
        guidance=guidance,
        action_route=route,
    )

    if not custom_locations:
        guidance, route = "Add custom locations to enable tracking", "/info"
    elif not has_assignments:
        guidance, route = "Make escort assignments to enable location tracking", "/assignments"
    else:
        guidance, route = None, None
    features[LOCATION_TRACKING] = FeatureAvailability(
        available=custom_locations and has_assignments,
        requirement="Custom locations and assignments configured",
        guidance=guidance,
        action_route=route,
    )

    if not has_supervisor:
        guidance = "Assign a supervisor to enable checkout controls"
    elif not has_escorts:
        guidance = "Assign escorts to enable checkout controls"
    else:
        guidance = None
    features[SUPERVISOR_CHECKOUT] = FeatureAvailability(
        available=has_supervisor and has_escorts,
        requirement="Supervisor and escorts assigned",
        guidance=guidance,
        action_route=None if guidance is None else "/roles-team",
    )

    features[TALENT_MANAGEMENT] = FeatureAvailability(
        available=has_talent,
        requirement="At least one talent assigned",
        guidance=None if has_talent else "Add talent to enable talent management features",
        action_route=None if has_talent else "/talent-roster",
    )

    operational = overall in (OverallStatus.OPERATIONAL, OverallStatus.PRODUCTION_READY)
    if operational:
        route = None
    elif not has_team:
        route = "/roles-team"
    else:
        route = "/talent-roster"
    features[PROJECT_OPERATIONS] = FeatureAvailability(
        available=operational,
        requirement="Project must be operational (staff and talent assigned)",
        guidance=None if operational else "Complete basic setup to enable operations dashboard",
        action_route=route,
    )

    reachable = has_team or has_talent
    features[NOTIFICATIONS] = FeatureAvailability(
        available=reachable,
        requirement="Staff or talent assigned to receive notifications",
        guidance=None if reachable else "Assign staff or talent to enable notifications",
        action_route=None if reachable else "/roles-team",
    )

    return features


def available_feature_names(features: dict[str, FeatureAvailability]) -> list[str]:
    return sorted(name for name, feature in features.items() if feature.available)


def is_feature_available(record: ReadinessRecord | None, feature: str) -> bool:
    """Gate check for consumers; no record means nothing is unlocked."""
    if record is None:
        return False
    return feature in record.available_features
