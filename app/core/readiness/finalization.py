"""Rules for explicitly closing out a setup area."""

from app.core.readiness.errors import FinalizationError
from app.core.readiness.types import (
    AssignmentsStatus,
    FinalizableArea,
    LocationsStatus,
    ReadinessRecord,
    RolesStatus,
    TalentStatus,
    TeamStatus,
)

# Areas that must be finalized before a project can move from prep to active
ACTIVATION_AREAS = (
    FinalizableArea.LOCATIONS,
    FinalizableArea.ROLES,
    FinalizableArea.TEAM,
    FinalizableArea.TALENT,
)


def validate_finalization(area: FinalizableArea, record: ReadinessRecord) -> None:
    """
    Check that an area has something to finalize.

    Raises:
        FinalizationError: If the area is still at its starting state
    """
    if area == FinalizableArea.LOCATIONS and record.locations_status == LocationsStatus.DEFAULT_ONLY:
        raise FinalizationError(
            "Cannot finalize locations with default setup only. Add custom locations first."
        )
    if area == FinalizableArea.ROLES and record.roles_status == RolesStatus.DEFAULT_ONLY:
        raise FinalizationError(
            "Cannot finalize roles with default setup only. Configure custom roles first."
        )
    if area == FinalizableArea.TEAM and record.team_status == TeamStatus.NONE:
        raise FinalizationError(
            "Cannot finalize team with no staff assigned. Assign team members first."
        )
    if area == FinalizableArea.TALENT and record.talent_status == TalentStatus.NONE:
        raise FinalizationError(
            "Cannot finalize talent with no talent assigned. Add talent to roster first."
        )
    if area == FinalizableArea.ASSIGNMENTS and record.assignments_status not in (
        AssignmentsStatus.CURRENT,
        AssignmentsStatus.COMPLETE,
    ):
        raise FinalizationError(
            "Cannot close out assignments while daily escort assignments are incomplete."
        )


def incomplete_activation_areas(record: ReadinessRecord) -> list[str]:
    """Setup areas not yet finalized, in display order."""
    finalized = {
        FinalizableArea.LOCATIONS: record.locations_status == LocationsStatus.FINALIZED,
        FinalizableArea.ROLES: record.roles_status == RolesStatus.FINALIZED,
        FinalizableArea.TEAM: record.team_status == TeamStatus.FINALIZED,
        FinalizableArea.TALENT: record.talent_status == TalentStatus.FINALIZED,
    }
    return [area.value for area in ACTIVATION_AREAS if not finalized[area]]
