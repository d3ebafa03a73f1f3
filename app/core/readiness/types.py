"""Enums and pydantic models for project readiness."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field


# =============================================================================
# Status enums
# =============================================================================


class LocationsStatus(str, Enum):
    DEFAULT_ONLY = "default-only"
    CONFIGURED = "configured"
    FINALIZED = "finalized"


class RolesStatus(str, Enum):
    DEFAULT_ONLY = "default-only"
    CONFIGURED = "configured"
    FINALIZED = "finalized"


class TeamStatus(str, Enum):
    NONE = "none"
    PARTIAL = "partial"
    FINALIZED = "finalized"


class TalentStatus(str, Enum):
    NONE = "none"
    PARTIAL = "partial"
    FINALIZED = "finalized"


class AssignmentsStatus(str, Enum):
    NONE = "none"
    PARTIAL = "partial"
    CURRENT = "current"  # every daily slot filled, not closed out
    COMPLETE = "complete"  # filled and explicitly closed out


class OverallStatus(str, Enum):
    GETTING_STARTED = "getting-started"
    OPERATIONAL = "operational"
    PRODUCTION_READY = "production-ready"


class ChangeKind(str, Enum):
    """Which configuration source a mutation touched."""

    LOCATIONS = "locations"
    ROLES = "roles"
    TEAM = "team"
    TALENT = "talent"
    ASSIGNMENTS = "assignments"
    STATUS = "status"


class FinalizableArea(str, Enum):
    LOCATIONS = "locations"
    ROLES = "roles"
    TEAM = "team"
    TALENT = "talent"
    ASSIGNMENTS = "assignments"


# Enum members are declared in progression order; the last one is maximal.
CATEGORY_ENUMS: dict[str, type[Enum]] = {
    "locations_status": LocationsStatus,
    "roles_status": RolesStatus,
    "team_status": TeamStatus,
    "talent_status": TalentStatus,
    "assignments_status": AssignmentsStatus,
}


def status_rank(status: Enum) -> int:
    """Position of a status within its own progression (0 = minimal)."""
    return list(type(status)).index(status)


# =============================================================================
# Readiness record
# =============================================================================


class CategoryStatuses(BaseModel):
    """The five per-category statuses that the overall status rolls up."""

    locations_status: LocationsStatus = LocationsStatus.DEFAULT_ONLY
    roles_status: RolesStatus = RolesStatus.DEFAULT_ONLY
    team_status: TeamStatus = TeamStatus.NONE
    talent_status: TalentStatus = TalentStatus.NONE
    assignments_status: AssignmentsStatus = AssignmentsStatus.NONE


class ReadinessCounts(BaseModel):
    """Raw counts behind the category statuses."""

    location_count: int = Field(default=0, ge=0)
    custom_location_count: int = Field(default=0, ge=0)
    role_template_count: int = Field(default=0, ge=0)
    custom_role_count: int = Field(default=0, ge=0)
    staff_assigned: int = Field(default=0, ge=0)
    supervisor_count: int = Field(default=0, ge=0)
    coordinator_count: int = Field(default=0, ge=0)
    escort_count: int = Field(default=0, ge=0)
    talent_count: int = Field(default=0, ge=0, description="Individual talent plus groups")


class AssignmentGap(BaseModel):
    """A project day with talent entities that have no escort."""

    day: date
    missing_assignments: int = Field(..., ge=1)
    days_from_now: int = Field(..., ge=1)


class AssignmentProgress(BaseModel):
    """Daily escort assignment progress across the project window."""

    total_entities: int = Field(default=0, ge=0)
    project_days: int = Field(default=0, ge=0)
    total_possible: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    assignment_rate: int = Field(default=0, ge=0, le=100, description="Rounded percent filled")
    urgent_issues: int = Field(default=0, ge=0, description="Entities without an escort tomorrow")
    upcoming_gaps: list[AssignmentGap] = Field(default_factory=list)


class TodoItem(BaseModel):
    """An actionable step shown next to the readiness summary."""

    id: str
    area: Literal["locations", "roles", "team", "talent", "assignments"]
    priority: Literal["critical", "important", "optional"]
    title: str
    description: str
    action_route: str


class FeatureAvailability(BaseModel):
    """Whether one gated feature is unlocked, and how to unlock it if not."""

    available: bool
    requirement: str
    guidance: str | None = None
    action_route: str | None = None


class ReadinessRecord(CategoryStatuses):
    """Persisted aggregator output, one per project."""

    project_id: UUID
    project_status: str | None = None

    overall_status: OverallStatus = OverallStatus.GETTING_STARTED
    blocking_issues: list[str] = Field(default_factory=list)
    available_features: list[str] = Field(
        default_factory=list, description="Unlocked feature names (sorted, unique)"
    )

    todo_items: list[TodoItem] = Field(default_factory=list)
    feature_availability: dict[str, FeatureAvailability] = Field(default_factory=dict)
    assignment_progress: AssignmentProgress = Field(default_factory=AssignmentProgress)
    counts: ReadinessCounts = Field(default_factory=ReadinessCounts)

    snapshot_taken_at: datetime = Field(..., description="When the source reads began")
    last_updated: datetime = Field(..., description="When the computation finished")
    optimistic: bool = Field(
        default=False, description="True when category statuses include an unconfirmed local guess"
    )

    @property
    def statuses(self) -> CategoryStatuses:
        return CategoryStatuses(**{name: getattr(self, name) for name in CATEGORY_ENUMS})

    def to_row(self) -> dict[str, Any]:
        """Flatten to the project_readiness table layout."""
        data = self.model_dump(mode="json", exclude={"optimistic"})
        details = {
            key: data.pop(key)
            for key in ("todo_items", "feature_availability", "assignment_progress", "counts")
        }
        data["details"] = details
        return data

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ReadinessRecord":
        data = {k: v for k, v in row.items() if k not in ("details", "created_at", "updated_at")}
        data.update(row.get("details") or {})
        return cls.model_validate(data)


class OptimisticState(BaseModel):
    """A caller's in-memory guess of new category statuses after a mutation."""

    locations_status: LocationsStatus | None = None
    roles_status: RolesStatus | None = None
    team_status: TeamStatus | None = None
    talent_status: TalentStatus | None = None
    assignments_status: AssignmentsStatus | None = None

    def overrides(self) -> dict[str, Enum]:
        return {k: v for k, v in self if v is not None}
