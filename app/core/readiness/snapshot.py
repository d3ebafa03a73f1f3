"""Configuration snapshot: the typed read boundary of the readiness engine.

All configuration sources for one project are read concurrently under a single
timeout, then mapped exhaustively into a ``ConfigurationSnapshot``. The
aggregator only ever sees this value type, never raw rows.
"""

import concurrent.futures
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any, Protocol
from uuid import UUID

from app.core.logging import get_logger
from app.core.readiness.errors import (
    ComputationInvariantError,
    NotFoundError,
    ReadinessTimeoutError,
    TransientReadError,
)

logger = get_logger(__name__)

SUPERVISOR_ROLES = {"supervisor"}
COORDINATOR_ROLES = {"coordinator"}
ESCORT_ROLES = {"talent_escort", "escort"}


class ConfigurationSources(Protocol):
    """Read interface to every configuration source, scoped by project id.

    Each list method returns an empty list (never an error) when the project has
    no rows. Connection failures propagate as exceptions.
    """

    def get_project(self, project_id: UUID) -> dict[str, Any] | None: ...

    def list_locations(self, project_id: UUID) -> list[dict[str, Any]]: ...

    def list_role_templates(self, project_id: UUID) -> list[dict[str, Any]]: ...

    def list_team_assignments(self, project_id: UUID) -> list[dict[str, Any]]: ...

    def list_talent(self, project_id: UUID) -> list[dict[str, Any]]: ...

    def list_talent_groups(self, project_id: UUID) -> list[dict[str, Any]]: ...

    def list_talent_daily_assignments(self, project_id: UUID) -> list[dict[str, Any]]: ...

    def list_group_daily_assignments(self, project_id: UUID) -> list[dict[str, Any]]: ...

    def get_finalizations(self, project_id: UUID) -> dict[str, Any] | None: ...


# Result key -> ConfigurationSources method name
SOURCE_READS = {
    "project": "get_project",
    "locations": "list_locations",
    "role_templates": "list_role_templates",
    "team_assignments": "list_team_assignments",
    "talent": "list_talent",
    "talent_groups": "list_talent_groups",
    "talent_daily": "list_talent_daily_assignments",
    "group_daily": "list_group_daily_assignments",
    "finalizations": "get_finalizations",
}


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Counts and flags read from all configuration sources at one instant."""

    project_id: UUID
    taken_at: datetime
    as_of: date
    project_status: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    location_count: int = 0
    custom_location_count: int = 0
    locations_finalized: bool = False

    role_template_count: int = 0
    custom_role_count: int = 0
    roles_finalized: bool = False

    staff_assigned_count: int = 0
    supervisor_count: int = 0
    coordinator_count: int = 0
    escort_count: int = 0
    team_finalized: bool = False

    talent_count: int = 0
    talent_finalized: bool = False

    project_days: int = 0
    completed_daily_assignments: int = 0
    assignments_finalized: bool = False
    # Entities with an escort, per project day
    escorted_by_day: dict[date, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        counts = {
            "location_count": self.location_count,
            "custom_location_count": self.custom_location_count,
            "role_template_count": self.role_template_count,
            "custom_role_count": self.custom_role_count,
            "staff_assigned_count": self.staff_assigned_count,
            "supervisor_count": self.supervisor_count,
            "coordinator_count": self.coordinator_count,
            "escort_count": self.escort_count,
            "talent_count": self.talent_count,
            "project_days": self.project_days,
            "completed_daily_assignments": self.completed_daily_assignments,
        }
        negative = [name for name, value in counts.items() if value < 0]
        if negative:
            raise ComputationInvariantError(f"Negative counts in snapshot: {', '.join(negative)}")

        if self.custom_location_count > self.location_count:
            raise ComputationInvariantError("More custom locations than locations")
        if self.custom_role_count > self.role_template_count:
            raise ComputationInvariantError("More custom roles than role templates")
        if self.supervisor_count + self.coordinator_count + self.escort_count > self.staff_assigned_count:
            raise ComputationInvariantError("Role breakdown exceeds staff assigned")
        if self.completed_daily_assignments > self.total_possible_daily_assignments:
            raise ComputationInvariantError(
                f"Completed daily assignments ({self.completed_daily_assignments}) exceed "
                f"possible ({self.total_possible_daily_assignments})"
            )
        if any(n > self.talent_count for n in self.escorted_by_day.values()):
            raise ComputationInvariantError("More escorted entities on a day than talent entities")

    @property
    def has_only_default_locations(self) -> bool:
        return self.custom_location_count == 0

    @property
    def has_only_default_roles(self) -> bool:
        return self.custom_role_count == 0

    @property
    def total_possible_daily_assignments(self) -> int:
        return self.talent_count * self.project_days

    def day_in_project(self, day: date) -> bool:
        if self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= day <= self.end_date


def fetch_configuration_snapshot(
    project_id: UUID,
    sources: ConfigurationSources,
    *,
    timeout: float,
    max_workers: int = 6,
    clock: Callable[[], datetime] | None = None,
) -> ConfigurationSnapshot:
    """
    Read every configuration source for a project and build a snapshot.

    Reads run in parallel and are joined before anything is derived. One
    timeout covers all reads combined.

    Args:
        project_id: Project UUID
        sources: Configuration source reader
        timeout: Seconds allowed for all reads together
        max_workers: Thread pool size
        clock: Returns the current UTC time (for tests)

    Returns:
        ConfigurationSnapshot

    Raises:
        TransientReadError: If any read fails
        ReadinessTimeoutError: If the reads do not finish within ``timeout``
        NotFoundError: If the project does not exist
    """
    taken_at = (clock or _utcnow)()
    results: dict[str, Any] = {}

    executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers)
    try:
        futures = {
            executor.submit(getattr(sources, method), project_id): key
            for key, method in SOURCE_READS.items()
        }
        try:
            for future in concurrent.futures.as_completed(futures, timeout=timeout):
                key = futures[future]
                try:
                    results[key] = future.result()
                except Exception as e:
                    logger.warning(f"Configuration source read failed for {project_id}: {key}: {e}")
                    raise TransientReadError(key, str(e)) from e
        except concurrent.futures.TimeoutError as e:
            pending = [key for key in SOURCE_READS if key not in results]
            logger.warning(
                f"Snapshot reads timed out for {project_id} after {timeout}s, pending={pending}"
            )
            raise ReadinessTimeoutError(timeout, pending) from e
    finally:
        # Abandon stragglers; a partial snapshot is never used
        executor.shutdown(wait=False, cancel_futures=True)

    if results["project"] is None:
        raise NotFoundError(project_id)

    return build_snapshot(project_id, results, taken_at=taken_at)


def build_snapshot(
    project_id: UUID,
    results: dict[str, Any],
    *,
    taken_at: datetime,
) -> ConfigurationSnapshot:
    """Map raw source rows into a ConfigurationSnapshot."""
    project = results["project"] or {}
    finalizations = results.get("finalizations") or {}

    start_date = _parse_date(project.get("start_date"))
    end_date = _parse_date(project.get("end_date"))
    project_days = 0
    if start_date and end_date and end_date >= start_date:
        project_days = (end_date - start_date).days + 1

    locations = results.get("locations") or []
    role_templates = results.get("role_templates") or []
    team = results.get("team_assignments") or []
    talent = results.get("talent") or []
    groups = results.get("talent_groups") or []

    roles = [row.get("role") for row in team]

    # A group's roster row reuses the group id as talent_id, so entities are
    # the union of both id sets
    roster_ids = {str(row["talent_id"]) for row in talent if row.get("talent_id") is not None}
    roster_ids |= {str(row["id"]) for row in groups if row.get("id") is not None}

    # Distinct (entity, day) pairs with an escort, for rostered entities inside
    # the project window
    escorted: set[tuple[str, date]] = set()
    for key, rows in (
        ("talent_id", results.get("talent_daily") or []),
        ("group_id", results.get("group_daily") or []),
    ):
        for row in rows:
            if row.get("escort_id") is None:
                continue
            entity_id = row.get(key)
            if entity_id is None or str(entity_id) not in roster_ids:
                continue
            day = _parse_date(row.get("assignment_date"))
            if day is None or not (start_date and end_date and start_date <= day <= end_date):
                continue
            escorted.add((str(entity_id), day))

    escorted_by_day: dict[date, int] = {}
    for _, day in escorted:
        escorted_by_day[day] = escorted_by_day.get(day, 0) + 1

    return ConfigurationSnapshot(
        project_id=project_id,
        taken_at=taken_at,
        as_of=taken_at.date(),
        project_status=project.get("status"),
        start_date=start_date,
        end_date=end_date,
        location_count=len(locations),
        custom_location_count=sum(1 for row in locations if not row.get("is_default")),
        locations_finalized=bool(finalizations.get("locations_finalized")),
        role_template_count=len(role_templates),
        custom_role_count=sum(1 for row in role_templates if not row.get("is_default")),
        roles_finalized=bool(finalizations.get("roles_finalized")),
        staff_assigned_count=len(team),
        supervisor_count=sum(1 for role in roles if role in SUPERVISOR_ROLES),
        coordinator_count=sum(1 for role in roles if role in COORDINATOR_ROLES),
        escort_count=sum(1 for role in roles if role in ESCORT_ROLES),
        team_finalized=bool(finalizations.get("team_finalized")),
        talent_count=len(roster_ids),
        talent_finalized=bool(finalizations.get("talent_finalized")),
        project_days=project_days,
        completed_daily_assignments=len(escorted),
        assignments_finalized=bool(finalizations.get("assignments_finalized")),
        escorted_by_day=escorted_by_day,
    )


def lookahead_days(snapshot: ConfigurationSnapshot, days: int) -> list[tuple[int, date]]:
    """Upcoming project days (1..days from ``as_of``) inside the project window."""
    upcoming = []
    for offset in range(1, days + 1):
        day = snapshot.as_of + timedelta(days=offset)
        if snapshot.day_in_project(day):
            upcoming.append((offset, day))
    return upcoming


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ComputationInvariantError(f"Unparseable date in configuration source: {value!r}") from e


def _utcnow() -> datetime:
    return datetime.now(UTC)
