"""Main readiness computation.

This module orchestrates the readiness aggregation by:
1. Reading a configuration snapshot for the project
2. Deriving the five category statuses
3. Rolling them up into the overall status
4. Deriving blocking issues, todo items and feature gates
"""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from app.core.logging import get_logger
from app.core.readiness.features import available_feature_names, derive_feature_availability
from app.core.readiness.issues import derive_blocking_issues, derive_todo_items
from app.core.readiness.snapshot import (
    ConfigurationSnapshot,
    ConfigurationSources,
    fetch_configuration_snapshot,
)
from app.core.readiness.statuses import (
    build_assignment_progress,
    derive_category_statuses,
    roll_up,
)
from app.core.readiness.types import (
    AssignmentProgress,
    CategoryStatuses,
    ReadinessCounts,
    ReadinessRecord,
)

logger = get_logger(__name__)


def compute_readiness(
    project_id: UUID,
    sources: ConfigurationSources,
    *,
    timeout: float = 10.0,
    max_workers: int = 6,
    lookahead: int = 3,
    clock: Callable[[], datetime] | None = None,
) -> ReadinessRecord:
    """
    Compute the readiness record for a project from current configuration.

    Always reads fresh state; never substitutes zero counts for a failed read.

    Args:
        project_id: Project UUID
        sources: Configuration source reader
        timeout: Seconds allowed for all snapshot reads together
        max_workers: Thread pool size for the reads
        lookahead: Days ahead scanned for escort gaps
        clock: Returns the current UTC time (for tests)

    Returns:
        Fully populated ReadinessRecord

    Raises:
        TransientReadError: If a source read fails or times out
        NotFoundError: If the project does not exist
        ComputationInvariantError: If the snapshot violates the data model
    """
    clock = clock or _utcnow
    logger.debug(f"Computing readiness for project {project_id}")

    snapshot = fetch_configuration_snapshot(
        project_id, sources, timeout=timeout, max_workers=max_workers, clock=clock
    )
    record = readiness_from_snapshot(snapshot, lookahead=lookahead, now=clock())

    logger.info(
        f"Computed readiness for project {project_id}: {record.overall_status.value}",
        extra={
            "project_id": str(project_id),
            "overall_status": record.overall_status.value,
            "blocking_issues": len(record.blocking_issues),
        },
    )
    return record


def readiness_from_snapshot(
    snapshot: ConfigurationSnapshot,
    *,
    lookahead: int = 3,
    now: datetime | None = None,
) -> ReadinessRecord:
    """Pure derivation of a ReadinessRecord from one snapshot."""
    statuses = derive_category_statuses(snapshot)
    progress = build_assignment_progress(snapshot, lookahead)
    counts = ReadinessCounts(
        location_count=snapshot.location_count,
        custom_location_count=snapshot.custom_location_count,
        role_template_count=snapshot.role_template_count,
        custom_role_count=snapshot.custom_role_count,
        staff_assigned=snapshot.staff_assigned_count,
        supervisor_count=snapshot.supervisor_count,
        coordinator_count=snapshot.coordinator_count,
        escort_count=snapshot.escort_count,
        talent_count=snapshot.talent_count,
    )

    return build_record(
        snapshot.project_id,
        statuses,
        counts,
        progress,
        project_status=snapshot.project_status,
        snapshot_taken_at=snapshot.taken_at,
        last_updated=now or _utcnow(),
    )


def build_record(
    project_id: UUID,
    statuses: CategoryStatuses,
    counts: ReadinessCounts,
    progress: AssignmentProgress,
    *,
    project_status: str | None,
    snapshot_taken_at: datetime,
    last_updated: datetime,
    optimistic: bool = False,
) -> ReadinessRecord:
    """Assemble a record; everything but the category statuses is derived here."""
    overall = roll_up(statuses)
    features = derive_feature_availability(statuses, overall, counts)

    return ReadinessRecord(
        project_id=project_id,
        project_status=project_status,
        **statuses.model_dump(),
        overall_status=overall,
        blocking_issues=derive_blocking_issues(statuses, progress),
        available_features=available_feature_names(features),
        todo_items=derive_todo_items(statuses, counts, progress),
        feature_availability=features,
        assignment_progress=progress,
        counts=counts,
        snapshot_taken_at=snapshot_taken_at,
        last_updated=last_updated,
        optimistic=optimistic,
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)
