"""Apply a caller's optimistic status guess on top of a stored record."""

from datetime import datetime

from app.core.readiness.score import build_record
from app.core.readiness.types import CategoryStatuses, OptimisticState, ReadinessRecord


def apply_optimistic(
    record: ReadinessRecord, guess: OptimisticState, *, issued_at: datetime
) -> ReadinessRecord:
    """
    Overlay guessed category statuses and re-derive everything downstream.

    The overall status, issues and features are recomputed from the merged
    statuses so the roll-up stays consistent. Counts and assignment progress
    come from the stored record.
    """
    merged = CategoryStatuses(**{**record.statuses.model_dump(), **guess.overrides()})
    return build_record(
        record.project_id,
        merged,
        record.counts,
        record.assignment_progress,
        project_status=record.project_status,
        snapshot_taken_at=record.snapshot_taken_at,
        last_updated=issued_at,
        optimistic=True,
    )
