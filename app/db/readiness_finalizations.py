"""Readiness finalization flags database operations.

Finalization is an explicit close-out of one setup area. The flags are an
input to readiness, never written by the aggregator.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from supabase import Client

from app.core.logging import get_logger

logger = get_logger(__name__)

FINALIZABLE_AREAS = ("locations", "roles", "team", "talent", "assignments")


def get_finalizations(supabase: Client, project_id: UUID) -> dict[str, Any] | None:
    """
    Get the finalization flags for a project.

    Returns:
        Row with <area>_finalized / _finalized_at / _finalized_by columns,
        or None if no area was ever finalized
    """
    try:
        response = (
            supabase.table("project_readiness_finalizations")
            .select("*")
            .eq("project_id", str(project_id))
            .execute()
        )
        return response.data[0] if response.data else None

    except Exception as e:
        logger.error(f"Failed to get finalizations for project {project_id}: {e}")
        raise


def set_finalization(
    supabase: Client,
    project_id: UUID,
    area: str,
    finalized: bool,
    finalized_by: UUID | None = None,
) -> dict[str, Any]:
    """
    Finalize or unfinalize one area.

    Args:
        supabase: Supabase client
        project_id: Project UUID
        area: One of FINALIZABLE_AREAS
        finalized: True to finalize, False to clear
        finalized_by: Profile UUID of the user finalizing (optional)

    Returns:
        Upserted finalization row
    """
    if area not in FINALIZABLE_AREAS:
        raise ValueError(f"Unknown finalization area: {area}")

    now = datetime.now(UTC).isoformat()
    data = {
        "project_id": str(project_id),
        f"{area}_finalized": finalized,
        f"{area}_finalized_at": now if finalized else None,
        f"{area}_finalized_by": str(finalized_by) if finalized and finalized_by else None,
        "updated_at": now,
    }

    try:
        response = (
            supabase.table("project_readiness_finalizations")
            .upsert(data, on_conflict="project_id")
            .execute()
        )

        if not response.data:
            raise RuntimeError("Failed to upsert finalization")

        logger.info(
            f"{'Finalized' if finalized else 'Unfinalized'} {area} for project {project_id}",
            extra={"project_id": str(project_id), "area": area},
        )
        return response.data[0]

    except Exception as e:
        logger.error(f"Failed to set {area} finalization for project {project_id}: {e}")
        raise
