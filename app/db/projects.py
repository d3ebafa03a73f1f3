"""Projects database operations."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from supabase import Client

from app.core.logging import get_logger

logger = get_logger(__name__)


def get_project(supabase: Client, project_id: UUID) -> dict[str, Any] | None:
    """
    Get a project by ID.

    Args:
        supabase: Supabase client
        project_id: Project UUID

    Returns:
        Project row (id, name, status, start_date, end_date) or None if not found
    """
    try:
        response = (
            supabase.table("projects")
            .select("id, name, status, start_date, end_date")
            .eq("id", str(project_id))
            .execute()
        )
        return response.data[0] if response.data else None

    except Exception as e:
        logger.error(f"Failed to get project {project_id}: {e}")
        raise


def update_project_status(supabase: Client, project_id: UUID, status: str) -> dict[str, Any]:
    """
    Set a project's lifecycle status (prep, active, complete).

    Args:
        supabase: Supabase client
        project_id: Project UUID
        status: New status

    Returns:
        Updated project row

    Raises:
        ValueError: If project not found
    """
    try:
        response = (
            supabase.table("projects")
            .update({"status": status, "updated_at": datetime.now(UTC).isoformat()})
            .eq("id", str(project_id))
            .execute()
        )

        if not response.data:
            raise ValueError(f"Project {project_id} not found")

        logger.info(
            f"Set project {project_id} status to {status}",
            extra={"project_id": str(project_id), "status": status},
        )
        return response.data[0]

    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Failed to update status for project {project_id}: {e}")
        raise
