"""Team assignments database operations."""

from typing import Any
from uuid import UUID

from supabase import Client

from app.core.logging import get_logger
from app.db.supabase_client import select_all

logger = get_logger(__name__)


def list_team_assignments(supabase: Client, project_id: UUID) -> list[dict[str, Any]]:
    """
    List staff assigned to a project.

    Returns:
        Rows with id, user_id and role (supervisor, coordinator, talent_escort)
    """
    try:
        return select_all(
            lambda: supabase.table("team_assignments")
            .select("id, user_id, role")
            .eq("project_id", str(project_id))
            .order("id")
        )
    except Exception as e:
        logger.error(f"Failed to list team assignments for project {project_id}: {e}")
        raise
