"""Project locations database operations."""

from typing import Any
from uuid import UUID

from supabase import Client

from app.core.logging import get_logger
from app.db.supabase_client import select_all

logger = get_logger(__name__)


def list_project_locations(supabase: Client, project_id: UUID) -> list[dict[str, Any]]:
    """
    List a project's talent locations.

    Args:
        supabase: Supabase client
        project_id: Project UUID

    Returns:
        Rows with id and is_default (empty list if none)
    """
    try:
        return select_all(
            lambda: supabase.table("project_locations")
            .select("id, is_default")
            .eq("project_id", str(project_id))
            .order("id")
        )
    except Exception as e:
        logger.error(f"Failed to list locations for project {project_id}: {e}")
        raise
