"""Talent roster database operations (individual talent and talent groups)."""

from typing import Any
from uuid import UUID

from supabase import Client

from app.core.logging import get_logger
from app.db.supabase_client import select_all

logger = get_logger(__name__)


def list_talent_assignments(supabase: Client, project_id: UUID) -> list[dict[str, Any]]:
    """List individual talent on a project's roster."""
    try:
        return select_all(
            lambda: supabase.table("talent_project_assignments")
            .select("talent_id")
            .eq("project_id", str(project_id))
            .order("talent_id")
        )
    except Exception as e:
        logger.error(f"Failed to list talent for project {project_id}: {e}")
        raise


def list_talent_groups(supabase: Client, project_id: UUID) -> list[dict[str, Any]]:
    """List talent groups on a project's roster."""
    try:
        return select_all(
            lambda: supabase.table("talent_groups")
            .select("id")
            .eq("project_id", str(project_id))
            .order("id")
        )
    except Exception as e:
        logger.error(f"Failed to list talent groups for project {project_id}: {e}")
        raise
