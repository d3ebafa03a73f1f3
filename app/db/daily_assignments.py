"""Daily escort assignment database operations.

Each row links one talent (or talent group) to an escort for one date.
Only rows with an escort count toward readiness.
"""

from typing import Any
from uuid import UUID

from supabase import Client

from app.core.logging import get_logger
from app.db.supabase_client import select_all

logger = get_logger(__name__)


def list_talent_daily_assignments(supabase: Client, project_id: UUID) -> list[dict[str, Any]]:
    """List escorted daily assignments for individual talent."""
    try:
        return select_all(
            lambda: supabase.table("talent_daily_assignments")
            .select("id, talent_id, assignment_date, escort_id")
            .eq("project_id", str(project_id))
            .not_.is_("escort_id", "null")
            .order("id")
        )
    except Exception as e:
        logger.error(f"Failed to list talent daily assignments for project {project_id}: {e}")
        raise


def list_group_daily_assignments(supabase: Client, project_id: UUID) -> list[dict[str, Any]]:
    """List escorted daily assignments for talent groups."""
    try:
        return select_all(
            lambda: supabase.table("group_daily_assignments")
            .select("id, group_id, assignment_date, escort_id")
            .eq("project_id", str(project_id))
            .not_.is_("escort_id", "null")
            .order("id")
        )
    except Exception as e:
        logger.error(f"Failed to list group daily assignments for project {project_id}: {e}")
        raise
