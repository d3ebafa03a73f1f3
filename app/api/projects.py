"""API endpoints for project lifecycle actions gated by readiness."""

import asyncio
from uuid import UUID

from fastapi import APIRouter, HTTPException

from app.api.readiness import raise_readiness_http_error
from app.core.logging import get_logger
from app.core.readiness import ChangeKind
from app.core.readiness.finalization import incomplete_activation_areas
from app.core.readiness_cache import get_coordinator
from app.core.schemas_readiness import ActivateResponse
from app.db.projects import update_project_status
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

router = APIRouter()


@router.post("/{project_id}/activate", response_model=ActivateResponse)
async def activate_project(project_id: UUID) -> ActivateResponse:
    """
    Move a project from prep to active.

    Readiness is recomputed first; locations, roles, team and talent must
    all be finalized.
    """
    coordinator = get_coordinator()
    try:
        readiness = await asyncio.to_thread(coordinator.force_refresh, project_id)
    except Exception as e:
        raise_readiness_http_error(e, project_id, "check readiness")

    if readiness.project_status != "prep":
        raise HTTPException(
            status_code=400,
            detail=f"Project cannot be activated. Current status: {readiness.project_status}",
        )

    incomplete = incomplete_activation_areas(readiness)
    if incomplete:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Project cannot be activated. Finalize all setup areas first.",
                "incomplete_areas": incomplete,
            },
        )

    try:
        await asyncio.to_thread(update_project_status, get_supabase(), project_id, "active")
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.exception(f"Failed to activate project {project_id}")
        raise HTTPException(status_code=500, detail="Failed to activate project") from e

    record = await asyncio.to_thread(
        coordinator.on_configuration_change, project_id, ChangeKind.STATUS
    )
    logger.info(f"Activated project {project_id}", extra={"project_id": str(project_id)})

    return ActivateResponse(project_id=project_id, status="active", readiness=record or readiness)
