"""API endpoints for project readiness."""

import asyncio
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query

from app.core.logging import get_logger
from app.core.readiness import (
    ComputationInvariantError,
    FinalizableArea,
    FinalizationError,
    NotFoundError,
    ReadinessRecord,
    TransientReadError,
)
from app.core.readiness.finalization import validate_finalization
from app.core.readiness_cache import get_coordinator
from app.core.schemas_readiness import (
    FeatureGateResponse,
    FinalizeRequest,
    FinalizeResponse,
    InvalidateRequest,
)
from app.db.projects import get_project
from app.db.readiness_finalizations import set_finalization
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

router = APIRouter()


def raise_readiness_http_error(e: Exception, project_id: UUID, action: str) -> None:
    """Translate readiness engine errors into HTTP errors."""
    if isinstance(e, HTTPException):
        raise e
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e
    if isinstance(e, FinalizationError):
        raise HTTPException(status_code=400, detail=str(e)) from e
    if isinstance(e, TransientReadError):
        logger.warning(f"Readiness unavailable for project {project_id}: {e}")
        raise HTTPException(
            status_code=503,
            detail="Readiness temporarily unavailable, retry shortly",
        ) from e
    if isinstance(e, ComputationInvariantError):
        logger.error(f"Readiness invariant violated for project {project_id}: {e}")
    else:
        logger.exception(f"Failed to {action} for project {project_id}")
    raise HTTPException(status_code=500, detail=f"Failed to {action}") from e


@router.get("/projects/{project_id}/readiness", response_model=ReadinessRecord)
async def get_project_readiness(
    project_id: UUID,
    force_refresh: bool = Query(False, description="Recompute instead of serving the stored record"),
) -> ReadinessRecord:
    """
    Get the readiness record for a project.

    Serves the stored record; the first read of a project computes it.
    Pass force_refresh=true for a guaranteed-fresh value.
    """
    coordinator = get_coordinator()
    try:
        if force_refresh:
            return await asyncio.to_thread(coordinator.force_refresh, project_id)
        return await asyncio.to_thread(coordinator.get_readiness, project_id)
    except Exception as e:
        raise_readiness_http_error(e, project_id, "get readiness")


@router.post("/projects/{project_id}/readiness/refresh", response_model=ReadinessRecord)
async def refresh_project_readiness(project_id: UUID) -> ReadinessRecord:
    """Recompute readiness synchronously and return the stored result."""
    coordinator = get_coordinator()
    try:
        return await asyncio.to_thread(coordinator.force_refresh, project_id)
    except Exception as e:
        raise_readiness_http_error(e, project_id, "refresh readiness")


@router.post("/projects/{project_id}/readiness/invalidate", response_model=ReadinessRecord)
async def invalidate_project_readiness(
    project_id: UUID,
    body: InvalidateRequest,
    background_tasks: BackgroundTasks,
) -> ReadinessRecord:
    """
    Signal a configuration change.

    With an optimistic_state the guess is returned at once and the
    authoritative recomputation runs after the response. Without one the
    recomputation runs before responding.
    """
    coordinator = get_coordinator()
    try:
        if body.optimistic_state is not None:
            echoed = await asyncio.to_thread(
                coordinator.register_optimistic, project_id, body.optimistic_state
            )
            if echoed is not None:
                background_tasks.add_task(
                    coordinator.on_configuration_change, project_id, body.change_kind
                )
                return echoed

        record = await asyncio.to_thread(
            coordinator.on_configuration_change, project_id, body.change_kind
        )
        if record is None:
            # Folded into a running recompute, or it failed: serve last known
            record = await asyncio.to_thread(coordinator.get_readiness, project_id)
        return record
    except Exception as e:
        raise_readiness_http_error(e, project_id, "invalidate readiness")


@router.post("/projects/{project_id}/readiness/finalize", response_model=FinalizeResponse)
async def finalize_project_area(project_id: UUID, body: FinalizeRequest) -> FinalizeResponse:
    """Mark one setup area as finalized and return the updated readiness."""
    coordinator = get_coordinator()
    try:
        current = await asyncio.to_thread(coordinator.force_refresh, project_id)
        validate_finalization(body.area, current)

        await asyncio.to_thread(
            set_finalization, get_supabase(), project_id, body.area.value, True, body.finalized_by
        )
        record = await asyncio.to_thread(coordinator.force_refresh, project_id)
    except Exception as e:
        raise_readiness_http_error(e, project_id, f"finalize {body.area.value}")

    return FinalizeResponse(data=record, message=f"Project {body.area.value} finalized successfully")


@router.delete(
    "/projects/{project_id}/readiness/finalize/{area}", response_model=FinalizeResponse
)
async def unfinalize_project_area(project_id: UUID, area: FinalizableArea) -> FinalizeResponse:
    """Reopen a finalized setup area."""
    coordinator = get_coordinator()
    supabase = get_supabase()
    try:
        if await asyncio.to_thread(get_project, supabase, project_id) is None:
            raise NotFoundError(project_id)
        await asyncio.to_thread(set_finalization, supabase, project_id, area.value, False)
        record = await asyncio.to_thread(coordinator.force_refresh, project_id)
    except Exception as e:
        raise_readiness_http_error(e, project_id, f"unfinalize {area.value}")

    return FinalizeResponse(data=record, message=f"Project {area.value} unfinalized successfully")


@router.get("/projects/{project_id}/readiness/features", response_model=FeatureGateResponse)
async def get_project_features(project_id: UUID) -> FeatureGateResponse:
    """
    Features unlocked for a project.

    Falls back to no features (degraded) when readiness cannot be obtained.
    """
    coordinator = get_coordinator()
    try:
        record = await asyncio.to_thread(
            coordinator.get_readiness, project_id, include_optimistic=False
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.warning(f"Serving no features for project {project_id}: {e}")
        return FeatureGateResponse(project_id=project_id, degraded=True)

    return FeatureGateResponse(
        project_id=project_id,
        available_features=record.available_features,
    )
