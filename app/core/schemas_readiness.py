"""Pydantic schemas for readiness API requests and responses."""

from uuid import UUID

from pydantic import BaseModel, Field

from app.core.readiness.types import ChangeKind, FinalizableArea, OptimisticState, ReadinessRecord


class InvalidateRequest(BaseModel):
    """Request body sent by a mutation handler after a successful commit."""

    change_kind: ChangeKind = Field(..., description="Which configuration source changed")
    optimistic_state: OptimisticState | None = Field(
        None, description="Guessed statuses to serve until the recomputation lands"
    )


class FinalizeRequest(BaseModel):
    """Request body for finalizing one setup area."""

    area: FinalizableArea = Field(..., description="Area to finalize")
    finalized_by: UUID | None = Field(None, description="Profile UUID of the finalizing user")


class FinalizeResponse(BaseModel):
    data: ReadinessRecord
    message: str


class FeatureGateResponse(BaseModel):
    """Unlocked features; empty and degraded when readiness is unavailable."""

    project_id: UUID
    available_features: list[str] = Field(default_factory=list)
    degraded: bool = Field(False, description="True when no valid readiness record could be read")


class ActivateResponse(BaseModel):
    project_id: UUID
    status: str
    readiness: ReadinessRecord
