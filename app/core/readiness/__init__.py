"""Project readiness engine.

Rolls up the configuration state of locations, role templates, team,
talent roster and daily escort assignments into a single readiness verdict:
per-category statuses, an overall status, blocking issues and unlocked
features.

Usage:
    from app.core.readiness import compute_readiness

    record = compute_readiness(project_id, sources, timeout=10.0)
    print(record.overall_status, record.blocking_issues)
"""

from app.core.readiness.errors import (
    ComputationInvariantError,
    FinalizationError,
    NotFoundError,
    ReadinessError,
    ReadinessTimeoutError,
    StaleWriteError,
    TransientReadError,
)
from app.core.readiness.score import compute_readiness, readiness_from_snapshot
from app.core.readiness.snapshot import ConfigurationSnapshot, ConfigurationSources
from app.core.readiness.types import (
    AssignmentsStatus,
    ChangeKind,
    FinalizableArea,
    LocationsStatus,
    OptimisticState,
    OverallStatus,
    ReadinessRecord,
    RolesStatus,
    TalentStatus,
    TeamStatus,
)

__all__ = [
    "compute_readiness",
    "readiness_from_snapshot",
    "ConfigurationSnapshot",
    "ConfigurationSources",
    "ReadinessRecord",
    "OptimisticState",
    "ChangeKind",
    "FinalizableArea",
    "LocationsStatus",
    "RolesStatus",
    "TeamStatus",
    "TalentStatus",
    "AssignmentsStatus",
    "OverallStatus",
    "ReadinessError",
    "TransientReadError",
    "ReadinessTimeoutError",
    "NotFoundError",
    "StaleWriteError",
    "ComputationInvariantError",
    "FinalizationError",
]
