"""Error taxonomy for the readiness engine."""

from uuid import UUID


class ReadinessError(Exception):
    """Base class for readiness engine errors."""


class TransientReadError(ReadinessError):
    """A configuration source read failed (network, connection, timeout).

    Never converted into zero counts: a failed read must not downgrade readiness.
    """

    def __init__(self, source: str, message: str):
        super().__init__(f"Failed to read {source}: {message}")
        self.source = source


class ReadinessTimeoutError(TransientReadError):
    """The combined timeout across all snapshot reads elapsed."""

    def __init__(self, timeout: float, pending: list[str]):
        super().__init__(
            ", ".join(sorted(pending)) or "configuration sources",
            f"timed out after {timeout:.1f}s",
        )
        self.timeout = timeout
        self.pending = pending


class NotFoundError(ReadinessError):
    """The requested project does not exist."""

    def __init__(self, project_id: UUID):
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id


class StaleWriteError(ReadinessError):
    """A recomputation result is older than the stored record."""


class ComputationInvariantError(ReadinessError):
    """A snapshot or derived value violates the data model."""


class FinalizationError(ReadinessError):
    """An area cannot be finalized in its current state."""
