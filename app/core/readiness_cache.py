"""Readiness invalidation and refresh coordination.

Every configuration source mutation handler calls
``on_configuration_change(project_id, change_kind)`` after its commit. The
coordinator recomputes the project's readiness from full current state and
upserts it into the readiness store.

- Invalidations for a project that arrive while a recomputation is running
  collapse into one trailing recomputation.
- Recomputations for one project are serialized; the store additionally
  refuses results from older snapshots.
- A failed recomputation is logged and the previous record stays in place.
- Callers may register an optimistic guess; it is served on reads until a
  recomputation that started after it finishes.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import lru_cache
from uuid import UUID

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.readiness import compute_readiness
from app.core.readiness.errors import StaleWriteError
from app.core.readiness.optimistic import apply_optimistic
from app.core.readiness.snapshot import ConfigurationSources
from app.core.readiness.types import ChangeKind, OptimisticState, ReadinessRecord
from app.db.project_readiness import ReadinessStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class OptimisticEcho:
    state: OptimisticState
    issued_at: datetime


@dataclass
class _ProjectLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class ReadinessCoordinator:
    """Keeps the readiness store in step with configuration changes."""

    def __init__(
        self,
        sources: ConfigurationSources,
        store: ReadinessStore,
        *,
        timeout: float = 10.0,
        max_workers: int = 6,
        lookahead: int = 3,
        clock: Callable[[], datetime] | None = None,
    ):
        self._sources = sources
        self._store = store
        self._timeout = timeout
        self._max_workers = max_workers
        self._lookahead = lookahead
        self._clock = clock or (lambda: datetime.now(UTC))

        self._state_lock = threading.Lock()
        self._project_locks: dict[UUID, _ProjectLock] = {}
        self._in_flight: set[UUID] = set()
        self._pending: set[UUID] = set()
        self._echoes: dict[UUID, OptimisticEcho] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_readiness(
        self, project_id: UUID, include_optimistic: bool = True
    ) -> ReadinessRecord:
        """
        Serve the stored record, computing synchronously only if none exists.

        Feature gates pass include_optimistic=False so an unconfirmed guess
        never unlocks anything.

        Raises:
            NotFoundError: If the project does not exist
            TransientReadError: If no record exists and the computation fails
        """
        record = self._store.get(project_id)
        if record is None:
            logger.info(f"No readiness record for project {project_id}, computing")
            record = self.force_refresh(project_id)

        if not include_optimistic:
            return record

        with self._state_lock:
            echo = self._echoes.get(project_id)
        if echo is not None and echo.issued_at > record.snapshot_taken_at:
            return apply_optimistic(record, echo.state, issued_at=echo.issued_at)
        return record

    def force_refresh(self, project_id: UUID) -> ReadinessRecord:
        """
        Recompute and store readiness now; errors propagate to the caller.

        Returns:
            The freshly computed record, or the stored one if it is newer
        """
        return self._recompute(project_id)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def register_optimistic(
        self, project_id: UUID, state: OptimisticState
    ) -> ReadinessRecord | None:
        """
        Record a caller's guess of the new statuses.

        Returns:
            The stored record with the guess applied, or None if nothing is stored yet
        """
        echo = OptimisticEcho(state=state, issued_at=self._clock())
        with self._state_lock:
            self._echoes[project_id] = echo

        record = self._store.get(project_id)
        if record is None:
            return None
        return apply_optimistic(record, state, issued_at=echo.issued_at)

    def on_configuration_change(
        self,
        project_id: UUID,
        change_kind: ChangeKind | str,
        optimistic: OptimisticState | None = None,
    ) -> ReadinessRecord | None:
        """
        Recompute readiness after a configuration source mutation.

        Args:
            project_id: Project UUID
            change_kind: Which source changed
            optimistic: Optional guess to serve until the recomputation lands

        Returns:
            The new record; None if the recomputation failed or was folded into
            one already running for this project
        """
        change_kind = ChangeKind(change_kind)
        if optimistic is not None:
            self.register_optimistic(project_id, optimistic)

        with self._state_lock:
            if project_id in self._in_flight:
                self._pending.add(project_id)
                logger.debug(
                    f"Readiness recompute already running for {project_id}, "
                    f"queued {change_kind.value} change"
                )
                return None
            self._in_flight.add(project_id)

        try:
            while True:
                record = self._recompute_logged(project_id, change_kind)
                with self._state_lock:
                    if project_id in self._pending:
                        self._pending.discard(project_id)
                        continue
                    self._in_flight.discard(project_id)
                    return record
        except BaseException:
            with self._state_lock:
                self._in_flight.discard(project_id)
                self._pending.discard(project_id)
            raise

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _recompute_logged(
        self, project_id: UUID, change_kind: ChangeKind
    ) -> ReadinessRecord | None:
        try:
            record = self._recompute(project_id)
        except Exception as e:
            logger.error(
                f"Readiness recompute failed for {project_id} after {change_kind.value} "
                f"change, keeping last record: {e}",
                extra={"project_id": str(project_id), "change_kind": change_kind.value},
            )
            return None

        logger.info(
            f"Refreshed readiness for {project_id} after {change_kind.value} change: "
            f"{record.overall_status.value}",
            extra={"project_id": str(project_id), "change_kind": change_kind.value},
        )
        return record

    def _recompute(self, project_id: UUID) -> ReadinessRecord:
        started_at = self._clock()
        try:
            with self._serialized(project_id):
                record = compute_readiness(
                    project_id,
                    self._sources,
                    timeout=self._timeout,
                    max_workers=self._max_workers,
                    lookahead=self._lookahead,
                    clock=self._clock,
                )
                try:
                    return self._store.upsert(record)
                except StaleWriteError as e:
                    logger.info(f"Discarded stale readiness for {project_id}: {e}")
                    return self._store.get(project_id) or record
        finally:
            self._drop_echo(project_id, started_at)

    @contextmanager
    def _serialized(self, project_id: UUID) -> Iterator[None]:
        """Hold the project's lock; the entry is dropped when no one is using it."""
        with self._state_lock:
            entry = self._project_locks.get(project_id)
            if entry is None:
                entry = self._project_locks[project_id] = _ProjectLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._state_lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._project_locks[project_id]

    def _drop_echo(self, project_id: UUID, before: datetime) -> None:
        with self._state_lock:
            echo = self._echoes.get(project_id)
            if echo is not None and echo.issued_at <= before:
                del self._echoes[project_id]


@lru_cache(maxsize=1)
def get_coordinator() -> ReadinessCoordinator:
    """Process-wide coordinator wired to Supabase (application boundary only)."""
    from app.db.configuration_sources import SupabaseConfigurationSources
    from app.db.project_readiness import SupabaseReadinessStore
    from app.db.supabase_client import get_supabase

    settings = get_settings()
    supabase = get_supabase()
    return ReadinessCoordinator(
        SupabaseConfigurationSources(supabase),
        SupabaseReadinessStore(supabase),
        timeout=settings.READINESS_READ_TIMEOUT_SECONDS,
        max_workers=settings.READINESS_READ_WORKERS,
        lookahead=settings.READINESS_LOOKAHEAD_DAYS,
    )
