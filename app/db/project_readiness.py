"""Readiness store: one persisted readiness record per project."""

from typing import Protocol
from uuid import UUID

from supabase import Client

from app.core.logging import get_logger
from app.core.readiness.errors import StaleWriteError
from app.core.readiness.types import ReadinessRecord

logger = get_logger(__name__)

TABLE = "project_readiness"


class ReadinessStore(Protocol):
    def get(self, project_id: UUID) -> ReadinessRecord | None: ...

    def upsert(self, record: ReadinessRecord) -> ReadinessRecord: ...


class SupabaseReadinessStore:
    """
    Readiness records in the ``project_readiness`` table.

    Writes are last-write-wins keyed by ``snapshot_taken_at``: a record whose
    snapshot is older than the stored one is refused with StaleWriteError.
    Each row is written whole, so it always reflects exactly one snapshot.
    """

    def __init__(self, supabase: Client):
        self._supabase = supabase

    def get(self, project_id: UUID) -> ReadinessRecord | None:
        try:
            response = (
                self._supabase.table(TABLE)
                .select("*")
                .eq("project_id", str(project_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to get readiness for project {project_id}: {e}")
            raise

        return ReadinessRecord.from_row(response.data[0]) if response.data else None

    def upsert(self, record: ReadinessRecord) -> ReadinessRecord:
        """
        Store a record unless a newer snapshot is already stored.

        Raises:
            StaleWriteError: If the stored record comes from a newer snapshot
        """
        row = record.to_row()
        project_id = record.project_id

        stored = self._update_if_newer(row)
        if stored is not None:
            return stored

        if self.get(project_id) is not None:
            raise StaleWriteError(
                f"Readiness for project {project_id} already reflects a newer snapshot"
            )

        try:
            response = self._supabase.table(TABLE).insert(row).execute()
        except Exception as insert_error:
            # Lost an insert race; the winner's row now exists
            stored = self._update_if_newer(row)
            if stored is not None:
                return stored
            if self.get(project_id) is not None:
                raise StaleWriteError(
                    f"Readiness for project {project_id} already reflects a newer snapshot"
                ) from insert_error
            logger.error(f"Failed to insert readiness for project {project_id}: {insert_error}")
            raise

        if not response.data:
            raise RuntimeError(f"Failed to insert readiness for project {project_id}")

        logger.info(f"Created readiness record for project {project_id}")
        return ReadinessRecord.from_row(response.data[0])

    def _update_if_newer(self, row: dict) -> ReadinessRecord | None:
        try:
            response = (
                self._supabase.table(TABLE)
                .update(row)
                .eq("project_id", row["project_id"])
                .lte("snapshot_taken_at", row["snapshot_taken_at"])
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update readiness for project {row['project_id']}: {e}")
            raise

        return ReadinessRecord.from_row(response.data[0]) if response.data else None
