"""CRUD helpers for the append-only sync log."""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from leadsync.repositories.models.sync_logs_model import SyncLog
from leadsync.repositories.schemas.sync_logs_schema import SyncLogCreate


class CRUDSyncLog:
    """Database access for sync log entries. Entries are only ever inserted."""

    def append(self, db: Session, entry: SyncLogCreate) -> SyncLog:
        log = SyncLog(**entry.model_dump(mode="json", exclude={"last_sync_at"}))
        log.last_sync_at = entry.last_sync_at
        db.add(log)
        db.commit()
        db.refresh(log)
        return log

    def latest(
        self, db: Session, sync_type: str, statuses: Iterable[str]
    ) -> Optional[SyncLog]:
        """Return the most recent entry of ``sync_type`` with one of ``statuses``."""
        return (
            db.query(SyncLog)
            .filter(SyncLog.sync_type == sync_type, SyncLog.status.in_(list(statuses)))
            .order_by(SyncLog.last_sync_at.desc(), SyncLog.id.desc())
            .first()
        )

    def history(self, db: Session, sync_type: str, limit: int = 20) -> List[SyncLog]:
        return (
            db.query(SyncLog)
            .filter(SyncLog.sync_type == sync_type)
            .order_by(SyncLog.last_sync_at.desc(), SyncLog.id.desc())
            .limit(limit)
            .all()
        )
