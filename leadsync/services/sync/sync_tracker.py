"""Per-channel sync watermarks backed by the append-only sync log."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from leadsync.configs import settings
from leadsync.models.lead_enums import SyncChannel, SyncStatus, SyncTrigger
from leadsync.repositories.crud.sync_logs_crud import CRUDSyncLog
from leadsync.repositories.models.sync_logs_model import SyncLog
from leadsync.repositories.schemas.sync_logs_schema import SyncLogCreate
from leadsync.services.leads.identity_resolver import ResolutionCounts

logger = logging.getLogger(__name__)

# Statuses whose timestamp may be used as the next window start.
WATERMARK_STATUSES = (SyncStatus.SUCCESS.value, SyncStatus.PARTIAL.value)

MAX_MONTHS = 12
_DAYS_PER_MONTH = 30


@dataclass
class RunOutcome:
    """What one channel run achieved."""

    counts: ResolutionCounts
    trigger: SyncTrigger = SyncTrigger.AUTO
    upstream_errors: int = 0
    upstream_calls: int = 0
    aborted: bool = False
    error_message: Optional[str] = None

    @property
    def status(self) -> SyncStatus:
        if self.aborted:
            return SyncStatus.FAILED
        if self.upstream_calls and self.upstream_errors == self.upstream_calls:
            return SyncStatus.FAILED
        if self.counts.failed or self.upstream_errors:
            return SyncStatus.PARTIAL
        return SyncStatus.SUCCESS


@dataclass(frozen=True)
class FetchWindow:
    """Request window sent to the reporting API."""

    months: Optional[int] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None


class SyncTracker:
    """Reads and appends sync log entries for every channel."""

    def __init__(
        self,
        repository: CRUDSyncLog,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.clock = clock

    def window_start(self, db: Session, channel: SyncChannel) -> Optional[datetime]:
        """Return the watermark of ``channel``: the last successful or partial run."""
        entry = self.repository.latest(db, channel.value, WATERMARK_STATUSES)
        return entry.last_sync_at if entry else None

    def commit(self, db: Session, channel: SyncChannel, outcome: RunOutcome) -> SyncLog:
        """
        Append the log entry for a finished run.

        A failed run is recorded too, but it never becomes a watermark, so the next
        run fetches the window the failed run missed.
        """
        status = outcome.status
        entry = SyncLogCreate(
            sync_type=channel,
            trigger=outcome.trigger,
            last_sync_at=self.clock(),
            last_sync_count=outcome.counts.written,
            created_count=outcome.counts.created,
            updated_count=outcome.counts.updated,
            skipped_count=outcome.counts.skipped,
            failed_count=outcome.counts.failed,
            status=status,
            error_message=outcome.error_message,
        )
        log = self.repository.append(db, entry)
        logger.info(
            "Sync %s finished with status %s: %s created, %s updated, %s skipped, %s failed",
            channel.value,
            status.value,
            outcome.counts.created,
            outcome.counts.updated,
            outcome.counts.skipped,
            outcome.counts.failed,
        )
        return log

    def fetch_window(self, db: Session, channel: SyncChannel) -> FetchWindow:
        """
        Derive the upstream request window of ``channel``.

        Explicit dates or months from the configuration win. Otherwise the window
        covers every started month since the watermark, clamped to 1..12, so
        recent records are fetched again and late arrivals are caught. Without a
        watermark the default look-back applies.
        """
        if settings.SYNC_DATE_FROM or settings.SYNC_DATE_TO:
            return FetchWindow(
                date_from=settings.SYNC_DATE_FROM, date_to=settings.SYNC_DATE_TO
            )
        if settings.SYNC_MONTHS:
            return FetchWindow(months=settings.SYNC_MONTHS)

        start = self.window_start(db, channel)
        if start is None:
            return FetchWindow(months=settings.SYNC_DEFAULT_MONTHS)
        elapsed_days = (self.clock() - start).days
        months = min(MAX_MONTHS, max(1, math.ceil(elapsed_days / _DAYS_PER_MONTH)))
        return FetchWindow(months=months)

    def history(self, db: Session, channel: SyncChannel, limit: int = 20) -> List[SyncLog]:
        return self.repository.history(db, channel.value, limit)


def get_sync_tracker(repository: CRUDSyncLog = Depends()) -> SyncTracker:
    return SyncTracker(repository)
