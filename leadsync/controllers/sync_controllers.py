"""Trigger sync runs, push spreadsheet rows and read the sync history."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from leadsync.errors import SyncAbortedError, UnknownChannelError
from leadsync.models.lead_enums import SyncChannel, SyncTrigger
from leadsync.models.lead_models import ChannelSummary, IngestRequest, SyncRunSummary
from leadsync.repositories.dependencies import get_db
from leadsync.repositories.schemas.sync_logs_schema import SyncLogResponse
from leadsync.services.sync.csv_import_service import CsvImportService, store_from_parts
from leadsync.services.sync.sync_orchestrator import (
    SyncOrchestrator,
    get_sync_orchestrator,
)
from leadsync.services.sync.sync_tracker import RunOutcome

logger = logging.getLogger(__name__)

sync_router = APIRouter(prefix="/sync", tags=["Sync"])


def to_summary(outcome: RunOutcome) -> ChannelSummary:
    counts = outcome.counts
    return ChannelSummary(
        status=outcome.status,
        created=counts.created,
        updated=counts.updated,
        skipped=counts.skipped,
        failed=counts.failed,
        upstream_errors=outcome.upstream_errors,
        samples=counts.samples,
    )


def _parse_channel(channel: str) -> SyncChannel:
    try:
        return SyncChannel.parse(channel)
    except UnknownChannelError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@sync_router.post(
    "/run",
    responses={
        200: {"model": SyncRunSummary, "description": "Successful Response"},
        503: {"description": "Database unreachable, run aborted"},
    },
)
def run_sync(
    db: Session = Depends(get_db),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SyncRunSummary:
    """Run every channel now. Returns started=False when a run is already in flight."""
    try:
        results = orchestrator.run_all(db, SyncTrigger.MANUAL)
    except SyncAbortedError as e:
        logger.error("Manual sync aborted: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Sync aborted"
        )
    if results is None:
        return SyncRunSummary(started=False)
    return SyncRunSummary(
        started=True,
        channels={channel.value: to_summary(outcome) for channel, outcome in results.items()},
    )


@sync_router.post(
    "/ingest/{channel}",
    responses={
        200: {"model": ChannelSummary, "description": "Successful Response"},
        409: {"description": "Another sync run is in progress"},
    },
)
def ingest_rows(
    channel: str,
    data: IngestRequest,
    db: Session = Depends(get_db),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> ChannelSummary:
    """
    Import walk-in or loss-of-sale spreadsheet rows.

    Args:
        channel (str): ``walkin`` or ``lossofsale``.
        data (IngestRequest): Rows plus the re-import flag and the store override.

    Returns:
        ChannelSummary with the counts of the import.
    """
    sync_channel = _parse_channel(channel)
    store = data.store or store_from_parts(data.brand, data.location)
    try:
        outcome = CsvImportService(orchestrator).import_rows(
            db, sync_channel, data.rows, reimport=data.reimport, store=store
        )
    except UnknownChannelError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except SyncAbortedError as e:
        logger.error("Import aborted: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Import aborted"
        )
    if outcome is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another sync run is in progress",
        )
    return to_summary(outcome)


@sync_router.get("/logs/{channel}")
def sync_history(
    channel: str,
    limit: int = 20,
    db: Session = Depends(get_db),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> List[SyncLogResponse]:
    """Return the most recent sync log entries of a channel, newest first."""
    sync_channel = _parse_channel(channel)
    return [
        SyncLogResponse.model_validate(entry)
        for entry in orchestrator.tracker.history(db, sync_channel, limit)
    ]
