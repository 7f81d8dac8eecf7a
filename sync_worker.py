"""Worker app - polls the reporting API and imports spreadsheet exports."""

import argparse
import time
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from leadsync.configs import settings
from leadsync.errors import SyncAbortedError
from leadsync.logger_config import get_logger
from leadsync.models.lead_enums import SyncChannel, SyncTrigger
from leadsync.repositories import models  # noqa: F401
from leadsync.repositories.database import Base, SessionLocal, engine
from leadsync.services.sync.csv_import_service import CsvImportService
from leadsync.services.sync.sync_orchestrator import SyncOrchestrator
from leadsync.services.sync.sync_tracker import RunOutcome

from startup import build_orchestrator

logger = get_logger("sync_worker")


def log_outcome(channel: SyncChannel, outcome: RunOutcome) -> None:
    counts = outcome.counts
    logger.info(
        "%s: %s (created %d, updated %d, skipped %d, failed %d, upstream errors %d)",
        channel.value,
        outcome.status.value,
        counts.created,
        counts.updated,
        counts.skipped,
        counts.failed,
        outcome.upstream_errors,
    )


def run_once(orchestrator: SyncOrchestrator) -> bool:
    """
    Run every channel once with its own session.

    Returns:
        bool: False when the run was skipped or aborted.
    """
    db: Session = SessionLocal()
    try:
        results = orchestrator.run_all(db, SyncTrigger.AUTO)
    except SyncAbortedError as exc:
        logger.error("Sync run aborted: %s", exc)
        return False
    finally:
        db.close()
    if results is None:
        return False
    for channel, outcome in results.items():
        log_outcome(channel, outcome)
    return True


def import_csv(
    orchestrator: SyncOrchestrator,
    path: Path,
    channel: SyncChannel,
    reimport: bool = False,
    brand: Optional[str] = None,
    location: Optional[str] = None,
) -> bool:
    """Import one CSV export. Returns False when it was skipped or aborted."""
    db: Session = SessionLocal()
    try:
        outcome = CsvImportService(orchestrator).import_file(
            db, channel, path, reimport=reimport, brand=brand, location=location
        )
    except SyncAbortedError as exc:
        logger.error("Import of %s aborted: %s", path, exc)
        return False
    finally:
        db.close()
    if outcome is None:
        return False
    log_outcome(channel, outcome)
    return True


def poll(orchestrator: SyncOrchestrator, interval_seconds: int) -> None:
    """Run every channel, then wait ``interval_seconds``, forever."""
    logger.info("Starting sync worker, interval %ds.", interval_seconds)
    while True:
        if settings.SYNC_ENABLED:
            run_once(orchestrator)
        else:
            logger.info("Sync disabled, waiting for the next cycle.")
        logger.debug("Waiting %d seconds before the next cycle.", interval_seconds)
        time.sleep(interval_seconds)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--once", action="store_true", help="Run a single sync and exit.")
    parser.add_argument("--import-csv", type=Path, help="CSV export to import instead of syncing.")
    parser.add_argument(
        "--channel",
        type=SyncChannel.parse,
        default=SyncChannel.LOSS_OF_SALE,
        help="walkin or lossofsale, used with --import-csv.",
    )
    parser.add_argument("--reimport", action="store_true", help="The CSV was imported before.")
    parser.add_argument("--brand", help="Brand of every row in the CSV.")
    parser.add_argument("--location", help="Location of every row in the CSV.")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    worker_orchestrator = build_orchestrator()

    if args.import_csv:
        ok = import_csv(
            worker_orchestrator,
            args.import_csv,
            args.channel,
            reimport=args.reimport,
            brand=args.brand,
            location=args.location,
        )
        raise SystemExit(0 if ok else 1)
    if args.once:
        raise SystemExit(0 if run_once(worker_orchestrator) else 1)
    poll(worker_orchestrator, settings.SYNC_INTERVAL_SECONDS)
