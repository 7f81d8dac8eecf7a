"""Run the polled reporting channels and feed their rows through the resolver."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadsync.configs import settings
from leadsync.errors import SyncAbortedError, UpstreamError
from leadsync.models.lead_enums import (
    ResolutionStatus,
    SkipReason,
    SyncChannel,
    SyncTrigger,
)
from leadsync.repositories.models.sync_logs_model import SyncLog
from leadsync.services.client_mapping.row_mappers import has_return_date, map_row
from leadsync.services.leads.identity_resolver import (
    IdentityResolver,
    ResolutionCounts,
    ResolutionOutcome,
)
from leadsync.services.reporting.report_client import ReportApiClient
from leadsync.services.stores.store_aliases import LOCATION_ID_TO_STORE
from leadsync.services.stores.store_directory_service import StoreDirectoryService
from leadsync.services.sync.sync_guard import SyncRunGuard
from leadsync.services.sync.sync_tracker import FetchWindow, RunOutcome, SyncTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiChannel:
    """One polled reporting channel."""

    channel: SyncChannel
    endpoint: str
    row_filter: Optional[Callable[[Mapping[str, Any]], bool]] = None
    # Iterate the known location table instead of the store directory.
    known_locations: bool = False


@contextmanager
def database_step(db: Session, step: str) -> Iterator[None]:
    """Turn a persistence error inside ``step`` into an aborted run."""

    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        raise SyncAbortedError(f"{step} aborted: {type(exc).__name__}") from exc


def default_channels() -> Tuple[ApiChannel, ...]:
    """Polled channels in run order. Stores are synced before all of them."""

    return (
        ApiChannel(SyncChannel.BOOKING, settings.BOOKING_API_ENDPOINT),
        ApiChannel(SyncChannel.RENTOUT, settings.RENTOUT_API_ENDPOINT),
        ApiChannel(
            SyncChannel.RETURN,
            settings.RETURN_API_ENDPOINT,
            row_filter=has_return_date,
            known_locations=True,
        ),
    )


class SyncOrchestrator:
    """
    Runs every channel sequentially under one run guard.

    Per-location fetches are sequential with a fixed pause between upstream calls.
    Each record is written on its own; there is no batching.
    """

    def __init__(
        self,
        client: ReportApiClient,
        resolver: IdentityResolver,
        tracker: SyncTracker,
        stores: StoreDirectoryService,
        guard: Optional[SyncRunGuard] = None,
        channels: Optional[Tuple[ApiChannel, ...]] = None,
        pause_seconds: float = 0.5,
        sample_limit: int = 20,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.resolver = resolver
        self.tracker = tracker
        self.stores = stores
        self.guard = guard or SyncRunGuard()
        self.channels = channels if channels is not None else default_channels()
        self.pause_seconds = pause_seconds
        self.sample_limit = sample_limit
        self.sleep = sleep

    # Write-side contract

    def ingest(
        self,
        db: Session,
        channel: SyncChannel,
        raw_row: Mapping[str, Any],
        reimport: bool = False,
        store_override: Optional[str] = None,
    ) -> ResolutionOutcome:
        """Map one raw row and resolve it against the lead store."""

        try:
            candidate = map_row(channel, raw_row, store_override)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Could not map %s row: %s", channel.value, exc)
            return ResolutionOutcome(
                ResolutionStatus.SKIPPED, reason=SkipReason.UNMAPPABLE_ROW
            )
        return self.resolver.resolve(db, candidate, channel, reimport=reimport)

    def begin_sync_window(self, db: Session, channel: SyncChannel) -> FetchWindow:
        return self.tracker.fetch_window(db, channel)

    def end_sync_window(
        self, db: Session, channel: SyncChannel, outcome: RunOutcome
    ) -> SyncLog:
        return self.tracker.commit(db, channel, outcome)

    # Runs

    def new_outcome(self, trigger: SyncTrigger) -> RunOutcome:
        return RunOutcome(
            counts=ResolutionCounts(sample_limit=self.sample_limit), trigger=trigger
        )

    def check_database(self, db: Session) -> None:
        """
        Make sure the database answers before anything is written.

        Raises:
            SyncAbortedError: If the database cannot be reached.
        """
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            db.rollback()
            raise SyncAbortedError(f"Database unreachable: {type(exc).__name__}") from exc

    def run_all(
        self, db: Session, trigger: SyncTrigger = SyncTrigger.AUTO
    ) -> Optional[Dict[SyncChannel, RunOutcome]]:
        """
        Sync the store directory, then every polled channel.

        Returns:
            Optional[Dict[SyncChannel, RunOutcome]]: Outcome per channel, or None when
            another run held the guard and this one was skipped.

        Raises:
            SyncAbortedError: If the database becomes unreachable. The aborted
            channel writes no watermark.
        """
        with self.guard.hold("run") as acquired:
            if not acquired:
                return None
            self.check_database(db)
            started = time.monotonic()
            results: Dict[SyncChannel, RunOutcome] = {
                SyncChannel.STORE: self.sync_stores(db, trigger)
            }
            for api_channel in self.channels:
                results[api_channel.channel] = self.sync_channel(db, api_channel, trigger)
            logger.info("Sync run finished in %.1fs", time.monotonic() - started)
            return results

    def sync_stores(self, db: Session, trigger: SyncTrigger) -> RunOutcome:
        outcome = self.new_outcome(trigger)
        outcome.upstream_calls = 1
        try:
            outcome.counts = self.stores.sync_from_api(
                db,
                self.client,
                settings.STORE_LIST_API_ENDPOINT,
                sample_limit=self.sample_limit,
            )
        except UpstreamError as exc:
            logger.warning("Store list sync failed: %s", exc)
            outcome.upstream_errors = 1
            outcome.error_message = str(exc)
        except SQLAlchemyError as exc:
            db.rollback()
            raise SyncAbortedError(f"Store sync aborted: {type(exc).__name__}") from exc
        with database_step(db, "Store sync"):
            self.end_sync_window(db, SyncChannel.STORE, outcome)
        return outcome

    def _locations(self, db: Session, api_channel: ApiChannel) -> List[Tuple[str, str]]:
        if api_channel.known_locations:
            return list(LOCATION_ID_TO_STORE.items())
        return self.stores.sync_targets(db)

    def _database_reachable(self, db: Session) -> bool:
        try:
            self.check_database(db)
        except SyncAbortedError:
            return False
        return True

    def sync_channel(
        self, db: Session, api_channel: ApiChannel, trigger: SyncTrigger
    ) -> RunOutcome:
        """Fetch every location of one channel and resolve each returned row."""

        channel = api_channel.channel
        outcome = self.new_outcome(trigger)
        step = f"Sync {channel.value}"
        with database_step(db, step):
            locations = self._locations(db, api_channel)
        if not locations:
            logger.warning("No stores to query for %s; sync the store list first", channel.value)
            return outcome

        with database_step(db, step):
            window = self.begin_sync_window(db, channel)
        logger.info("Sync %s starting for %s locations (%s)", channel.value, len(locations), window)

        for index, (location_id, store_name) in enumerate(locations):
            if index:
                self.sleep(self.pause_seconds)
            outcome.upstream_calls += 1
            try:
                rows = self.client.fetch_report(
                    api_channel.endpoint,
                    location_id,
                    months=window.months,
                    date_from=window.date_from,
                    date_to=window.date_to,
                )
            except UpstreamError as exc:
                outcome.upstream_errors += 1
                outcome.error_message = str(exc)
                logger.warning(
                    "Sync %s: location %s counted as empty: %s", channel.value, location_id, exc
                )
                continue

            for row_number, row in enumerate(rows, start=1):
                if api_channel.row_filter and not api_channel.row_filter(row):
                    continue
                result = self.ingest(db, channel, row, store_override=store_name)
                outcome.counts.add(result, row_number=row_number)
                if result.status == ResolutionStatus.FAILED and not self._database_reachable(db):
                    raise SyncAbortedError(f"{step} aborted: database unreachable")

        with database_step(db, step):
            self.end_sync_window(db, channel, outcome)
        return outcome


def get_sync_orchestrator(request: Request) -> SyncOrchestrator:
    """Return the orchestrator owned by the running application."""

    return request.app.state.sync_orchestrator
