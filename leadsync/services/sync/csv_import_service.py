"""Import walk-in and loss-of-sale spreadsheets exported as CSV."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from leadsync.errors import UnknownChannelError
from leadsync.models.lead_enums import SyncChannel, SyncTrigger
from leadsync.services.client_mapping.field_aliases import first_present, lower_keys
from leadsync.services.stores.store_aliases import DEFAULT_BRAND
from leadsync.services.stores.store_normalizer import ZORUCCI, normalize
from leadsync.services.sync.sync_orchestrator import SyncOrchestrator, database_step
from leadsync.services.sync.sync_tracker import RunOutcome

logger = logging.getLogger(__name__)

CSV_CHANNELS = (SyncChannel.WALKIN, SyncChannel.LOSS_OF_SALE)

_FILENAME_PATTERN = re.compile(
    r"^(?:lossofsale|loss_of_sale|walkin|walk_in)[_\s-]+"
    r"(sg|s|z|zorucci|zurocci|suitor[_\s-]?guy)[_\s-]+(.+)$"
)
_STORE_COLUMNS = ("store", "storename")


def store_from_parts(
    brand: Optional[str] = None, location: Optional[str] = None
) -> Optional[str]:
    """Build the canonical store from a brand and a location given separately."""

    if brand and location:
        return normalize(f"{brand.strip()} - {location.strip()}")
    if brand and " - " in brand:
        return normalize(brand)
    return None


def store_from_filename(filename: str) -> Optional[str]:
    """
    Derive the canonical store from an export file name.

    ``lossofsale_sg_kottakkal.csv`` is "Suitor Guy - Kottakkal" and
    ``walkin_z_edapally.csv`` is "Zorucci - Edappally".
    """

    match = _FILENAME_PATTERN.match(Path(filename).stem.lower())
    if not match:
        return None
    brand_code, location = match.groups()
    brand = ZORUCCI if brand_code.startswith("z") else DEFAULT_BRAND
    words = [word for word in re.split(r"[_\s-]+", location) if word]
    if not words:
        return None
    return normalize(f"{brand} - {' '.join(word.capitalize() for word in words)}")


class CsvImportService:
    """
    Feeds spreadsheet rows through the orchestrator's resolver.

    Imports take the orchestrator's run guard, so a manual import never interleaves
    with a scheduled sync in the same deployment.
    """

    def __init__(self, orchestrator: SyncOrchestrator) -> None:
        self.orchestrator = orchestrator

    def import_rows(
        self,
        db: Session,
        channel: SyncChannel,
        rows: Iterable[Mapping[str, Any]],
        reimport: bool = False,
        store: Optional[str] = None,
        fallback_store: Optional[str] = None,
    ) -> Optional[RunOutcome]:
        """
        Resolve every row and append one manual sync log entry for the channel.

        Args:
            db (Session): The database session.
            channel (SyncChannel): ``walkin`` or ``lossofsale``.
            rows (Iterable[Mapping[str, Any]]): Raw spreadsheet rows.
            reimport (bool): Whether this spreadsheet was imported before.
            store (Optional[str]): Store applied to every row.
            fallback_store (Optional[str]): Store for rows without a store column.

        Returns:
            Optional[RunOutcome]: The outcome, or None when another run is in progress.

        Raises:
            UnknownChannelError: If ``channel`` is not a spreadsheet channel.
        """

        if channel not in CSV_CHANNELS:
            raise UnknownChannelError(f"Channel {channel.value!r} is not imported from spreadsheets")

        with self.orchestrator.guard.hold(f"{channel.value} import") as acquired:
            if not acquired:
                return None
            self.orchestrator.check_database(db)
            outcome = self.orchestrator.new_outcome(SyncTrigger.MANUAL)
            for row_number, row in enumerate(rows, start=1):
                override = store
                if override is None and fallback_store:
                    has_store = first_present(lower_keys(row), _STORE_COLUMNS) is not None
                    override = None if has_store else fallback_store
                result = self.orchestrator.ingest(
                    db, channel, row, reimport=reimport, store_override=override
                )
                outcome.counts.add(result, row_number=row_number)
            with database_step(db, f"{channel.value} import"):
                self.orchestrator.end_sync_window(db, channel, outcome)
            return outcome

    def import_file(
        self,
        db: Session,
        channel: SyncChannel,
        path: Path,
        reimport: bool = False,
        brand: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Optional[RunOutcome]:
        """Import a CSV file; the store comes from ``brand``/``location`` or the file name."""

        store = store_from_parts(brand, location)
        fallback_store = store_from_filename(path.name)
        logger.info(
            "Importing %s as %s (store %s, fallback %s)",
            path,
            channel.value,
            store,
            fallback_store,
        )
        with path.open(newline="", encoding="utf-8-sig") as handle:
            return self.import_rows(
                db,
                channel,
                csv.DictReader(handle),
                reimport=reimport,
                store=store,
                fallback_store=fallback_store,
            )
