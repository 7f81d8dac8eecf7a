"""Keep the store directory in line with the upstream location list."""

from __future__ import annotations

import logging
from typing import List, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session

from leadsync.models.lead_enums import ResolutionStatus, SkipReason
from leadsync.repositories.crud.stores_crud import CRUDStore
from leadsync.repositories.schemas.stores_schema import StoreCreate
from leadsync.services.client_mapping.row_mappers import map_store
from leadsync.services.leads.identity_resolver import ResolutionCounts, ResolutionOutcome
from leadsync.services.reporting.report_client import ReportApiClient
from leadsync.services.stores.store_aliases import LOCATION_ID_TO_STORE
from leadsync.services.stores.store_normalizer import detect_brand

logger = logging.getLogger(__name__)


class StoreDirectoryService:
    """Registers stores; existing stores, matched by code or name, are left alone."""

    def __init__(self, repository: CRUDStore) -> None:
        self.repository = repository

    def register(self, db: Session, store_in: StoreCreate) -> bool:
        """Create the store unless it is already known. Returns True when created."""
        existing = self.repository.get_by_code_or_name(db, store_in.code, store_in.name)
        if existing is not None:
            return False
        self.repository.create(db, store_in)
        return True

    def sync_from_api(
        self,
        db: Session,
        client: ReportApiClient,
        endpoint: str,
        sample_limit: int = 20,
    ) -> ResolutionCounts:
        """
        Fetch the location list and register every unknown store.

        Raises:
            UpstreamError: If the location list cannot be fetched.
        """
        counts = ResolutionCounts(sample_limit=sample_limit)
        unnamed = 0
        for index, row in enumerate(client.fetch_locations(endpoint), start=1):
            store_in = map_store(row)
            if store_in is None:
                unnamed += 1
                counts.add(
                    ResolutionOutcome(
                        ResolutionStatus.SKIPPED, reason=SkipReason.MISSING_STORE
                    ),
                    row_number=index,
                )
                continue
            if self.register(db, store_in):
                counts.created += 1
            else:
                counts.skipped += 1
        logger.info(
            "Store directory sync: %s created, %s already known, %s without name",
            counts.created,
            counts.skipped - unnamed,
            unnamed,
        )
        return counts

    def seed_known_locations(self, db: Session) -> int:
        """Fill an empty directory from the known location table. Returns stores added."""
        if self.repository.count(db):
            return 0
        added = 0
        for code, name in LOCATION_ID_TO_STORE.items():
            if self.register(
                db, StoreCreate(name=name, code=code, brand=detect_brand(name))
            ):
                added += 1
        logger.info("Seeded %s stores into the empty directory", added)
        return added

    def sync_targets(self, db: Session) -> List[Tuple[str, str]]:
        """Return ``(location code, store name)`` for every active store with a code."""
        return [(store.code, store.name) for store in self.repository.list_syncable(db)]


def get_store_directory_service(
    repository: CRUDStore = Depends(),
) -> StoreDirectoryService:
    return StoreDirectoryService(repository)
