"""Startup helpers shared by the API and the sync worker."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadsync.configs import settings
from leadsync.repositories.crud.leads_crud import CRUDLead
from leadsync.repositories.crud.reports_crud import CRUDReport
from leadsync.repositories.crud.stores_crud import CRUDStore
from leadsync.repositories.crud.sync_logs_crud import CRUDSyncLog
from leadsync.repositories.database import SessionLocal
from leadsync.repositories.redis.redis_lock import RedisLockStore
from leadsync.services.leads.identity_resolver import IdentityResolver
from leadsync.services.reporting.report_client import ReportApiClient
from leadsync.services.stores.store_directory_service import StoreDirectoryService
from leadsync.services.sync.sync_guard import RedisSyncRunGuard, SyncRunGuard
from leadsync.services.sync.sync_orchestrator import SyncOrchestrator
from leadsync.services.sync.sync_tracker import SyncTracker

logger = logging.getLogger(__name__)


def build_guard() -> SyncRunGuard:
    """Share the run guard through Redis when a server is configured."""
    if not settings.REDIS_HOST:
        return SyncRunGuard()
    store = RedisLockStore(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        password=settings.REDIS_PASSWORD,
        ssl=settings.REDIS_SSL,
    )
    return RedisSyncRunGuard(
        store, key=settings.SYNC_LOCK_KEY, ttl_seconds=settings.SYNC_LOCK_TTL_SECONDS
    )


def build_orchestrator() -> SyncOrchestrator:
    """Wire the sync orchestrator from the configured settings."""
    client = ReportApiClient(
        settings.REPORT_API_BASE_URL,
        token=settings.REPORT_API_TOKEN,
        timeout=settings.REPORT_API_TIMEOUT_SECONDS,
    )
    return SyncOrchestrator(
        client=client,
        resolver=IdentityResolver(CRUDLead(), CRUDReport()),
        tracker=SyncTracker(CRUDSyncLog()),
        stores=StoreDirectoryService(CRUDStore()),
        guard=build_guard(),
        pause_seconds=settings.SYNC_REQUEST_PAUSE_SECONDS,
        sample_limit=settings.SYNC_SAMPLE_LIMIT,
    )


def seed_store_directory() -> int:
    """Register the known upstream locations when the directory is empty."""
    db: Session = SessionLocal()
    try:
        created = StoreDirectoryService(CRUDStore()).seed_known_locations(db)
        if not created:
            logger.info("Store directory already populated. Skipping seed.")
        return created
    except SQLAlchemyError as exc:
        logger.error("Failed to seed the store directory: %s", exc)
        db.rollback()
        return 0
    finally:
        db.close()


if __name__ == "__main__":  # pragma: no cover
    seed_store_directory()
