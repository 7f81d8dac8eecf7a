"""Shared fixtures: an in-memory database and a wired sync orchestrator."""

from datetime import datetime
from typing import Iterator
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from leadsync.repositories import models  # noqa: F401
from leadsync.repositories.crud.leads_crud import CRUDLead
from leadsync.repositories.crud.reports_crud import CRUDReport
from leadsync.repositories.crud.stores_crud import CRUDStore
from leadsync.repositories.crud.sync_logs_crud import CRUDSyncLog
from leadsync.repositories.database import Base
from leadsync.services.leads.identity_resolver import IdentityResolver
from leadsync.services.stores.store_directory_service import StoreDirectoryService
from leadsync.services.sync.sync_orchestrator import SyncOrchestrator
from leadsync.services.sync.sync_tracker import SyncTracker


@pytest.fixture()
def db() -> Iterator[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def clock() -> MagicMock:
    return MagicMock(return_value=datetime(2025, 3, 13, 9, 0, 0))


@pytest.fixture()
def report_client() -> MagicMock:
    client = MagicMock()
    client.fetch_locations.return_value = []
    client.fetch_report.return_value = []
    return client


@pytest.fixture()
def orchestrator(report_client: MagicMock, clock: MagicMock) -> SyncOrchestrator:
    return SyncOrchestrator(
        client=report_client,
        resolver=IdentityResolver(CRUDLead(), CRUDReport()),
        tracker=SyncTracker(CRUDSyncLog(), clock=clock),
        stores=StoreDirectoryService(CRUDStore()),
        pause_seconds=0.5,
        sample_limit=5,
        sleep=MagicMock(),
    )
