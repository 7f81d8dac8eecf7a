"""Test the store directory service."""

from unittest.mock import MagicMock

from leadsync.repositories.crud.stores_crud import CRUDStore
from leadsync.repositories.models.stores_model import Store
from leadsync.repositories.schemas.stores_schema import StoreCreate
from leadsync.services.stores.store_aliases import CANONICAL_STORES
from leadsync.services.stores.store_directory_service import StoreDirectoryService


class TestStoreDirectoryService:
    """Test cases for StoreDirectoryService class."""

    def setup_method(self) -> None:
        self.service = StoreDirectoryService(CRUDStore())

    def test_register_skips_known_code_or_name(self, db) -> None:
        assert self.service.register(db, StoreCreate(name="Suitor Guy - Kottayam", code="701"))
        assert not self.service.register(db, StoreCreate(name="Other", code="701"))
        assert not self.service.register(db, StoreCreate(name="Suitor Guy - Kottayam", code="9"))
        assert db.query(Store).count() == 1

    def test_sync_from_api(self, db) -> None:
        client = MagicMock()
        client.fetch_locations.return_value = [
            {"locName": "SG.Kottayam", "locCode": "701", "status": 1},
            {"locName": None, "locCode": "999"},
            {"locName": "Suitor Guy - Kottayam", "locCode": "9"},
            {"locName": "Z- Edappal", "locCode": "100", "status": 0},
        ]

        counts = self.service.sync_from_api(db, client, "/locations", sample_limit=5)

        assert counts.created == 2
        assert counts.skipped == 2
        assert counts.samples == [
            {"row": 2, "status": "skipped", "reason": "missing_store", "error": None}
        ]
        client.fetch_locations.assert_called_once_with("/locations")
        assert self.service.sync_targets(db) == [("701", "Suitor Guy - Kottayam")]

    def test_seed_known_locations_only_fills_an_empty_directory(self, db) -> None:
        added = self.service.seed_known_locations(db)

        assert added == len(CANONICAL_STORES)
        assert {store.name for store in db.query(Store).all()} == set(CANONICAL_STORES)
        assert self.service.seed_known_locations(db) == 0
