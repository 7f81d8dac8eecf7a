"""Test the lead and sync routers through a FastAPI test client."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from leadsync.configs import settings
from leadsync.controllers.lead_controllers import lead_router
from leadsync.controllers.sync_controllers import sync_router
from leadsync.repositories.crud.leads_crud import CRUDLead
from leadsync.repositories.dependencies import get_db

ADMIN = {"X-User-Role": "admin"}


@pytest.fixture()
def client(db, orchestrator, monkeypatch):
    monkeypatch.setattr(settings, "SYNC_DATE_FROM", None)
    monkeypatch.setattr(settings, "SYNC_DATE_TO", None)
    monkeypatch.setattr(settings, "SYNC_MONTHS", None)

    app = FastAPI()
    app.include_router(lead_router)
    app.include_router(sync_router)
    app.state.sync_orchestrator = orchestrator
    app.dependency_overrides[get_db] = lambda: db
    return TestClient(app)


@pytest.fixture()
def leads(db):
    crud = CRUDLead()
    for index, (name, store, assignee) in enumerate(
        [
            ("Anu", "Zorucci - Edappally", None),
            ("Binu", "Zorucci - Edappal", 5),
            ("Chitra", "Suitor Guy - Kottayam", None),
        ]
    ):
        crud.create(
            db,
            {
                "name": name,
                "phone": f"98765{index:05d}",
                "store": store,
                "lead_type": "general",
                "assigned_to_id": assignee,
                "created_at": datetime(2025, 3, 10 + index),
            },
        )


class TestLeadRoutes:
    """Test GET /leads."""

    def test_admin_lists_with_store_filter(self, client, leads) -> None:
        response = client.get("/leads", params={"store": "Edappal"}, headers=ADMIN)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["items"][0]["name"] == "Binu"
        assert body["items"][0]["call_status"] == "Not Called"

    def test_team_lead_is_scoped_to_own_store(self, client, leads) -> None:
        response = client.get(
            "/leads",
            params={"store": "Zorucci"},
            headers={"X-User-Role": "teamLead", "X-User-Store": "SG.Kottayam"},
        )
        assert response.json()["total"] == 0

        response = client.get(
            "/leads",
            headers={"X-User-Role": "teamLead", "X-User-Store": "SG.Kottayam"},
        )
        assert [item["name"] for item in response.json()["items"]] == ["Chitra"]

    def test_telecaller_sees_assigned_leads(self, client, leads) -> None:
        response = client.get(
            "/leads", headers={"X-User-Role": "telecaller", "X-User-Id": "5"}
        )
        assert [item["name"] for item in response.json()["items"]] == ["Binu"]

    def test_telecaller_without_id_is_forbidden(self, client) -> None:
        response = client.get("/leads", headers={"X-User-Role": "telecaller"})
        assert response.status_code == 403

    def test_unknown_role_is_forbidden(self, client) -> None:
        response = client.get("/leads", headers={"X-User-Role": "guest"})
        assert response.status_code == 403

    def test_missing_role_is_rejected(self, client) -> None:
        assert client.get("/leads").status_code == 422

    def test_pagination_bounds(self, client) -> None:
        response = client.get("/leads", params={"page": 0}, headers=ADMIN)
        assert response.status_code == 422


class TestSyncRoutes:
    """Test the /sync routes."""

    def test_ingest_loss_of_sale_rows(self, client) -> None:
        response = client.post(
            "/sync/ingest/lossofsale",
            json={
                "rows": [
                    {"Name": "Anu", "Phone": "9876543210", "Date": "01-03-2025"},
                    {"Name": "Binu", "Phone": "12"},
                ],
                "brand": "SG",
                "location": "Kottayam",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert (body["created"], body["skipped"]) == (1, 1)
        assert body["samples"][0]["reason"] == "invalid_phone"

        logs = client.get("/sync/logs/lossofsale").json()
        assert len(logs) == 1
        assert logs[0]["sync_type"] == "lossofsale"
        assert logs[0]["trigger"] == "manual"

    def test_ingest_rejects_api_channels(self, client) -> None:
        response = client.post("/sync/ingest/booking", json={"rows": []})
        assert response.status_code == 422

    def test_unknown_channel_is_not_found(self, client) -> None:
        assert client.post("/sync/ingest/fax", json={"rows": []}).status_code == 404
        assert client.get("/sync/logs/fax").status_code == 404

    def test_ingest_while_busy_conflicts(self, client, orchestrator) -> None:
        assert orchestrator.guard.try_acquire()
        try:
            response = client.post("/sync/ingest/walkin", json={"rows": []})
        finally:
            orchestrator.guard.release()
        assert response.status_code == 409

    def test_run_sync(self, client, report_client) -> None:
        report_client.fetch_locations.return_value = [
            {"locName": "SG.Kottayam", "locCode": "701", "status": 1}
        ]
        report_client.fetch_report.return_value = []

        response = client.post("/sync/run")

        assert response.status_code == 200
        body = response.json()
        assert body["started"] is True
        assert list(body["channels"]) == ["store", "booking", "rentout", "return"]
        assert body["channels"]["store"]["created"] == 1

    def test_run_sync_while_busy_is_not_started(self, client, orchestrator) -> None:
        assert orchestrator.guard.try_acquire()
        try:
            response = client.post("/sync/run")
        finally:
            orchestrator.guard.release()
        assert response.json() == {"started": False, "channels": {}}

    def test_run_sync_reports_database_loss(self, client, orchestrator) -> None:
        orchestrator.stores.sync_targets = MagicMock(
            side_effect=OperationalError("SELECT stores", {}, Exception("gone"))
        )

        response = client.post("/sync/run")

        assert response.status_code == 503
        assert not orchestrator.guard.busy
