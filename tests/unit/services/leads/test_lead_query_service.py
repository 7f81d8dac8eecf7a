"""Test scoped lead listings."""

from datetime import date, datetime

import pytest

from leadsync.models.lead_enums import LeadType, UserRole
from leadsync.models.lead_models import LeadListFilters, Pagination
from leadsync.repositories.crud.leads_crud import CRUDLead
from leadsync.repositories.models.users_model import User
from leadsync.services.leads.lead_query_service import LeadQueryService
from leadsync.services.leads.lead_scope import CallerContext

ADMIN = CallerContext(role=UserRole.ADMIN)


@pytest.fixture()
def service() -> LeadQueryService:
    return LeadQueryService(CRUDLead())


@pytest.fixture()
def seeded(db):
    db.add(User(id=5, employee_id="EMP5", name="Nisha", store="Zorucci - Edappally"))
    db.commit()
    crud = CRUDLead()
    rows = [
        ("Anu", "Zorucci - Edappally", LeadType.BOOKING_CONFIRMATION, 5, date(2025, 3, 1)),
        ("Binu", "Zorucci - Edappal", LeadType.LOSS_OF_SALE, None, date(2025, 3, 2)),
        ("Chitra", "Suitor Guy - Edappally", LeadType.BOOKING_CONFIRMATION, None, date(2025, 3, 3)),
        ("Dev", "Kottayam", LeadType.GENERAL, 5, date(2025, 3, 4)),
        ("Esha", "Suitor Guy - Kottayam", LeadType.RETURN, None, date(2025, 3, 5)),
    ]
    for index, (name, store, lead_type, assignee, enquiry_date) in enumerate(rows):
        crud.create(
            db,
            {
                "name": name,
                "phone": f"98765{index:05d}",
                "store": store,
                "lead_type": lead_type.value,
                "assigned_to_id": assignee,
                "enquiry_date": enquiry_date,
                "created_at": datetime(2025, 3, 10 + index),
            },
        )
    return db


def names(page):
    return [lead.name for lead in page.items]


def test_admin_without_filter_sees_everything_newest_first(seeded, service):
    page = service.list_leads(seeded, ADMIN)
    assert page.total == 5
    assert names(page) == ["Esha", "Dev", "Chitra", "Binu", "Anu"]


def test_store_filter_respects_word_boundaries(seeded, service):
    page = service.list_leads(seeded, ADMIN, "Zorucci Edappally")
    assert names(page) == ["Anu"]

    page = service.list_leads(seeded, ADMIN, "Edappal")
    assert names(page) == ["Binu"]


def test_default_brand_filter_includes_brandless_records(seeded, service):
    page = service.list_leads(seeded, ADMIN, "Suitor Guy - Kottayam")
    assert names(page) == ["Esha", "Dev"]


def test_team_lead_is_confined_to_own_store(seeded, service):
    caller = CallerContext(role=UserRole.TEAM_LEAD, store="SG.Kottayam")

    assert names(service.list_leads(seeded, caller)) == ["Esha", "Dev"]
    assert names(service.list_leads(seeded, caller, "Zorucci")) == []


def test_telecaller_sees_only_assigned_leads(seeded, service):
    caller = CallerContext(role=UserRole.TELECALLER, user_id=5)
    page = service.list_leads(seeded, caller, "Suitor Guy - Edappally")
    assert names(page) == ["Dev", "Anu"]


def test_unmatched_store_filter_returns_empty_page(seeded, service):
    page = service.list_leads(seeded, ADMIN, "Nowhere")
    assert page.total == 0
    assert page.items == []


def test_other_filters_and_pagination(seeded, service):
    filters = LeadListFilters(lead_type=LeadType.BOOKING_CONFIRMATION)
    page = service.list_leads(seeded, ADMIN, None, filters)
    assert names(page) == ["Chitra", "Anu"]

    filters = LeadListFilters(
        enquiry_date_from=date(2025, 3, 2), enquiry_date_to=date(2025, 3, 4)
    )
    page = service.list_leads(
        seeded, ADMIN, None, filters, Pagination(page=2, limit=2)
    )
    assert page.total == 3
    assert page.page == 2
    assert names(page) == ["Binu"]
