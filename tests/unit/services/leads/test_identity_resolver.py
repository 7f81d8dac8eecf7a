"""Test lead identity resolution against an in-memory database."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from leadsync.errors import UnknownChannelError
from leadsync.models.lead_enums import (
    LeadType,
    ResolutionStatus,
    SkipReason,
    SyncChannel,
)
from leadsync.repositories.crud.leads_crud import CRUDLead
from leadsync.repositories.crud.reports_crud import CRUDReport
from leadsync.repositories.models.leads_model import Lead
from leadsync.repositories.schemas.leads_schema import LeadCandidate
from leadsync.services.leads.identity_resolver import (
    IdentityResolver,
    ResolutionCounts,
    ResolutionOutcome,
    rule_for,
    validate,
)


def booking(**overrides) -> LeadCandidate:
    data = {
        "name": "Anu Joseph",
        "phone": "98765 43210",
        "store": "SG-Edappally",
        "booking_no": "B-1001",
        "security_amount": 1500.0,
        "function_date": date(2025, 4, 2),
    }
    data.update(overrides)
    return LeadCandidate(**data)


def visit(**overrides) -> LeadCandidate:
    data = {
        "name": "Rahul",
        "phone": "9876500000",
        "store": "Suitor Guy - Kottakkal",
        "lead_type": LeadType.LOSS_OF_SALE,
        "enquiry_date": date(2025, 3, 1),
        "reason": "Size not available",
    }
    data.update(overrides)
    return LeadCandidate(**data)


@pytest.fixture()
def resolver() -> IdentityResolver:
    return IdentityResolver(CRUDLead(), CRUDReport())


def test_booking_is_created_with_canonical_values(db, resolver):
    outcome = resolver.resolve(db, booking(), SyncChannel.BOOKING)

    assert outcome.status == ResolutionStatus.CREATED
    lead = db.query(Lead).one()
    assert lead.id == outcome.lead_id
    assert lead.phone == "9876543210"
    assert lead.store == "Suitor Guy - Edappally"
    assert lead.lead_type == LeadType.BOOKING_CONFIRMATION.value
    assert lead.call_status == "Not Called"


def test_booking_resync_updates_in_place_and_keeps_telecaller_work(db, resolver):
    first = resolver.resolve(db, booking(), SyncChannel.BOOKING)
    lead = db.query(Lead).one()
    CRUDLead().update(
        db, lead, {"call_status": "Called", "remarks": "Call back on Friday"}
    )

    second = resolver.resolve(
        db, booking(phone="98765-43210", security_amount=2000.0), SyncChannel.BOOKING
    )

    assert second.status == ResolutionStatus.UPDATED
    assert second.lead_id == first.lead_id
    lead = db.query(Lead).one()
    assert lead.security_amount == 2000.0
    assert lead.call_status == "Called"
    assert lead.remarks == "Call back on Friday"


def test_raw_country_code_phone_is_skipped(db, resolver):
    resolver.resolve(db, booking(), SyncChannel.BOOKING)

    outcome = resolver.resolve(
        db, booking(phone="+91 98765 43210", security_amount=2000.0), SyncChannel.BOOKING
    )

    assert outcome.status == ResolutionStatus.SKIPPED
    assert outcome.reason == SkipReason.INVALID_PHONE
    assert db.query(Lead).one().security_amount == 1500.0


def test_booking_without_number_matches_on_customer_and_store(db, resolver):
    resolver.resolve(db, booking(booking_no=None), SyncChannel.RENTOUT)
    outcome = resolver.resolve(
        db, booking(booking_no=None, remarks="Returned late"), SyncChannel.RENTOUT
    )

    assert outcome.status == ResolutionStatus.UPDATED
    assert db.query(Lead).count() == 1
    assert db.query(Lead).one().lead_type == LeadType.RENT_OUT_FEEDBACK.value


def test_same_booking_on_two_channels_is_two_leads(db, resolver):
    resolver.resolve(db, booking(), SyncChannel.BOOKING)
    resolver.resolve(db, booking(), SyncChannel.RETURN)

    lead_types = sorted(lead.lead_type for lead in db.query(Lead).all())
    assert lead_types == [LeadType.BOOKING_CONFIRMATION.value, LeadType.RETURN.value]


def test_created_at_is_never_overwritten(db, resolver):
    resolver.resolve(
        db, booking(created_at=datetime(2025, 1, 5)), SyncChannel.BOOKING
    )
    resolver.resolve(
        db, booking(created_at=datetime(2025, 2, 9)), SyncChannel.BOOKING
    )

    assert db.query(Lead).one().created_at == datetime(2025, 1, 5)


def test_repeated_visits_are_separate_leads(db, resolver):
    first = resolver.resolve(db, visit(), SyncChannel.LOSS_OF_SALE)
    second = resolver.resolve(db, visit(), SyncChannel.LOSS_OF_SALE)

    assert first.status == ResolutionStatus.CREATED
    assert second.status == ResolutionStatus.CREATED
    assert db.query(Lead).count() == 2


def test_reimported_visit_updates_the_first_import(db, resolver):
    resolver.resolve(db, visit(), SyncChannel.LOSS_OF_SALE)
    outcome = resolver.resolve(
        db, visit(reason="Price"), SyncChannel.LOSS_OF_SALE, reimport=True
    )

    assert outcome.status == ResolutionStatus.UPDATED
    assert db.query(Lead).count() == 1
    assert db.query(Lead).one().reason == "Price"


def test_reimported_visit_with_new_date_creates(db, resolver):
    resolver.resolve(db, visit(), SyncChannel.WALKIN)
    outcome = resolver.resolve(
        db, visit(enquiry_date=date(2025, 3, 2)), SyncChannel.WALKIN, reimport=True
    )

    assert outcome.status == ResolutionStatus.CREATED
    assert db.query(Lead).count() == 2


def test_archived_booking_is_not_revived(db, resolver):
    CRUDReport().create(db, {"phone": "9876543210", "booking_no": "B-1001"})

    outcome = resolver.resolve(db, booking(), SyncChannel.BOOKING)

    assert outcome == ResolutionOutcome(
        ResolutionStatus.SKIPPED, reason=SkipReason.ARCHIVED
    )
    assert db.query(Lead).count() == 0


def test_archived_visit_is_only_checked_on_reimport(db, resolver):
    CRUDReport().create(
        db, {"phone": "9876500000", "enquiry_date": date(2025, 3, 1)}
    )

    fresh = resolver.resolve(db, visit(), SyncChannel.LOSS_OF_SALE)
    again = resolver.resolve(db, visit(), SyncChannel.LOSS_OF_SALE, reimport=True)

    assert fresh.status == ResolutionStatus.CREATED
    assert again.reason == SkipReason.ARCHIVED


@pytest.mark.parametrize(
    "overrides, reason",
    [
        ({"name": "  "}, SkipReason.MISSING_NAME),
        ({"phone": None}, SkipReason.MISSING_PHONE),
        ({"phone": "12345"}, SkipReason.INVALID_PHONE),
        ({"store": ""}, SkipReason.MISSING_STORE),
    ],
)
def test_incomplete_candidates_are_skipped_with_reason(db, resolver, overrides, reason):
    assert validate(booking(**overrides)) == reason
    outcome = resolver.resolve(db, booking(**overrides), SyncChannel.BOOKING)
    assert outcome.status == ResolutionStatus.SKIPPED
    assert outcome.reason == reason
    assert db.query(Lead).count() == 0


def test_database_error_is_reported_as_failed():
    leads = MagicMock()
    leads.find_by_identity.return_value = None
    leads.create.side_effect = OperationalError("INSERT", {}, Exception("gone"))
    reports = MagicMock()
    reports.find_archived.return_value = None
    db = MagicMock()

    outcome = IdentityResolver(leads, reports).resolve(
        db, booking(), SyncChannel.BOOKING
    )

    assert outcome.status == ResolutionStatus.FAILED
    assert outcome.error == "OperationalError"
    db.rollback.assert_called_once()


def test_store_channel_has_no_identity_rule(db, resolver):
    with pytest.raises(UnknownChannelError):
        rule_for(SyncChannel.STORE)
    with pytest.raises(UnknownChannelError):
        resolver.resolve(db, booking(), SyncChannel.STORE)


class TestResolutionCounts:
    """Test the per-batch counters."""

    def setup_method(self) -> None:
        self.counts = ResolutionCounts(sample_limit=2)

    def test_add_counts_every_status(self) -> None:
        self.counts.add(ResolutionOutcome(ResolutionStatus.CREATED, lead_id=1))
        self.counts.add(ResolutionOutcome(ResolutionStatus.UPDATED, lead_id=1))
        self.counts.add(
            ResolutionOutcome(ResolutionStatus.SKIPPED, reason=SkipReason.MISSING_NAME),
            row_number=3,
        )
        self.counts.add(ResolutionOutcome(ResolutionStatus.FAILED, error="Boom"), 4)

        assert (self.counts.created, self.counts.updated) == (1, 1)
        assert (self.counts.skipped, self.counts.failed) == (1, 1)
        assert self.counts.written == 2
        assert self.counts.total == 4
        assert self.counts.samples == [
            {"row": 3, "status": "skipped", "reason": "missing_name", "error": None},
            {"row": 4, "status": "failed", "reason": None, "error": "Boom"},
        ]

    def test_samples_are_bounded(self) -> None:
        for row in range(5):
            self.counts.add(
                ResolutionOutcome(ResolutionStatus.SKIPPED, reason=SkipReason.ARCHIVED),
                row_number=row,
            )
        assert self.counts.skipped == 5
        assert len(self.counts.samples) == 2

    def test_merge(self) -> None:
        other = ResolutionCounts(created=2, skipped=1, samples=[{"row": 1}])
        self.counts.merge(other)
        assert self.counts.created == 2
        assert self.counts.skipped == 1
        assert self.counts.samples == [{"row": 1}]
