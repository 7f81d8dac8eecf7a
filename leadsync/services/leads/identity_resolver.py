"""Decide whether an incoming lead candidate creates, updates or is skipped.

One rule table says, per channel, how the identity of a lead is determined:

* booking, rent-out and return leads are transactional: one lead per real-world
  booking, matched on ``(booking_no, phone, lead_type)`` or, without a booking
  number, on ``(phone, name, lead_type, store)``, and updated in place;
* walk-in and loss-of-sale leads are visits: every row is a new lead, except when a
  spreadsheet is re-imported, where ``(phone, name, store, enquiry_date)`` matches
  the row imported the first time.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadsync.errors import UnknownChannelError
from leadsync.models.lead_enums import LeadType, ResolutionStatus, SkipReason, SyncChannel
from leadsync.repositories.crud.leads_crud import CRUDLead
from leadsync.repositories.crud.reports_crud import CRUDReport
from leadsync.repositories.schemas.leads_schema import LeadCandidate
from leadsync.services.stores.store_normalizer import normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityRule:
    """How one channel identifies an existing lead."""

    transactional: bool
    lead_type: Optional[LeadType] = None


IDENTITY_RULES: Dict[SyncChannel, IdentityRule] = {
    SyncChannel.BOOKING: IdentityRule(True, LeadType.BOOKING_CONFIRMATION),
    SyncChannel.RENTOUT: IdentityRule(True, LeadType.RENT_OUT_FEEDBACK),
    SyncChannel.RETURN: IdentityRule(True, LeadType.RETURN),
    SyncChannel.WALKIN: IdentityRule(False),
    SyncChannel.LOSS_OF_SALE: IdentityRule(False),
}


def rule_for(channel: SyncChannel) -> IdentityRule:
    rule = IDENTITY_RULES.get(channel)
    if rule is None:
        raise UnknownChannelError(f"Channel {channel.value!r} does not ingest leads")
    return rule


@dataclass(frozen=True)
class ResolutionOutcome:
    status: ResolutionStatus
    lead_id: Optional[int] = None
    reason: Optional[SkipReason] = None
    error: Optional[str] = None


@dataclass
class ResolutionCounts:
    """Running totals of a batch plus a bounded sample of skip and failure reasons."""

    sample_limit: int = 20
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    samples: List[Dict[str, Any]] = field(default_factory=list)

    def add(self, outcome: ResolutionOutcome, row_number: Optional[int] = None) -> None:
        if outcome.status == ResolutionStatus.CREATED:
            self.created += 1
        elif outcome.status == ResolutionStatus.UPDATED:
            self.updated += 1
        elif outcome.status == ResolutionStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1

        if outcome.status in (ResolutionStatus.SKIPPED, ResolutionStatus.FAILED):
            if len(self.samples) < self.sample_limit:
                self.samples.append(
                    {
                        "row": row_number,
                        "status": outcome.status.value,
                        "reason": outcome.reason.value if outcome.reason else None,
                        "error": outcome.error,
                    }
                )

    def merge(self, other: "ResolutionCounts") -> None:
        self.created += other.created
        self.updated += other.updated
        self.skipped += other.skipped
        self.failed += other.failed
        room = self.sample_limit - len(self.samples)
        if room > 0:
            self.samples.extend(other.samples[:room])

    @property
    def written(self) -> int:
        return self.created + self.updated

    @property
    def total(self) -> int:
        return self.created + self.updated + self.skipped + self.failed


def validate(candidate: LeadCandidate) -> Optional[SkipReason]:
    """Return why ``candidate`` cannot be stored, or None when it is complete."""

    if not (candidate.name or "").strip():
        return SkipReason.MISSING_NAME
    digits = re.sub(r"\D", "", candidate.phone or "")
    if not digits:
        return SkipReason.MISSING_PHONE
    if len(digits) != 10:
        return SkipReason.INVALID_PHONE
    if not (candidate.store or "").strip():
        return SkipReason.MISSING_STORE
    return None


def _skipped(reason: SkipReason, lead_id: Optional[int] = None) -> ResolutionOutcome:
    return ResolutionOutcome(ResolutionStatus.SKIPPED, lead_id=lead_id, reason=reason)


class IdentityResolver:
    """Write path of the lead store. Every identity check is a fresh read."""

    def __init__(self, leads: CRUDLead, reports: CRUDReport) -> None:
        self.leads = leads
        self.reports = reports

    def _canonical(self, candidate: LeadCandidate, rule: IdentityRule) -> LeadCandidate:
        updates: Dict[str, Any] = {
            "name": candidate.name.strip(),
            "phone": re.sub(r"\D", "", candidate.phone),
            "store": normalize(candidate.store),
        }
        if candidate.booking_no:
            updates["booking_no"] = candidate.booking_no.strip()
        if rule.lead_type is not None:
            updates["lead_type"] = rule.lead_type
        return candidate.model_copy(update=updates)

    def _is_archived(
        self, db: Session, candidate: LeadCandidate, rule: IdentityRule, reimport: bool
    ) -> bool:
        if rule.transactional:
            if not candidate.booking_no:
                return False
            return (
                self.reports.find_archived(
                    db, candidate.phone, booking_no=candidate.booking_no
                )
                is not None
            )
        if reimport and candidate.enquiry_date is not None:
            return (
                self.reports.find_archived(
                    db, candidate.phone, enquiry_date=candidate.enquiry_date
                )
                is not None
            )
        return False

    def identity_key(
        self, candidate: LeadCandidate, rule: IdentityRule, reimport: bool
    ) -> Optional[Dict[str, Any]]:
        """
        Return the column values identifying ``candidate``'s existing lead.

        Returns None when the candidate always creates a new lead.
        """

        lead_type = candidate.lead_type.value
        if rule.transactional:
            if candidate.booking_no:
                return {
                    "booking_no": candidate.booking_no,
                    "phone": candidate.phone,
                    "lead_type": lead_type,
                }
            return {
                "phone": candidate.phone,
                "name": candidate.name,
                "lead_type": lead_type,
                "store": candidate.store,
            }
        if reimport:
            return {
                "phone": candidate.phone,
                "name": candidate.name,
                "store": candidate.store,
                "enquiry_date": candidate.enquiry_date,
            }
        return None

    def resolve(
        self,
        db: Session,
        candidate: LeadCandidate,
        channel: SyncChannel,
        reimport: bool = False,
    ) -> ResolutionOutcome:
        """
        Create, update or skip one candidate.

        Updates merge field by field: a value from the candidate replaces the stored
        one only when it is present, so telecaller work on the lead survives a
        re-sync that does not carry it.

        Args:
            db (Session): The database session.
            candidate (LeadCandidate): Mapped record.
            channel (SyncChannel): Channel the record arrived through.
            reimport (bool): Whether a spreadsheet is being imported again.

        Returns:
            ResolutionOutcome: What happened to the candidate. Validation problems
            and persistence errors are reported here, never raised.
        """

        rule = rule_for(channel)
        reason = validate(candidate)
        if reason is not None:
            return _skipped(reason)

        candidate = self._canonical(candidate, rule)
        try:
            if self._is_archived(db, candidate, rule, reimport):
                return _skipped(SkipReason.ARCHIVED)

            key = self.identity_key(candidate, rule, reimport)
            existing = self.leads.find_by_identity(db, key) if key else None
            if existing is not None:
                changes = candidate.present_fields()
                changes.pop("created_at", None)
                lead = self.leads.update(db, existing, changes)
                return ResolutionOutcome(ResolutionStatus.UPDATED, lead_id=lead.id)

            lead = self.leads.create(db, candidate.present_fields())
            return ResolutionOutcome(ResolutionStatus.CREATED, lead_id=lead.id)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Could not store lead for channel %s: %s", channel.value, exc)
            return ResolutionOutcome(ResolutionStatus.FAILED, error=type(exc).__name__)


def get_identity_resolver(
    leads: CRUDLead = Depends(), reports: CRUDReport = Depends()
) -> IdentityResolver:
    return IdentityResolver(leads, reports)
