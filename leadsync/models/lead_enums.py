"""Closed vocabularies shared across ingestion, storage and the API.

Every member keeps the exact wire-level string stored in the database and sent by
the upstream reporting APIs.
"""

import enum

from leadsync.errors import UnknownChannelError


class LeadType(str, enum.Enum):
    """Classification of a lead."""

    GENERAL = "general"
    LOSS_OF_SALE = "lossOfSale"
    RETURN = "return"
    RENT_OUT_FEEDBACK = "rentOutFeedback"
    BOOKING_CONFIRMATION = "bookingConfirmation"
    JUST_DIAL = "justDial"


class SyncChannel(str, enum.Enum):
    """Ingestion channel, also used as the SyncLog ``sync_type``."""

    BOOKING = "booking"
    RETURN = "return"
    RENTOUT = "rentout"
    WALKIN = "walkin"
    LOSS_OF_SALE = "lossofsale"
    STORE = "store"

    @classmethod
    def parse(cls, value: str) -> "SyncChannel":
        """Return the channel for ``value`` or raise UnknownChannelError."""
        try:
            return cls((value or "").strip().lower())
        except ValueError as exc:
            raise UnknownChannelError(f"Unknown sync channel: {value!r}") from exc


class SyncTrigger(str, enum.Enum):
    MANUAL = "manual"
    AUTO = "auto"


class SyncStatus(str, enum.Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class UserRole(str, enum.Enum):
    """Visibility class of an authenticated caller."""

    ADMIN = "admin"
    TEAM_LEAD = "teamLead"
    TELECALLER = "telecaller"


class ResolutionStatus(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, enum.Enum):
    """Machine-readable reason attached to a skipped candidate."""

    MISSING_NAME = "missing_name"
    MISSING_PHONE = "missing_phone"
    MISSING_STORE = "missing_store"
    INVALID_PHONE = "invalid_phone"
    ARCHIVED = "archived"
    UNMAPPABLE_ROW = "unmappable_row"
