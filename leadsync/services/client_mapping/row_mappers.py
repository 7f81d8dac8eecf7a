"""Map raw spreadsheet rows and reporting API rows into lead candidates.

Every channel has one field table. Store names are canonicalized here, so the
identity resolver only ever sees canonical stores.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Mapping, Optional

from leadsync.errors import UnknownChannelError
from leadsync.models.lead_enums import LeadType, SyncChannel
from leadsync.repositories.schemas.leads_schema import LeadCandidate
from leadsync.repositories.schemas.stores_schema import StoreCreate
from leadsync.services.client_mapping.field_aliases import (
    Field,
    as_amount,
    as_api_date,
    as_phone,
    as_sheet_date,
    read_fields,
)
from leadsync.services.stores.store_normalizer import detect_brand, normalize

_REMARK_ALIASES = (
    "remarks",
    "notes",
    "comment",
    "comments",
    "other comments",
    "additional notes",
)

WALKIN_FIELDS = {
    "name": Field(("name", "customer name", "customername", "__empty_1")),
    "phone": Field(("phone", "contact", "__empty_2"), as_phone),
    "store": Field(("store", "storename")),
    "enquiry_date": Field(("date", "__empty"), as_sheet_date),
    "function_date": Field(("function date", "functiondate", "__empty_3"), as_sheet_date),
    "attended_by": Field(("staff", "attendedby", "__empty_4")),
    "status": Field(("status", "closingstatus", "__empty_5")),
    "category": Field(("category", "__empty_6")),
    "sub_category": Field(("sub category", "subcategory", "__empty_7")),
    "remarks": Field(_REMARK_ALIASES),
}

LOSS_OF_SALE_FIELDS = {
    "name": Field(("name", "customername", "customer name")),
    "phone": Field(("phone", "customerphone", "contact", "number"), as_phone),
    "store": Field(("store", "storename")),
    "source": Field(("source",)),
    "lead_type": Field(("leadtype", "lead type")),
    "enquiry_type": Field(("enquirytype", "enquiry type")),
    "reason": Field(("reason",)),
    "closing_status": Field(
        ("closingstatus", "closing status", "status")
    ),
    "attended_by": Field(
        ("attendedby", "attended_by", "staff name", "staffname", "staff")
    ),
    "visit_date": Field(("visitdate", "visit date", "date"), as_sheet_date),
    "enquiry_date": Field(("enquirydate", "enquiry date"), as_sheet_date),
    "function_date": Field(("functiondate", "function date"), as_sheet_date),
    "remarks": Field(_REMARK_ALIASES),
    "comments": Field(("comments",)),
    "other_comments": Field(("other comments",)),
}

_API_COMMON = {
    "name": Field(("name", "customername")),
    "phone": Field(
        ("phoneno", "phone", "customerphone", "mobile", "contact"), as_phone
    ),
    "store": Field(("store", "storename", "location")),
    "enquiry_type": Field(("enquirytype", "type", "category", "subcategory")),
    "booking_no": Field(("bookingno", "bookingnumber")),
    "function_date": Field(
        ("functiondate", "eventdate", "deliverydate", "trialdate", "function_date"),
        as_api_date,
    ),
}

BOOKING_FIELDS = dict(
    _API_COMMON,
    booking_date=Field(("bookingdate", "booking_date"), as_api_date),
    enquiry_date=Field(("enquirydate", "enquiry_date", "date"), as_api_date),
    security_amount=Field(
        ("price", "securityamount", "security", "deposit"), as_amount
    ),
    remarks=Field(("remarks", "notes")),
)

RENTOUT_FIELDS = dict(
    _API_COMMON,
    rent_out_date=Field(("rentoutdate", "rentout_date", "rent_date"), as_api_date),
    enquiry_date=Field(("enquirydate", "enquiry_date", "rentdate"), as_api_date),
    return_date=Field(
        ("returndate", "return_date", "expectedreturndate"), as_api_date
    ),
    security_amount=Field(
        ("price", "securityamount", "security", "deposit"), as_amount
    ),
    attended_by=Field(
        ("attendedby", "attended_by", "staff", "bookingby", "handledby")
    ),
    remarks=Field(("remarks", "feedback", "notes")),
)

RETURN_FIELDS = dict(
    _API_COMMON,
    return_date=Field(("returndate", "return_date"), as_api_date),
    enquiry_date=Field(("enquirydate", "enquiry_date", "date"), as_api_date),
    attended_by=Field(
        ("attendedby", "attended_by", "staff", "bookingby", "handledby")
    ),
    remarks=Field(("remarks", "feedback", "notes")),
)

STORE_FIELDS = {
    "name": Field(("locname", "name", "storename")),
    "code": Field(("loccode", "code", "storecode")),
    "brand": Field(("brand",)),
    "city": Field(("city",)),
}


def _as_created_at(value: Optional[date]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.combine(value, time.min)


def _store(raw: Optional[str], override: Optional[str]) -> Optional[str]:
    return normalize(override or raw) or None


def _join(*parts: Optional[str]) -> Optional[str]:
    joined = " - ".join(part for part in parts if part)
    return joined or None


def map_walkin(
    row: Mapping[str, Any], store_override: Optional[str] = None
) -> LeadCandidate:
    """
    Map a walk-in spreadsheet row.

    Rows whose status mentions a loss are loss-of-sale visits; their visit date is
    the row date and their reason falls back to the category columns.
    """

    fields = read_fields(row, WALKIN_FIELDS)
    status = fields["status"]
    is_loss = bool(status) and ("loss" in status.lower() or "lost" in status.lower())
    enquiry_date = fields["enquiry_date"]

    return LeadCandidate(
        name=fields["name"],
        phone=fields["phone"],
        store=_store(fields["store"], store_override),
        source="Loss of Sale" if is_loss else "Walk-in",
        lead_type=LeadType.LOSS_OF_SALE if is_loss else LeadType.GENERAL,
        enquiry_type=_join(fields["category"], fields["sub_category"]),
        enquiry_date=enquiry_date,
        function_date=fields["function_date"],
        visit_date=enquiry_date if is_loss else None,
        closing_status=status,
        attended_by=fields["attended_by"],
        remarks=fields["remarks"],
        reason=(
            fields["category"] or fields["sub_category"] or fields["remarks"]
            if is_loss
            else None
        ),
        created_at=_as_created_at(enquiry_date),
    )


def map_loss_of_sale(
    row: Mapping[str, Any], store_override: Optional[str] = None
) -> LeadCandidate:
    """Map a loss-of-sale spreadsheet row. The row date is the visit date."""

    fields = read_fields(row, LOSS_OF_SALE_FIELDS)

    remarks = fields["remarks"]
    if fields["comments"] and fields["other_comments"]:
        remarks = f"{fields['comments']} {fields['other_comments']}"

    try:
        lead_type = LeadType(fields["lead_type"] or LeadType.LOSS_OF_SALE.value)
    except ValueError:
        lead_type = LeadType.LOSS_OF_SALE

    visit_date = fields["visit_date"]
    enquiry_date = fields["enquiry_date"] or visit_date

    return LeadCandidate(
        name=fields["name"],
        phone=fields["phone"],
        store=_store(fields["store"], store_override),
        source=fields["source"] or "Loss of Sale",
        lead_type=lead_type,
        enquiry_type=fields["enquiry_type"],
        reason=fields["reason"],
        closing_status=fields["closing_status"],
        attended_by=fields["attended_by"],
        enquiry_date=enquiry_date,
        visit_date=visit_date,
        function_date=fields["function_date"],
        remarks=remarks,
        created_at=_as_created_at(visit_date or enquiry_date),
    )


def map_booking(
    row: Mapping[str, Any], store_override: Optional[str] = None
) -> LeadCandidate:
    fields = read_fields(row, BOOKING_FIELDS)
    return LeadCandidate(
        name=fields["name"],
        phone=fields["phone"],
        store=_store(fields["store"], store_override),
        source="Booking",
        lead_type=LeadType.BOOKING_CONFIRMATION,
        enquiry_type=fields["enquiry_type"],
        booking_no=fields["booking_no"],
        security_amount=fields["security_amount"],
        enquiry_date=fields["enquiry_date"],
        function_date=fields["function_date"],
        remarks=fields["remarks"],
        created_at=_as_created_at(fields["booking_date"] or fields["enquiry_date"]),
    )


def map_rentout(
    row: Mapping[str, Any], store_override: Optional[str] = None
) -> LeadCandidate:
    fields = read_fields(row, RENTOUT_FIELDS)
    return LeadCandidate(
        name=fields["name"],
        phone=fields["phone"],
        store=_store(fields["store"], store_override),
        source="Rent-out",
        lead_type=LeadType.RENT_OUT_FEEDBACK,
        enquiry_type=fields["enquiry_type"],
        booking_no=fields["booking_no"],
        security_amount=fields["security_amount"],
        return_date=fields["return_date"],
        enquiry_date=fields["enquiry_date"],
        function_date=fields["function_date"],
        attended_by=fields["attended_by"],
        remarks=fields["remarks"],
        created_at=_as_created_at(fields["rent_out_date"] or fields["enquiry_date"]),
    )


def map_return(
    row: Mapping[str, Any], store_override: Optional[str] = None
) -> LeadCandidate:
    fields = read_fields(row, RETURN_FIELDS)
    return LeadCandidate(
        name=fields["name"],
        phone=fields["phone"],
        store=_store(fields["store"], store_override),
        source="Return",
        lead_type=LeadType.RETURN,
        enquiry_type=fields["enquiry_type"],
        booking_no=fields["booking_no"],
        return_date=fields["return_date"],
        enquiry_date=fields["enquiry_date"],
        function_date=fields["function_date"],
        attended_by=fields["attended_by"],
        remarks=fields["remarks"],
        created_at=_as_created_at(fields["return_date"] or fields["enquiry_date"]),
    )


def has_return_date(row: Mapping[str, Any]) -> bool:
    """Return True when a return report row actually records a return."""

    return read_fields(row, {"return_date": RETURN_FIELDS["return_date"]})[
        "return_date"
    ] is not None


def _is_active(row: Mapping[str, Any]) -> bool:
    lowered = {str(key).strip().lower(): value for key, value in row.items()}
    if "status" in lowered and lowered["status"] is not None:
        return lowered["status"] in (1, "1", True)
    for key in ("isactive", "active"):
        if key in lowered and lowered[key] is not None:
            return bool(lowered[key])
    return True


def map_store(row: Mapping[str, Any]) -> Optional[StoreCreate]:
    """Map a location list row to a store entry, or None when it has no name."""

    fields = read_fields(row, STORE_FIELDS)
    name = normalize(fields["name"])
    if not name:
        return None
    return StoreCreate(
        name=name,
        code=fields["code"],
        brand=fields["brand"] or detect_brand(name),
        city=fields["city"],
        is_active=_is_active(row),
    )


CANDIDATE_MAPPERS = {
    SyncChannel.WALKIN: map_walkin,
    SyncChannel.LOSS_OF_SALE: map_loss_of_sale,
    SyncChannel.BOOKING: map_booking,
    SyncChannel.RENTOUT: map_rentout,
    SyncChannel.RETURN: map_return,
}


def map_row(
    channel: SyncChannel,
    row: Mapping[str, Any],
    store_override: Optional[str] = None,
) -> LeadCandidate:
    """Map ``row`` with the mapper registered for ``channel``."""

    mapper = CANDIDATE_MAPPERS.get(channel)
    if mapper is None:
        raise UnknownChannelError(f"Channel {channel.value!r} does not produce leads")
    return mapper(row, store_override)

