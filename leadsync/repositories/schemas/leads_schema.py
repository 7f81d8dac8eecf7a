"""Pydantic schemas for leads."""

from datetime import date, datetime
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, StringConstraints

from leadsync.models.lead_enums import LeadType


class LeadCandidate(BaseModel):
    """
    A mapped record on its way into the lead store.

    Nothing here is required: incomplete candidates are reported as skipped by the
    identity resolver instead of failing validation.
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    store: Optional[str] = None
    source: Optional[str] = None
    lead_type: LeadType = LeadType.GENERAL

    booking_no: Optional[str] = None
    security_amount: Optional[float] = None
    enquiry_type: Optional[str] = None
    enquiry_date: Optional[date] = None
    visit_date: Optional[date] = None
    function_date: Optional[date] = None
    return_date: Optional[date] = None
    reason: Optional[str] = None
    closing_status: Optional[str] = None
    attended_by: Optional[str] = None

    call_status: Optional[str] = None
    lead_status: Optional[str] = None
    remarks: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    assigned_to_id: Optional[int] = None
    assigned_at: Optional[datetime] = None

    created_at: Optional[datetime] = None

    def present_fields(self) -> Dict[str, Any]:
        """Return the fields carrying a value; blank strings count as absent."""
        data = self.model_dump(exclude_none=True)
        present = {}
        for field, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            present[field] = value
        if "lead_type" in present:
            present["lead_type"] = self.lead_type.value
        return present


class LeadResponse(BaseModel):
    """Response model for a stored lead."""

    id: int
    name: Annotated[str, StringConstraints(min_length=1)]
    phone: str
    store: str
    source: Optional[str] = None
    lead_type: str
    booking_no: Optional[str] = None
    security_amount: Optional[float] = None
    enquiry_date: Optional[date] = None
    visit_date: Optional[date] = None
    function_date: Optional[date] = None
    return_date: Optional[date] = None
    closing_status: Optional[str] = None
    attended_by: Optional[str] = None
    call_status: str
    lead_status: str
    remarks: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    assigned_to_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }
