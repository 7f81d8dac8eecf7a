"""Request and response models for the lead and sync controllers."""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from leadsync.models.lead_enums import LeadType, SyncStatus
from leadsync.repositories.schemas.leads_schema import LeadResponse


class LeadListFilters(BaseModel):
    """Non-store filters of a lead listing."""

    lead_type: Optional[LeadType] = Field(default=None, description="Lead classification.")
    call_status: Optional[str] = Field(default=None, description="Exact call status.")
    lead_status: Optional[str] = Field(default=None, description="Exact lead status.")
    source: Optional[str] = Field(default=None, description="Exact provenance label.")
    enquiry_date_from: Optional[date] = Field(
        default=None, description="First enquiry date included."
    )
    enquiry_date_to: Optional[date] = Field(
        default=None, description="Last enquiry date included."
    )
    function_date_from: Optional[date] = None
    function_date_to: Optional[date] = None


class Pagination(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1, le=500)


class LeadPage(BaseModel):
    """Data model for one page of leads."""

    items: List[LeadResponse] = Field(..., description="Leads on this page, newest first.")
    total: int = Field(..., description="Number of leads matching the filters.")
    page: int
    limit: int


class ChannelSummary(BaseModel):
    """Counts of one channel run. Never carries raw internal errors."""

    status: SyncStatus = Field(..., description="Outcome of the channel run.")
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    upstream_errors: int = 0
    samples: List[Dict[str, Any]] = Field(
        default_factory=list, description="Bounded sample of skip and failure reasons."
    )


class SyncRunSummary(BaseModel):
    """Data model for the response of a sync run request."""

    started: bool = Field(..., description="False when another sync run was in progress.")
    channels: Dict[str, ChannelSummary] = Field(default_factory=dict)


class IngestRequest(BaseModel):
    """Spreadsheet rows pushed for one visit channel."""

    rows: List[Dict[str, Any]] = Field(..., description="Raw rows keyed by column name.")
    reimport: bool = Field(
        default=False, description="Whether this spreadsheet was imported before."
    )
    store: Optional[str] = Field(default=None, description="Store applied to every row.")
    brand: Optional[str] = None
    location: Optional[str] = None
