"""List leads for the telecalling UI."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from leadsync.controllers.caller_context import get_caller_context
from leadsync.models.lead_enums import LeadType
from leadsync.models.lead_models import LeadListFilters, LeadPage, Pagination
from leadsync.repositories.dependencies import get_db
from leadsync.services.leads.lead_query_service import (
    LeadQueryService,
    get_lead_query_service,
)
from leadsync.services.leads.lead_scope import CallerContext

lead_router = APIRouter(prefix="/leads", tags=["Leads"])


@lead_router.get(
    "",
    responses={
        200: {"model": LeadPage, "description": "Successful Response"},
    },
)
def list_leads(
    store: Optional[str] = Query(default=None, description="Store as typed by the user."),
    lead_type: Optional[LeadType] = None,
    call_status: Optional[str] = None,
    lead_status: Optional[str] = None,
    source: Optional[str] = None,
    enquiry_date_from: Optional[date] = None,
    enquiry_date_to: Optional[date] = None,
    function_date_from: Optional[date] = None,
    function_date_to: Optional[date] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=500),
    caller: CallerContext = Depends(get_caller_context),
    db: Session = Depends(get_db),
    service: LeadQueryService = Depends(get_lead_query_service),
) -> LeadPage:
    """
    Return one page of the leads visible to the caller.

    Team leads only ever see their own store and telecallers only the leads
    assigned to them, whatever store filter they send.
    """
    filters = LeadListFilters(
        lead_type=lead_type,
        call_status=call_status,
        lead_status=lead_status,
        source=source,
        enquiry_date_from=enquiry_date_from,
        enquiry_date_to=enquiry_date_to,
        function_date_from=function_date_from,
        function_date_to=function_date_to,
    )
    return service.list_leads(
        db, caller, store, filters, Pagination(page=page, limit=limit)
    )
