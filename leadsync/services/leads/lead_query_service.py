"""Read side of the lead store: scoped, store-matched listings."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from leadsync.models.lead_models import LeadListFilters, LeadPage, Pagination
from leadsync.repositories.crud.leads_crud import CRUDLead
from leadsync.repositories.schemas.leads_schema import LeadResponse
from leadsync.services.leads.lead_scope import CallerContext, scope
from leadsync.services.stores.store_matcher import build_filter, matching_stores


class LeadQueryService:
    """Lists leads for a caller without exposing the alias tables to them."""

    def __init__(self, repository: CRUDLead) -> None:
        self.repository = repository

    def list_leads(
        self,
        db: Session,
        caller: CallerContext,
        raw_store_filter: Optional[str] = None,
        filters: Optional[LeadListFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> LeadPage:
        """
        Return one page of the leads ``caller`` may see.

        The store predicate is evaluated against the distinct stored store names,
        which turns it into an exact ``IN`` filter for the database.

        Args:
            db (Session): The database session.
            caller (CallerContext): Who is asking.
            raw_store_filter (Optional[str]): Store filter as typed by the user.
            filters (Optional[LeadListFilters]): Other filters.
            pagination (Optional[Pagination]): Page and page size.

        Returns:
            LeadPage: Matching leads, newest first.
        """
        filters = filters or LeadListFilters()
        pagination = pagination or Pagination()

        lead_scope = scope(build_filter(raw_store_filter), caller)
        stores = None
        if lead_scope.store_predicate is not None:
            stores = matching_stores(
                lead_scope.store_predicate, self.repository.distinct_stores(db)
            )

        equals = {
            column: value
            for column, value in (
                ("lead_type", filters.lead_type.value if filters.lead_type else None),
                ("call_status", filters.call_status),
                ("lead_status", filters.lead_status),
                ("source", filters.source),
            )
            if value
        }
        date_ranges = [
            ("enquiry_date", filters.enquiry_date_from, filters.enquiry_date_to),
            ("function_date", filters.function_date_from, filters.function_date_to),
        ]

        leads, total = self.repository.page(
            db,
            stores=stores,
            assigned_to_id=lead_scope.assigned_to_id,
            equals=equals,
            date_ranges=date_ranges,
            offset=(pagination.page - 1) * pagination.limit,
            limit=pagination.limit,
        )
        return LeadPage(
            items=[LeadResponse.model_validate(lead) for lead in leads],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )


def get_lead_query_service(repository: CRUDLead = Depends()) -> LeadQueryService:
    return LeadQueryService(repository)
