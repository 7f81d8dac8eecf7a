"""
CRUD operations for managing leads in the database.

This module provides a `CRUDLead` class with methods to:
- Look up a lead by an identity key.
- Create a lead or update selected fields of an existing one.
- List the distinct stored store names and page through filtered leads.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from leadsync.repositories.models.leads_model import Lead


class CRUDLead:
    """
    Repository class for handling database operations related to leads.

    Every write commits immediately: one round trip per record, no batching.
    """

    def find_by_identity(self, db: Session, key: Dict[str, Any]) -> Optional[Lead]:
        """
        Return the oldest lead whose columns equal every value of ``key``.

        Args:
            db (Session): The database session.
            key (Dict[str, Any]): Column name to value; ``None`` matches NULL.

        Returns:
            Optional[Lead]: The matching lead, if any.
        """
        return db.query(Lead).filter_by(**key).order_by(Lead.id.asc()).first()

    def create(self, db: Session, fields: Dict[str, Any]) -> Lead:
        lead = Lead(**fields)
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead

    def update(self, db: Session, lead: Lead, fields: Dict[str, Any]) -> Lead:
        for field, value in fields.items():
            setattr(lead, field, value)
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead

    def distinct_stores(self, db: Session) -> List[str]:
        """Return every distinct store value currently stored on a lead."""
        rows = db.query(Lead.store).distinct().all()
        return [row[0] for row in rows if row[0]]

    def page(
        self,
        db: Session,
        *,
        stores: Optional[Iterable[str]] = None,
        assigned_to_id: Optional[int] = None,
        equals: Optional[Dict[str, Any]] = None,
        date_ranges: Sequence[Tuple[str, Optional[date], Optional[date]]] = (),
        offset: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Lead], int]:
        """
        Return one page of leads, newest first, and the total match count.

        Args:
            db (Session): The database session.
            stores (Optional[Iterable[str]]): Restrict to these exact store values.
                An empty iterable matches nothing.
            assigned_to_id (Optional[int]): Restrict to leads assigned to this user.
            equals (Optional[Dict[str, Any]]): Column equality filters.
            date_ranges: ``(column, start, end)`` triples, both bounds inclusive.
            offset (int): Rows to skip.
            limit (int): Maximum rows returned.
        """
        query = db.query(Lead)
        if stores is not None:
            query = query.filter(Lead.store.in_(list(stores)))
        if assigned_to_id is not None:
            query = query.filter(Lead.assigned_to_id == assigned_to_id)
        if equals:
            query = query.filter_by(**equals)
        for column_name, start, end in date_ranges:
            column = getattr(Lead, column_name)
            if start is not None:
                query = query.filter(column >= start)
            if end is not None:
                query = query.filter(column <= end)

        total = query.count()
        leads = (
            query.order_by(Lead.created_at.desc(), Lead.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return leads, total
