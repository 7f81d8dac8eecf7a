"""CRUD helpers for the report archive."""

from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from leadsync.repositories.models.reports_model import Report


class CRUDReport:
    """Database access for archived leads."""

    def find_archived(
        self,
        db: Session,
        phone: str,
        booking_no: Optional[str] = None,
        enquiry_date: Optional[date] = None,
    ) -> Optional[Report]:
        """
        Return an archived entry for ``phone``, narrowed by booking number or date.

        Args:
            db (Session): The database session.
            phone (str): Ten-digit phone number.
            booking_no (Optional[str]): When given, the archive entry must carry it.
            enquiry_date (Optional[date]): When given, the archive entry must carry it.
        """
        query = db.query(Report).filter(Report.phone == phone)
        if booking_no:
            query = query.filter(Report.booking_no == booking_no)
        if enquiry_date is not None:
            query = query.filter(Report.enquiry_date == enquiry_date)
        return query.first()

    def create(self, db: Session, fields: Dict[str, Any]) -> Report:
        report = Report(**fields)
        db.add(report)
        db.commit()
        db.refresh(report)
        return report
