"""SQLAlchemy model for leads moved to the report archive after being worked."""

from sqlalchemy import JSON, Column, Date, ForeignKey, Integer, String, TIMESTAMP
from sqlalchemy.sql import func

from leadsync.repositories.database import Base


class Report(Base):  # type: ignore[misc]
    """Snapshot of a lead that left the active pipeline. Syncs must not revive it."""

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone = Column(String(10), nullable=False, index=True)
    name = Column(String(160), nullable=True)
    store = Column(String(120), nullable=True)
    lead_type = Column(String(32), nullable=True)
    booking_no = Column(String(60), nullable=True)
    enquiry_date = Column(Date, nullable=True)
    snapshot = Column(JSON, nullable=True)
    note = Column(String(120), nullable=False, default="moved after edit")
    edited_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    edited_at = Column(TIMESTAMP(timezone=False), server_default=func.now())
