"""SQLAlchemy model for leads worked by the telecalling team."""

from sqlalchemy import (
    Column,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TIMESTAMP,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leadsync.repositories.database import Base

# Fields holding human work product. Automated syncs only overwrite them when the
# incoming record carries a value.
TELECALLER_FIELDS = (
    "call_status",
    "lead_status",
    "remarks",
    "follow_up_date",
    "assigned_to_id",
    "assigned_at",
)


class Lead(Base):  # type: ignore[misc]
    """
    One customer interaction.

    Booking, rent-out and return leads stand for one real-world transaction and are
    updated in place. Walk-in and loss-of-sale leads stand for one store visit, so
    the same customer may own several rows.
    """

    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(160), nullable=False)
    phone = Column(String(10), nullable=False)
    store = Column(String(120), nullable=False)

    source = Column(String(60), nullable=True)
    lead_type = Column(String(32), nullable=False, default="general")

    booking_no = Column(String(60), nullable=True)
    security_amount = Column(Float, nullable=True)
    enquiry_type = Column(String(160), nullable=True)
    enquiry_date = Column(Date, nullable=True)
    visit_date = Column(Date, nullable=True)
    function_date = Column(Date, nullable=True)
    return_date = Column(Date, nullable=True)
    reason = Column(Text, nullable=True)
    closing_status = Column(String(60), nullable=True)
    attended_by = Column(String(120), nullable=True)

    call_status = Column(String(40), nullable=False, default="Not Called")
    lead_status = Column(String(40), nullable=False, default="No Status")
    remarks = Column(Text, nullable=True)
    follow_up_date = Column(TIMESTAMP(timezone=False), nullable=True)
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    assigned_at = Column(TIMESTAMP(timezone=False), nullable=True)

    created_at = Column(TIMESTAMP(timezone=False), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=False), nullable=True, onupdate=func.now()
    )

    assigned_to = relationship("User", back_populates="assigned_leads")

    __table_args__ = (
        Index("ix_leads_booking_identity", "booking_no", "phone", "lead_type"),
        Index("ix_leads_visit_identity", "phone", "name", "lead_type", "store"),
        Index("ix_leads_store", "store"),
        Index("ix_leads_assigned_to", "assigned_to_id"),
    )

    __mapper_args__ = {"eager_defaults": True}
