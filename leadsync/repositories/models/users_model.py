"""SQLAlchemy model for staff members who can be assigned leads."""

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from leadsync.repositories.database import Base


class User(Base):  # type: ignore[misc]
    """Admin, team lead or telecaller. Team leads are bound to one store."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String(40), nullable=False, unique=True)
    name = Column(String(120), nullable=False)
    store = Column(String(120), nullable=False)
    role = Column(String(20), nullable=False, default="telecaller")
    is_active = Column(Boolean, nullable=False, default=True)

    assigned_leads = relationship("Lead", back_populates="assigned_to")
