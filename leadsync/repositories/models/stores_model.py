"""SQLAlchemy model for the store directory."""

from sqlalchemy import Boolean, Column, Integer, String, TIMESTAMP
from sqlalchemy.sql import func

from leadsync.repositories.database import Base


class Store(Base):  # type: ignore[misc]
    """A store location; active stores with a code are queried by the API syncs."""

    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    code = Column(String(20), nullable=True)
    brand = Column(String(40), nullable=True)
    city = Column(String(80), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=False), server_default=func.now())
