"""
Database session dependency.

Provides a SQLAlchemy database session for use in request handling.
Ensures proper cleanup after use.
"""

from typing import Generator

from sqlalchemy.orm import Session

from leadsync.repositories.database import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Yield a database session and ensure it is closed after use.

    This function is typically used as a FastAPI dependency to provide
    a database session per request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
