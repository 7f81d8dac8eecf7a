"""
Database configuration module.

Sets up the SQLAlchemy engine, session factory, and declarative base for ORM models.

Exports:
    - engine: SQLAlchemy database engine.
    - SessionLocal: Session factory for database interactions.
    - Base: Declarative base class for defining ORM models.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from leadsync.configs import settings

DB_URL = settings.DATABASE_URL
if not DB_URL:
    raise ValueError("DATABASE_URL environment variable is not set")

if DB_URL.startswith("sqlite"):
    engine = create_engine(DB_URL, connect_args={"check_same_thread": False})
else:
    engine = create_engine(DB_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
