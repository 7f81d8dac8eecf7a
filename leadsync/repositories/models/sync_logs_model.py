"""This module defines the SyncLog model, the append-only history of sync runs."""

from sqlalchemy import Column, Index, Integer, String, Text, TIMESTAMP

from leadsync.repositories.database import Base


class SyncLog(Base):  # type: ignore[misc]
    """
    Represents one finished (or aborted) sync run of a channel.

    Attributes:
        id (int): Primary key.
        sync_type (str): Channel name ("booking", "return", "rentout", "walkin", "lossofsale", "store").
        trigger (str): What started the run ("manual" or "auto").
        last_sync_at (timestamp): Wall-clock time the run finished; the watermark.
        last_sync_count (int): Net-new plus updated records.
        status (str): "success", "partial" or "failed".
        error_message (str): Summary of what went wrong, if anything.
    """

    __tablename__ = "sync_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sync_type = Column(String(20), nullable=False)
    trigger = Column(String(10), nullable=False, default="auto")
    last_sync_at = Column(TIMESTAMP(timezone=False), nullable=False)
    last_sync_count = Column(Integer, nullable=False, default=0)
    created_count = Column(Integer, nullable=False, default=0)
    updated_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    failed_count = Column(Integer, nullable=False, default=0)
    status = Column(String(10), nullable=False, default="success")
    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_sync_logs_type_status_at", "sync_type", "status", "last_sync_at"),
    )
