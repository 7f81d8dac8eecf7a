"""Pydantic schemas for sync log entries."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from leadsync.models.lead_enums import SyncChannel, SyncStatus, SyncTrigger


class SyncLogCreate(BaseModel):
    """A sync log entry about to be appended."""

    sync_type: SyncChannel
    trigger: SyncTrigger = SyncTrigger.AUTO
    last_sync_at: datetime
    last_sync_count: int = 0
    created_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    status: SyncStatus = SyncStatus.SUCCESS
    error_message: Optional[str] = None


class SyncLogResponse(SyncLogCreate):
    """Response model for a stored sync log entry."""

    id: int

    model_config = {
        "from_attributes": True,
    }
