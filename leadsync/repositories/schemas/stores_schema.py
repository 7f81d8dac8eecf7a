"""Pydantic schemas for the store directory."""

from typing import Annotated, Optional

from pydantic import BaseModel, StringConstraints


class StoreCreate(BaseModel):
    """Payload required to register a store."""

    name: Annotated[str, StringConstraints(min_length=1, max_length=120)]
    code: Optional[str] = None
    brand: Optional[str] = None
    city: Optional[str] = None
    is_active: bool = True
