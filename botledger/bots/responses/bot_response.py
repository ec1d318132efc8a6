from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID


class BotResponse(BaseModel):
    """Response schema for bot configurations"""
    id: UUID
    owner_id: str

    name: str
    contract_type: str
    initial_stake: float
    duration: int
    duration_unit: str
    repeat_trade: bool
    symbol: str
    version: str

    status: str
    is_active: bool

    created_at: datetime
    updated_at: datetime

    # Outcome of the display-status mirror write that followed this change.
    # None when the change did not touch the mirrored fields.
    mirror_synced: Optional[bool] = None

    class Config:
        from_attributes = True
