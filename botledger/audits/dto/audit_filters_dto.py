from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class AuditFiltersDto(BaseModel):
    """Conjunctive filters for audit queries. Time bounds are inclusive."""
    owner_id: Optional[str] = None
    bot_id: Optional[UUID] = None
    session_id: Optional[str] = None
    strategy_used: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    limit: Optional[int] = Field(None, ge=1)
