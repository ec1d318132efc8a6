from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DisplayStatusResponse(BaseModel):
    """Mirrored status projection of a bot, for display only"""
    status: str
    is_active: bool
    last_status_update: Optional[datetime]
