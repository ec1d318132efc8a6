from pydantic import BaseModel, Field
from typing import Optional

from .create_bot_dto import BotStatus, DurationUnit


class UpdateBotDto(BaseModel):
    """
    DTO for a partial bot update.

    status and is_active are mirrored to Redis as a pair, so an update that
    changes one of them has to send both.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    contract_type: Optional[str] = Field(None, min_length=1, max_length=30)
    initial_stake: Optional[float] = Field(None, gt=0)
    duration: Optional[int] = Field(None, ge=1)
    duration_unit: Optional[DurationUnit] = None
    repeat_trade: Optional[bool] = None
    symbol: Optional[str] = Field(None, min_length=1, max_length=30)
    version: Optional[str] = Field(None, max_length=20)
    status: Optional[BotStatus] = None
    is_active: Optional[bool] = None

    class Config:
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "status": "RUNNING",
                "is_active": True
            }
        }
