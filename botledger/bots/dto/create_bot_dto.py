from pydantic import BaseModel, Field
from enum import Enum


class BotStatus(str, Enum):
    STOPPED = "STOPPED"
    PAUSED = "PAUSED"
    RUNNING = "RUNNING"
    INITIALIZING = "INITIALIZING"


class DurationUnit(str, Enum):
    TICK = "TICK"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"


class CreateBotDto(BaseModel):
    """DTO for creating a new bot configuration"""

    name: str = Field(..., min_length=1, max_length=100, description="Display name of the bot")

    # Contract parameters
    contract_type: str = Field(..., min_length=1, max_length=30, description="CALL, PUT, DIGITMATCH, DIGITDIFF, TURBOS, ...")
    initial_stake: float = Field(..., gt=0, description="Stake of the first contract")
    duration: int = Field(..., ge=1, description="Contract duration, in duration_unit")
    duration_unit: DurationUnit = Field(..., description="Unit of the contract duration")
    repeat_trade: bool = Field(False, description="Keep trading after a contract settles")
    symbol: str = Field(..., min_length=1, max_length=30, description="Underlying symbol")
    version: str = Field("1.0.0", max_length=20, description="Bot configuration version")

    # Lifecycle
    status: BotStatus = Field(BotStatus.STOPPED, description="Initial lifecycle status")
    is_active: bool = Field(False, description="Whether the bot is switched on")

    class Config:
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "name": "MyAwesomeBot",
                "contract_type": "CALL",
                "initial_stake": 10,
                "duration": 5,
                "duration_unit": "TICK",
                "repeat_trade": True,
                "symbol": "R_100",
                "version": "1.0.0",
                "status": "INITIALIZING",
                "is_active": False
            }
        }
