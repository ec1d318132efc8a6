from pydantic import BaseModel, Field
from uuid import UUID


class PublishSessionStateDto(BaseModel):
    """
    Complete snapshot of a bot's live session metrics.

    Every publish replaces the stored snapshot, so all fields are required.
    Keeping number_of_runs equal to number_of_wins + number_of_losses is up
    to the caller.
    """
    bot_id: UUID = Field(..., description="Bot the session belongs to")
    session_id: str = Field(..., min_length=1, max_length=64, description="Changes once per trading run")

    number_of_runs: int = Field(0, ge=0)
    number_of_wins: int = Field(0, ge=0)
    number_of_losses: int = Field(0, ge=0)

    total_stake: float = Field(0.0, ge=0)
    total_payout: float = Field(0.0, ge=0)
    total_profit: float = Field(0.0)
    commission_payout: float = Field(0.0)
    real_commission_payout: float = Field(0.0)

    current_strategy: str = Field(..., min_length=1, max_length=100)

    class Config:
        json_schema_extra = {
            "example": {
                "bot_id": "3f1c3f7e-5b7a-4d43-9d55-2c0f3a7c9b11",
                "session_id": "session-1718000000000",
                "number_of_runs": 3,
                "number_of_wins": 2,
                "number_of_losses": 1,
                "total_stake": 30,
                "total_payout": 30,
                "total_profit": 5,
                "commission_payout": 0,
                "real_commission_payout": 0,
                "current_strategy": "MartingaleV1"
            }
        }
