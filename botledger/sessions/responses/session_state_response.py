from pydantic import BaseModel
from datetime import datetime
from uuid import UUID


class SessionStateResponse(BaseModel):
    """Live session metrics as stored in the mirror"""
    bot_id: UUID
    session_id: str
    number_of_runs: int
    number_of_wins: int
    number_of_losses: int
    total_stake: float
    total_payout: float
    total_profit: float
    commission_payout: float
    real_commission_payout: float
    current_strategy: str
    last_updated: datetime
