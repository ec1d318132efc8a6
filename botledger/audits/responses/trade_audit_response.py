from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID


class TradeAuditResponse(BaseModel):
    """Response schema for trade audit records"""
    id: UUID
    timestamp: datetime

    owner_id: str
    bot_id: UUID
    session_id: str
    strategy_used: str

    proposal_id: Optional[str]
    amount: float
    basis: str
    contract_type: str
    currency: str
    duration: int
    duration_unit: str
    symbol: str
    barrier: Optional[float]

    outcome: str
    profit_or_loss: float

    class Config:
        from_attributes = True
