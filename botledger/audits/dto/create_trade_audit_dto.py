from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from enum import Enum


class TradeOutcome(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    PENDING = "PENDING"


class CreateTradeAuditDto(BaseModel):
    """DTO for appending one contract to the audit trail (id and timestamp are assigned on insert)"""

    # Ownership
    owner_id: str = Field(..., min_length=1, max_length=128, description="Owner of the bot")
    bot_id: UUID = Field(..., description="Bot that placed the contract")
    session_id: str = Field(..., min_length=1, max_length=64, description="Trading run the contract belongs to")
    strategy_used: str = Field(..., min_length=1, max_length=100, description="Strategy that decided the trade")

    # Contract parameters
    proposal_id: Optional[str] = Field(None, max_length=64, description="Proposal id returned by the trading API")
    amount: float = Field(..., ge=0, description="Stake amount for this contract")
    basis: str = Field("stake", max_length=20, description="stake or payout")
    contract_type: str = Field(..., min_length=1, max_length=30)
    currency: str = Field(..., min_length=1, max_length=10)
    duration: int = Field(..., ge=1)
    duration_unit: str = Field(..., min_length=1, max_length=10)
    symbol: str = Field(..., min_length=1, max_length=30)
    barrier: Optional[float] = Field(None, description="Barrier for contract types that use one")

    # Result
    outcome: TradeOutcome = Field(..., description="WIN, LOSS or PENDING")
    profit_or_loss: float = Field(..., description="Positive for a win, negative for a loss")

    class Config:
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "owner_id": "user123",
                "bot_id": "3f1c3f7e-5b7a-4d43-9d55-2c0f3a7c9b11",
                "session_id": "session-1718000000000",
                "strategy_used": "MartingaleV1",
                "proposal_id": "1",
                "amount": 10,
                "basis": "stake",
                "contract_type": "CALL",
                "currency": "USD",
                "duration": 5,
                "duration_unit": "TICK",
                "symbol": "R_100",
                "barrier": 1.23,
                "outcome": "WIN",
                "profit_or_loss": 5
            }
        }
