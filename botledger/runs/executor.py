from typing import Optional, Protocol

from pydantic import BaseModel, Field

from ..audits.dto import TradeOutcome
from ..bots.responses import BotResponse


class TradeResult(BaseModel):
    """What the trading API reports back for one settled contract"""
    outcome: TradeOutcome
    profit_or_loss: float
    amount_staked: float = Field(..., ge=0)

    # Optional details, derived from the above when the API leaves them out
    payout: Optional[float] = Field(None, ge=0)
    commission: float = 0.0
    real_commission: float = 0.0
    proposal_id: Optional[str] = None
    basis: str = "stake"
    currency: str = "USD"
    barrier: Optional[float] = None

    class Config:
        use_enum_values = True


class TradeExecutor(Protocol):
    """Places one contract for a bot and waits for it to settle"""

    async def execute(self, bot: BotResponse) -> TradeResult:
        ...
