from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from .trade_audit_response import TradeAuditResponse


class TradeStreakResponse(BaseModel):
    """Maximal run of consecutive trades with the same outcome"""
    type: str  # WIN/LOSS
    length: int
    start_timestamp: datetime
    end_timestamp: datetime
    trades: List[TradeAuditResponse]


class StreakReportResponse(BaseModel):
    """Longest winning and losing streaks of a chronological slice of audits"""
    longest_win: Optional[TradeStreakResponse]
    longest_loss: Optional[TradeStreakResponse]
    trades_analyzed: int
