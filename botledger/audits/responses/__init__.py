from .trade_audit_response import TradeAuditResponse
from .trade_streak_response import TradeStreakResponse, StreakReportResponse

__all__ = [
    "TradeAuditResponse",
    "TradeStreakResponse",
    "StreakReportResponse",
]
