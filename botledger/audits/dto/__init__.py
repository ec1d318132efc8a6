from .create_trade_audit_dto import CreateTradeAuditDto, TradeOutcome
from .audit_filters_dto import AuditFiltersDto

__all__ = [
    "CreateTradeAuditDto",
    "AuditFiltersDto",
    "TradeOutcome",
]
