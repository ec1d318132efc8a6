from .executor import TradeExecutor, TradeResult
from .service import RunSummary, TradingRunService, apply_trade, trading_run_service

__all__ = [
    "TradeExecutor",
    "TradeResult",
    "RunSummary",
    "TradingRunService",
    "apply_trade",
    "trading_run_service",
]
