"""
Bot Ledger API

FastAPI backend that keeps trading bot configurations, their live session
metrics and an append-only audit trail of every trade.
Bot configurations and trade audits live in SQL; session metrics and the
display status of each bot are mirrored to Redis for cheap reads.
"""

__version__ = "1.0.0"
