import uuid

from sqlalchemy import Boolean, Column, Float, Index, Integer, String, UniqueConstraint, Uuid

from .database import Base
from .timestamps import UTCDateTime


class Bot(Base):
    """Durable bot configuration, the source of truth for status and is_active"""
    __tablename__ = "bots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(128), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    contract_type = Column(String(30), nullable=False)
    initial_stake = Column(Float, nullable=False)
    duration = Column(Integer, nullable=False)
    duration_unit = Column(String(10), nullable=False)
    repeat_trade = Column(Boolean, nullable=False, default=False)
    symbol = Column(String(30), nullable=False)
    version = Column(String(20), nullable=False)

    status = Column(String(15), nullable=False, default="STOPPED")
    is_active = Column(Boolean, nullable=False, default=False)

    created_at = Column(UTCDateTime(timezone=True), nullable=False)
    updated_at = Column(UTCDateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "id", name="uq_bots_owner_bot"),
    )


class ContractAudit(Base):
    """One executed contract. Rows are inserted once and never updated or deleted."""
    __tablename__ = "contract_audits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    timestamp = Column(UTCDateTime(timezone=True), nullable=False)

    # No foreign key: the audit trail outlives the bot configuration
    owner_id = Column(String(128), nullable=False)
    bot_id = Column(Uuid, nullable=False)
    session_id = Column(String(64), nullable=False)
    strategy_used = Column(String(100), nullable=False)

    # Contract parameters as sent to the trading API
    proposal_id = Column(String(64), nullable=True)
    amount = Column(Float, nullable=False)
    basis = Column(String(20), nullable=False)
    contract_type = Column(String(30), nullable=False)
    currency = Column(String(10), nullable=False)
    duration = Column(Integer, nullable=False)
    duration_unit = Column(String(10), nullable=False)
    symbol = Column(String(30), nullable=False)
    barrier = Column(Float, nullable=True)

    outcome = Column(String(10), nullable=False)
    profit_or_loss = Column(Float, nullable=False)

    __table_args__ = (
        Index("ix_contract_audits_owner_timestamp", "owner_id", "timestamp"),
        Index("ix_contract_audits_bot_timestamp", "bot_id", "timestamp"),
        Index("ix_contract_audits_session_timestamp", "session_id", "timestamp"),
    )
