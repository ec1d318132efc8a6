import uuid
import logging
from typing import List, Sequence

from sqlalchemy import select, asc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import ContractAudit
from ...database.timestamps import as_utc, utc_now
from ...exceptions import PersistenceError, ValidationError
from ..dto import AuditFiltersDto, CreateTradeAuditDto
from ..responses import StreakReportResponse, TradeAuditResponse
from .streaks import analyze_streaks

logger = logging.getLogger(__name__)


class AuditsService:
    """Append-only trade audit trail and streak analysis"""

    async def append_audit(self, db: AsyncSession, dto: CreateTradeAuditDto) -> TradeAuditResponse:
        """Insert one audit record, stamping id and timestamp at write time"""
        audit = ContractAudit(id=uuid.uuid4(), timestamp=utc_now(), **dto.model_dump())

        db.add(audit)
        try:
            await db.commit()
            await db.refresh(audit)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error adding contract audit: {e}")
            raise PersistenceError("Failed to add contract audit.") from e

        return TradeAuditResponse.model_validate(audit)

    async def get_audits(self, db: AsyncSession, filters: AuditFiltersDto) -> List[TradeAuditResponse]:
        """Get audits matching every supplied filter, always oldest first"""
        if filters.start_time and filters.end_time and as_utc(filters.start_time) > as_utc(filters.end_time):
            raise ValidationError("start_time must not be after end_time")

        query = select(ContractAudit)

        if filters.owner_id:
            query = query.filter(ContractAudit.owner_id == filters.owner_id)
        if filters.bot_id:
            query = query.filter(ContractAudit.bot_id == filters.bot_id)
        if filters.session_id:
            query = query.filter(ContractAudit.session_id == filters.session_id)
        if filters.strategy_used:
            query = query.filter(ContractAudit.strategy_used == filters.strategy_used)
        if filters.start_time:
            query = query.filter(ContractAudit.timestamp >= filters.start_time)
        if filters.end_time:
            query = query.filter(ContractAudit.timestamp <= filters.end_time)

        # Streak analysis relies on this ordering
        query = query.order_by(asc(ContractAudit.timestamp), asc(ContractAudit.id))

        if filters.limit:
            query = query.limit(filters.limit)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Error getting contract audits: {e}")
            raise PersistenceError("Failed to retrieve contract audits.") from e

        return [TradeAuditResponse.model_validate(audit) for audit in result.scalars().all()]

    def analyze_streaks(self, audits: Sequence[TradeAuditResponse]) -> StreakReportResponse:
        """Longest winning and losing streaks of chronologically ordered audits"""
        return analyze_streaks(audits)

    async def get_streaks(self, db: AsyncSession, filters: AuditFiltersDto) -> StreakReportResponse:
        audits = await self.get_audits(db, filters)
        report = self.analyze_streaks(audits)
        logger.info(
            f"Streaks over {report.trades_analyzed} audits: "
            f"win={report.longest_win.length if report.longest_win else 0} "
            f"loss={report.longest_loss.length if report.longest_loss else 0}"
        )
        return report


# Create service instance
audits_service = AuditsService()
