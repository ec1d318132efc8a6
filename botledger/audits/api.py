from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID
from datetime import datetime
import logging

from ..database import get_db
from .service import audits_service
from .dto import AuditFiltersDto, CreateTradeAuditDto
from .responses import StreakReportResponse, TradeAuditResponse


router = APIRouter(prefix="/audits", tags=["audits"])

logger = logging.getLogger("api")


def audit_filters(
    owner_id: Optional[str] = Query(None, description="Filter by owner"),
    bot_id: Optional[UUID] = Query(None, description="Filter by bot"),
    session_id: Optional[str] = Query(None, description="Filter by trading session"),
    strategy_used: Optional[str] = Query(None, description="Filter by strategy"),
    start_time: Optional[datetime] = Query(None, description="Inclusive lower bound on timestamp"),
    end_time: Optional[datetime] = Query(None, description="Inclusive upper bound on timestamp"),
    limit: Optional[int] = Query(None, ge=1, le=10000, description="Maximum number of results"),
) -> AuditFiltersDto:
    return AuditFiltersDto(
        owner_id=owner_id, bot_id=bot_id, session_id=session_id, strategy_used=strategy_used,
        start_time=start_time, end_time=end_time, limit=limit,
    )


@router.post("", response_model=TradeAuditResponse, status_code=201)
async def append_audit(
    dto: CreateTradeAuditDto,
    db: AsyncSession = Depends(get_db),
):
    """Append a contract to the audit trail"""
    result = await audits_service.append_audit(db, dto)
    logger.info(f"✅ Contract audit recorded: {result.id} ({result.outcome})")
    return result


@router.get("", response_model=List[TradeAuditResponse])
async def get_audits(
    filters: AuditFiltersDto = Depends(audit_filters),
    db: AsyncSession = Depends(get_db),
):
    """Get audits with optional filtering, ordered by timestamp ascending"""
    return await audits_service.get_audits(db, filters)


@router.get("/streaks", response_model=StreakReportResponse)
async def get_streaks(
    filters: AuditFiltersDto = Depends(audit_filters),
    db: AsyncSession = Depends(get_db),
):
    """Longest winning and losing streaks over the filtered audits"""
    return await audits_service.get_streaks(db, filters)
