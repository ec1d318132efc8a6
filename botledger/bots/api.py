from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID
import logging

from ..database import MirrorStore, get_db, get_mirror
from .service import bots_service
from .dto import BotStatus, CreateBotDto, UpdateBotDto
from .responses import BotResponse, DisplayStatusResponse


router = APIRouter(tags=["bots"])

logger = logging.getLogger("api")


# Bot configuration endpoints
@router.post("/users/{owner_id}/bots", response_model=BotResponse, status_code=201)
async def create_bot(
    owner_id: str,
    dto: CreateBotDto,
    db: AsyncSession = Depends(get_db),
    mirror: MirrorStore = Depends(get_mirror),
):
    """Create a new bot configuration"""
    result = await bots_service.create_bot(db, mirror, owner_id, dto)
    if not result.mirror_synced:
        logger.warning(f"⚠️ Bot {result.id} created but display status not mirrored")
    return result


@router.get("/users/{owner_id}/bots", response_model=List[BotResponse])
async def get_bots(
    owner_id: str,
    status: Optional[BotStatus] = Query(None, description="Filter by lifecycle status"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of results"),
    db: AsyncSession = Depends(get_db),
):
    """Get the bots of an owner"""
    return await bots_service.get_bots(
        db, owner_id, status=status.value if status else None, limit=limit
    )


@router.get("/users/{owner_id}/bots/{bot_id}", response_model=BotResponse)
async def get_bot(
    owner_id: str,
    bot_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific bot configuration"""
    bot = await bots_service.get_bot(db, owner_id, bot_id)
    if not bot:
        raise HTTPException(status_code=404, detail="Bot not found")
    return bot


@router.patch("/users/{owner_id}/bots/{bot_id}", response_model=BotResponse)
async def update_bot(
    owner_id: str,
    bot_id: UUID,
    dto: UpdateBotDto,
    db: AsyncSession = Depends(get_db),
    mirror: MirrorStore = Depends(get_mirror),
):
    """Partially update a bot (status and is_active go together)"""
    return await bots_service.update_bot(db, mirror, owner_id, bot_id, dto)


@router.delete("/users/{owner_id}/bots/{bot_id}", status_code=204)
async def delete_bot(
    owner_id: str,
    bot_id: UUID,
    db: AsyncSession = Depends(get_db),
    mirror: MirrorStore = Depends(get_mirror),
):
    """Delete a bot configuration and its mirrored state"""
    deleted = await bots_service.delete_bot(db, mirror, owner_id, bot_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Bot not found")
    return Response(status_code=204)


# Display status endpoints
@router.post("/users/{owner_id}/bots/{bot_id}/display-status/sync", response_model=DisplayStatusResponse)
async def sync_display_status(
    owner_id: str,
    bot_id: UUID,
    db: AsyncSession = Depends(get_db),
    mirror: MirrorStore = Depends(get_mirror),
):
    """Push the stored status of a bot to the mirror again"""
    return await bots_service.sync_display_status(db, mirror, owner_id, bot_id)


@router.get("/bots/{bot_id}/display-status", response_model=DisplayStatusResponse)
async def get_display_status(
    bot_id: UUID,
    mirror: MirrorStore = Depends(get_mirror),
):
    """Get the mirrored display status of a bot"""
    display_status = await bots_service.get_display_status(mirror, bot_id)
    if not display_status:
        raise HTTPException(status_code=404, detail="Display status not found")
    return display_status
