from fastapi import APIRouter, Depends, HTTPException
from uuid import UUID

from ..database import MirrorStore, get_mirror
from ..exceptions import ValidationError
from .service import sessions_service
from .dto import PublishSessionStateDto
from .responses import SessionStateResponse


router = APIRouter(prefix="/bots", tags=["sessions"])


@router.put("/{bot_id}/session", response_model=SessionStateResponse)
async def publish_session_state(
    bot_id: UUID,
    dto: PublishSessionStateDto,
    mirror: MirrorStore = Depends(get_mirror),
):
    """Replace the live session metrics of a bot"""
    if dto.bot_id != bot_id:
        raise ValidationError("bot_id in body does not match the URL")
    return await sessions_service.publish_session_state(mirror, dto)


@router.get("/{bot_id}/session", response_model=SessionStateResponse)
async def get_session_state(
    bot_id: UUID,
    mirror: MirrorStore = Depends(get_mirror),
):
    """Get the live session metrics of a bot"""
    state = await sessions_service.get_session_state(mirror, bot_id)
    if not state:
        raise HTTPException(status_code=404, detail="Session state not found")
    return state
