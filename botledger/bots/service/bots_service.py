import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import Bot, MirrorStore
from ...database.timestamps import utc_now
from ...exceptions import BotNotFoundError, PersistenceError, ValidationError
from ..dto import CreateBotDto, UpdateBotDto
from ..responses import BotResponse, DisplayStatusResponse

logger = logging.getLogger(__name__)

MIRRORED_FIELDS = ("status", "is_active")


class BotsService:
    """
    Service class for the bot lifecycle.

    The SQL row is authoritative. After each committed change the status pair
    is pushed to the Redis display-status mirror as a separate step whose
    failure is logged and reported through ``mirror_synced``, never raised.
    ``sync_display_status`` repeats that step on demand.
    """

    async def _load_bot(self, db: AsyncSession, owner_id: str, bot_id: UUID) -> Optional[Bot]:
        try:
            result = await db.execute(
                select(Bot).filter(and_(Bot.owner_id == owner_id, Bot.id == bot_id))
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting bot {bot_id}: {e}")
            raise PersistenceError("Failed to retrieve bot.") from e
        return result.scalars().first()

    async def _commit(self, db: AsyncSession, action: str, bot: Optional[Bot] = None) -> None:
        try:
            await db.commit()
            if bot is not None:
                await db.refresh(bot)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error trying to {action}: {e}")
            raise PersistenceError(f"Failed to {action}.") from e

    # =================== LIFECYCLE ===================

    async def create_bot(
        self, db: AsyncSession, mirror: MirrorStore, owner_id: str, dto: CreateBotDto
    ) -> BotResponse:
        """Create a bot configuration, then mirror its status"""
        now = utc_now()
        bot = Bot(owner_id=owner_id, created_at=now, updated_at=now, **dto.model_dump())

        db.add(bot)
        await self._commit(db, "create bot", bot)
        logger.info(f"Bot {bot.id} created for owner {owner_id} with status {bot.status}")

        response = BotResponse.model_validate(bot)
        response.mirror_synced = await self.mirror_display_status(mirror, bot.id, bot.status, bot.is_active)
        return response

    async def get_bot(self, db: AsyncSession, owner_id: str, bot_id: UUID) -> Optional[BotResponse]:
        """Get a bot configuration, or None when it does not exist"""
        bot = await self._load_bot(db, owner_id, bot_id)
        if bot:
            return BotResponse.model_validate(bot)
        return None

    async def get_bots(
        self,
        db: AsyncSession,
        owner_id: str,
        status: Optional[str] = None,
        limit: int = 100
    ) -> List[BotResponse]:
        """Get the bots of an owner, oldest first"""
        query = select(Bot).filter(Bot.owner_id == owner_id).order_by(Bot.created_at, Bot.id)
        if status:
            query = query.filter(Bot.status == status)
        query = query.limit(limit)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Error listing bots of owner {owner_id}: {e}")
            raise PersistenceError("Failed to retrieve bots.") from e

        return [BotResponse.model_validate(bot) for bot in result.scalars().all()]

    async def update_bot(
        self,
        db: AsyncSession,
        mirror: MirrorStore,
        owner_id: str,
        bot_id: UUID,
        dto: UpdateBotDto
    ) -> BotResponse:
        """Apply a partial update and refresh updated_at"""
        update_data = dto.model_dump(exclude_unset=True)

        null_fields = sorted(field for field, value in update_data.items() if value is None)
        if null_fields:
            raise ValidationError(f"Fields cannot be set to null: {', '.join(null_fields)}")

        touched = [field for field in MIRRORED_FIELDS if field in update_data]
        if touched and len(touched) != len(MIRRORED_FIELDS):
            raise ValidationError("status and is_active must be updated together")

        bot = await self._load_bot(db, owner_id, bot_id)
        if not bot:
            raise BotNotFoundError(owner_id, bot_id)

        for field, value in update_data.items():
            setattr(bot, field, value)

        # Never move updated_at backwards, even if the clock does
        bot.updated_at = max(utc_now(), bot.updated_at)

        await self._commit(db, "update bot", bot)
        logger.info(f"Bot {bot_id} updated: {', '.join(update_data) or 'no fields'}")

        response = BotResponse.model_validate(bot)
        if touched:
            response.mirror_synced = await self.mirror_display_status(
                mirror, bot_id, update_data["status"], update_data["is_active"]
            )
        return response

    async def delete_bot(self, db: AsyncSession, mirror: MirrorStore, owner_id: str, bot_id: UUID) -> bool:
        """
        Delete a bot configuration and its mirror entries.

        Returns False when the owner has no such bot, leaving the mirror
        untouched. Trade audits of the bot are kept.
        """
        bot = await self._load_bot(db, owner_id, bot_id)
        deleted = bot is not None

        if deleted:
            await db.delete(bot)
            await self._commit(db, "delete bot")
            logger.info(f"Bot {bot_id} deleted for owner {owner_id}")

            try:
                await mirror.remove_bot(bot_id)
            except PersistenceError as e:
                logger.error(f"Error removing mirror entries of bot {bot_id}: {e}")

        return deleted

    # =================== DISPLAY STATUS MIRROR ===================

    async def mirror_display_status(
        self, mirror: MirrorStore, bot_id: UUID, status: str, is_active: bool
    ) -> bool:
        """Push the status pair to the mirror. Returns False instead of raising on failure."""
        try:
            await mirror.merge_display_status(bot_id, status, is_active)
        except PersistenceError as e:
            logger.error(f"Error updating display status of bot {bot_id} in mirror: {e}")
            return False
        return True

    async def sync_display_status(
        self, db: AsyncSession, mirror: MirrorStore, owner_id: str, bot_id: UUID
    ) -> DisplayStatusResponse:
        """Re-read the authoritative row and mirror it again. Mirror failures are raised here."""
        bot = await self._load_bot(db, owner_id, bot_id)
        if not bot:
            raise BotNotFoundError(owner_id, bot_id)

        display_status = await mirror.merge_display_status(bot.id, bot.status, bot.is_active)
        logger.info(f"Display status of bot {bot_id} synced: {bot.status}, active={bot.is_active}")
        return DisplayStatusResponse(**display_status)

    async def get_display_status(self, mirror: MirrorStore, bot_id: UUID) -> Optional[DisplayStatusResponse]:
        """Get the mirrored status of a bot (may lag behind the configuration)"""
        display_status = await mirror.get_display_status(bot_id)
        if display_status:
            return DisplayStatusResponse(**display_status)
        return None


# Create service instance
bots_service = BotsService()
