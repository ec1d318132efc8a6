import logging
from typing import Optional
from uuid import UUID

from ...database import MirrorStore
from ..dto import PublishSessionStateDto
from ..responses import SessionStateResponse

logger = logging.getLogger(__name__)


class SessionsService:
    """Publishes live session metrics to the mirror"""

    async def publish_session_state(
        self, mirror: MirrorStore, dto: PublishSessionStateDto
    ) -> SessionStateResponse:
        """Replace the session snapshot of dto.bot_id. Raises PersistenceError on failure."""
        state = await mirror.set_session_state(dto.bot_id, dto.model_dump(mode="json"))
        logger.debug(
            f"Session {dto.session_id} of bot {dto.bot_id} published: "
            f"runs={dto.number_of_runs} wins={dto.number_of_wins} losses={dto.number_of_losses}"
        )
        return SessionStateResponse.model_validate(state)

    async def get_session_state(self, mirror: MirrorStore, bot_id: UUID) -> Optional[SessionStateResponse]:
        state = await mirror.get_session_state(bot_id)
        if state:
            return SessionStateResponse.model_validate(state)
        return None


# Create service instance
sessions_service = SessionsService()
