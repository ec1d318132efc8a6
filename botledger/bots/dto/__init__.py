from .create_bot_dto import CreateBotDto, BotStatus, DurationUnit
from .update_bot_dto import UpdateBotDto

__all__ = [
    "CreateBotDto",
    "UpdateBotDto",
    "BotStatus",
    "DurationUnit",
]
