from .bot_response import BotResponse
from .display_status_response import DisplayStatusResponse

__all__ = [
    "BotResponse",
    "DisplayStatusResponse",
]
