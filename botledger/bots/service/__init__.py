from .bots_service import BotsService, bots_service

__all__ = ["BotsService", "bots_service"]
