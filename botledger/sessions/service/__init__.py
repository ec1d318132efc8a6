from .sessions_service import SessionsService, sessions_service

__all__ = ["SessionsService", "sessions_service"]
