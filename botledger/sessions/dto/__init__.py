from .publish_session_state_dto import PublishSessionStateDto

__all__ = ["PublishSessionStateDto"]
