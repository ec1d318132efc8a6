from .session_state_response import SessionStateResponse

__all__ = ["SessionStateResponse"]
