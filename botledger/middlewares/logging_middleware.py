import time
import uuid
import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("api")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a short id and logs method, path, status and duration"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} failed after "
                f"{(time.time() - start_time) * 1000:.1f}ms: {type(e).__name__}: {e}",
                exc_info=True
            )
            raise

        logger.info(
            f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} "
            f"in {(time.time() - start_time) * 1000:.1f}ms"
        )
        response.headers["X-Request-ID"] = request_id
        return response


def get_request_id(request: Request) -> str:
    """Get the request ID from the request state"""
    return getattr(request.state, 'request_id', 'unknown')
