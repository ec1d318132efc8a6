import json
from http import HTTPStatus

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

ENVELOPE_KEYS = ("statusCode", "message", "data")
SKIP_PATHS = ("/openapi.json", "/docs", "/redoc")


def envelope(status_code: int, data, message: str = None) -> dict:
    """Wrap a payload in the {statusCode, message, data} envelope"""
    if message is None:
        message = "OK" if 200 <= status_code < 300 else HTTPStatus(status_code).phrase
    return {"statusCode": status_code, "message": message, "data": data}


class TransformResponseMiddleware(BaseHTTPMiddleware):
    """Wraps every JSON response body in the API envelope"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if any(request.url.path.startswith(path) for path in SKIP_PATHS):
            return response

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("application/json"):
            return response

        response_body = b""
        async for chunk in response.body_iterator:
            response_body += chunk

        try:
            body = json.loads(response_body.decode())
        except (json.JSONDecodeError, UnicodeDecodeError):
            return Response(
                content=response_body,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type
            )

        # Error handlers already build the envelope
        if isinstance(body, dict) and all(key in body for key in ENVELOPE_KEYS):
            return JSONResponse(content=body, status_code=response.status_code)

        return JSONResponse(content=envelope(response.status_code, body), status_code=response.status_code)
