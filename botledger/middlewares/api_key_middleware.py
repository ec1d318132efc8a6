from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

# Reachable without a key: health probe and API docs
PUBLIC_PATHS = ("/api/v1/health", "/docs", "/redoc", "/openapi.json")


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Middleware to authenticate requests using API key.

    Checks for API key in X-API-Key or Authorization headers.
    Returns 401 Unauthorized if API key is missing or invalid.
    """

    def __init__(self, app, api_key: str, public_paths=PUBLIC_PATHS):
        super().__init__(app)
        self.api_key = api_key
        self.public_paths = tuple(public_paths)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path == "/" or any(path.startswith(public) for public in self.public_paths):
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.headers.get("Authorization")
        if api_key and api_key.startswith("Bearer "):
            api_key = api_key[len("Bearer "):]

        if not api_key or api_key != self.api_key:
            return JSONResponse(
                content={
                    "statusCode": 401,
                    "message": "Unauthorized",
                    "data": {"detail": "Valid API key required. Include 'X-API-Key' header with your request."}
                },
                status_code=401
            )

        return await call_next(request)
