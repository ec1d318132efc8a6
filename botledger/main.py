from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn
import logging
import os

# Logtail direct integration
from logtail import LogtailHandler

from . import __version__
from .middlewares.transform_response import TransformResponseMiddleware, envelope
from .middlewares.conditional_debug_middleware import ConditionalDebugMiddleware
from .middlewares.api_key_middleware import APIKeyMiddleware
from .middlewares.logging_middleware import LoggingMiddleware, get_request_id

from .api import router as base_router
from .bots.api import router as bots_router
from .sessions.api import router as sessions_router
from .audits.api import router as audits_router
from .database import StoreClients
from .exceptions import BotNotFoundError, PersistenceError, ValidationError

LOG_FORMAT = '%(asctime)s - API - %(levelname)s - %(message)s'


def setup_api_logging() -> logging.Logger:
    """Console logging for the "api" logger, plus logtail when its token and host are set"""
    source_token = os.getenv('LOGTAIL_SOURCE_TOKEN')
    host = os.getenv('LOGTAIL_HOST')

    logger = logging.getLogger("api")
    logger.handlers = []
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    if source_token and host:
        logger.setLevel(logging.DEBUG)
        logger.addHandler(LogtailHandler(source_token=source_token, host=host))
        logger.info("✅ Logtail handler added")
    else:
        logger.setLevel(logging.INFO)
        logger.info(f"Logtail disabled - Token: {bool(source_token)}, Host: {bool(host)}")

    # Service modules log under the package name
    package_logger = logging.getLogger("botledger")
    package_logger.handlers = list(logger.handlers)
    package_logger.setLevel(logger.level)
    package_logger.propagate = False

    return logger


def create_app(stores: Optional[StoreClients] = None, api_key: Optional[str] = None) -> FastAPI:
    api_logger = setup_api_logging()

    api_key = api_key or os.getenv("API_SECRET_KEY")
    if not api_key:
        raise ValueError("API_SECRET_KEY environment variable is required but not set")

    stores = stores or StoreClients()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await stores.connect()
        api_logger.info("🚀 Bot Ledger API started")
        try:
            yield
        finally:
            await stores.close()

    app = FastAPI(
        title="Bot Ledger API",
        description="Bot configurations, live session state and trade audit trail",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        swagger_ui_parameters={
            "persistAuthorization": True,
            "displayRequestDuration": True,
        }
    )
    app.state.stores = stores

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(APIKeyMiddleware, api_key=api_key)
    app.add_middleware(ConditionalDebugMiddleware)
    app.add_middleware(TransformResponseMiddleware)
    app.add_middleware(LoggingMiddleware)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        api_logger.error(f"🚨 Validation error on {request.method} {request.url}")
        for error in exc.errors():
            api_logger.error(f"   Field: {' -> '.join(str(loc) for loc in error['loc'])}: {error['msg']}")
        return JSONResponse(
            status_code=422,
            content=envelope(422, {"detail": exc.errors()}, "Validation Error"),
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        api_logger.error(f"🚨 Invalid input on {request.method} {request.url}: {exc}")
        return JSONResponse(status_code=422, content=envelope(422, {"detail": str(exc)}, "Validation Error"))

    @app.exception_handler(BotNotFoundError)
    async def not_found_handler(request: Request, exc: BotNotFoundError):
        return JSONResponse(status_code=404, content=envelope(404, {"detail": str(exc)}))

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        api_logger.error(f"❌ [{get_request_id(request)}] Store failure on {request.method} {request.url}: {exc}")
        return JSONResponse(status_code=503, content=envelope(503, {"detail": str(exc)}))

    app.include_router(base_router, prefix="/api/v1")
    app.include_router(bots_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")
    app.include_router(audits_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Bot Ledger API",
            "version": __version__,
            "docs": "/docs",
            "health": "/api/v1/health"
        }

    return app


if __name__ == "__main__":
    uvicorn.run(
        "botledger.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
    )
