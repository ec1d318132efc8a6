import os
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import redis.asyncio as aioredis
from dotenv import load_dotenv
from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .mirror import MirrorStore

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./botledger.db"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

Base = declarative_base()


def normalize_database_url(database_url: str) -> str:
    """Convert sync postgresql:// URLs to the asyncpg driver"""
    for prefix in ("postgresql://", "postgres://"):
        if database_url.startswith(prefix):
            logger.info("🔄 Converted DATABASE_URL to async driver: postgresql+asyncpg://...")
            return database_url.replace(prefix, "postgresql+asyncpg://", 1)
    return database_url


@dataclass
class Settings:
    """Store connection settings, read from the environment"""
    database_url: str = DEFAULT_DATABASE_URL
    redis_url: str = DEFAULT_REDIS_URL
    redis_socket_timeout: float = 5.0
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=normalize_database_url(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)),
            redis_url=os.getenv("REDIS_URL", DEFAULT_REDIS_URL),
            redis_socket_timeout=float(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
            db_echo=os.getenv("DB_ECHO", "false").lower() == "true",
        )


def create_engine(settings: Settings) -> AsyncEngine:
    database_url = normalize_database_url(settings.database_url)

    if database_url.startswith("sqlite"):
        # In-memory SQLite only exists on a single connection
        if database_url.endswith("://") or ":memory:" in database_url:
            return create_async_engine(database_url, echo=settings.db_echo, poolclass=StaticPool)
        return create_async_engine(database_url, echo=settings.db_echo)

    return create_async_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=30,                 # Timeout for getting connection
        pool_recycle=3600,               # Recycle connections after 1 hour
        pool_pre_ping=True,              # Validate connections before use
        pool_reset_on_return='commit',
        echo=settings.db_echo,
    )


class StoreClients:
    """
    Owns the SQL engine and the Redis mirror for the lifetime of the process.

    Built by the process entry point, connected once, handed to request
    handlers through FastAPI dependencies and closed on shutdown.
    """

    def __init__(self, settings: Optional[Settings] = None, redis_client=None):
        self.settings = settings or Settings.from_env()
        self._redis_client = redis_client
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[sessionmaker] = None
        self.mirror: Optional[MirrorStore] = None

    @property
    def connected(self) -> bool:
        return self.engine is not None

    async def connect(self, create_tables: bool = True) -> None:
        if self.connected:
            return

        self.engine = create_engine(self.settings)
        self.session_factory = sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

        if create_tables:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        redis_client = self._redis_client
        if redis_client is None:
            redis_client = aioredis.from_url(
                self.settings.redis_url,
                decode_responses=True,
                socket_timeout=self.settings.redis_socket_timeout,
            )
        self.mirror = MirrorStore(redis_client)
        logger.info("✅ Store clients connected")

    async def close(self) -> None:
        if self.mirror is not None:
            await self.mirror.close()
            self.mirror = None
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
        logger.info("Database and mirror connections closed")


def get_stores(request: Request) -> StoreClients:
    return request.app.state.stores


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with get_stores(request).session_factory() as session:
        yield session


def get_mirror(request: Request) -> MirrorStore:
    return get_stores(request).mirror
