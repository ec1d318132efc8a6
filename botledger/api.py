import logging
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .database import StoreClients, get_stores
from .exceptions import PersistenceError

logger = logging.getLogger("api")

router = APIRouter(tags=["health"])


# Health check endpoint
@router.get("/health")
async def health_check(stores: StoreClients = Depends(get_stores)):
    """Health check endpoint, reporting whether each store answers"""
    database_ok = True
    try:
        async with stores.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check: database unreachable: {e}")
        database_ok = False

    mirror_ok = True
    try:
        await stores.mirror.ping()
    except PersistenceError as e:
        logger.error(f"Health check: mirror unreachable: {e}")
        mirror_ok = False

    return {
        "status": "ok" if database_ok and mirror_ok else "degraded",
        "database": database_ok,
        "mirror": mirror_ok,
    }
