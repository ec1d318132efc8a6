from .database import (
    Base, Settings, StoreClients, create_engine, get_db, get_mirror, get_stores,
)
from .mirror import MirrorStore
from .models import Bot, ContractAudit

__all__ = [
    "Base",
    "Settings",
    "StoreClients",
    "create_engine",
    "get_db",
    "get_mirror",
    "get_stores",
    "MirrorStore",
    "Bot",
    "ContractAudit",
]
