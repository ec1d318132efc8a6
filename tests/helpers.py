"""Test doubles and payload factories shared by the test modules."""

import fnmatch
import json
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Set
from uuid import uuid4

from redis.exceptions import ConnectionError as RedisConnectionError

from botledger.audits.dto import CreateTradeAuditDto
from botledger.audits.responses import TradeAuditResponse
from botledger.bots.dto import CreateBotDto

IN_MEMORY_DATABASE_URL = "sqlite+aiosqlite://"


class MockRedis:
    """Subset of the redis.asyncio client used by MirrorStore, kept in dicts."""

    def __init__(self):
        self.strings: Dict[str, str] = {}
        self.hashes: Dict[str, Dict[str, str]] = {}
        self.failing: Set[str] = set()
        self.clock_ms: Optional[int] = None
        self.closed = False

    def fail(self, *commands: str) -> None:
        """Make the given commands raise a connection error"""
        self.failing.update(commands)

    def _check(self, command: str) -> None:
        if command in self.failing:
            raise RedisConnectionError(f"{command} failed: connection refused")

    async def ping(self):
        self._check("ping")
        return True

    async def time(self):
        self._check("time")
        if self.clock_ms is not None:
            self.clock_ms += 1
            return self.clock_ms // 1000, (self.clock_ms % 1000) * 1000
        now = time.time()
        return int(now), int((now % 1) * 1_000_000)

    async def set(self, key: str, value: str):
        self._check("set")
        self.strings[key] = value
        return True

    async def get(self, key: str):
        self._check("get")
        return self.strings.get(key)

    async def hset(self, key: str, mapping: Dict[str, str]):
        self._check("hset")
        fields = self.hashes.setdefault(key, {})
        added = len(set(mapping) - set(fields))
        fields.update(mapping)
        return added

    async def hgetall(self, key: str):
        self._check("hgetall")
        return dict(self.hashes.get(key, {}))

    async def scan_iter(self, match: str = "*"):
        self._check("scan")
        for key in list(self.strings) + list(self.hashes):
            if fnmatch.fnmatchcase(key, match):
                yield key

    async def delete(self, *keys: str):
        self._check("delete")
        removed = 0
        for key in keys:
            if self.strings.pop(key, None) is not None:
                removed += 1
            if self.hashes.pop(key, None) is not None:
                removed += 1
        return removed

    async def aclose(self):
        self.closed = True

    def session_document(self, bot_id) -> Optional[Dict[str, Any]]:
        raw = self.strings.get(f"botSessions:{bot_id}")
        return json.loads(raw) if raw is not None else None


def make_bot_dto(**overrides) -> CreateBotDto:
    data = {
        "name": "MyAwesomeBot",
        "contract_type": "CALL",
        "initial_stake": 10,
        "duration": 5,
        "duration_unit": "TICK",
        "repeat_trade": True,
        "symbol": "R_100",
        "version": "1.0.0",
        "status": "INITIALIZING",
        "is_active": False,
    }
    data.update(overrides)
    return CreateBotDto(**data)


def make_audit_dto(outcome: str = "WIN", **overrides) -> CreateTradeAuditDto:
    data = {
        "owner_id": "user123",
        "bot_id": uuid4(),
        "session_id": "session-1",
        "strategy_used": "MartingaleV1",
        "proposal_id": "1",
        "amount": 10,
        "basis": "stake",
        "contract_type": "CALL",
        "currency": "USD",
        "duration": 5,
        "duration_unit": "TICK",
        "symbol": "R_100",
        "barrier": 1.23,
        "outcome": outcome,
        "profit_or_loss": 5 if outcome == "WIN" else -10 if outcome == "LOSS" else 0,
    }
    data.update(overrides)
    return CreateTradeAuditDto(**data)


def make_audits(*outcomes: str) -> list:
    """Chronological audit responses, one second apart"""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    bot_id = uuid4()
    return [
        TradeAuditResponse(
            id=uuid4(),
            timestamp=start + timedelta(seconds=index),
            **make_audit_dto(outcome, bot_id=bot_id).model_dump(),
        )
        for index, outcome in enumerate(outcomes)
    ]


