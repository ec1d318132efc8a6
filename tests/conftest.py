"""
Pytest configuration and fixtures.

Services run against in-memory SQLite and an in-memory stand-in for the
Redis client, so no external store is needed.
"""

import pytest
import pytest_asyncio

from botledger.database import Settings, StoreClients

from helpers import IN_MEMORY_DATABASE_URL, MockRedis


@pytest.fixture
def redis_client():
    return MockRedis()


@pytest_asyncio.fixture
async def stores(redis_client):
    stores = StoreClients(Settings(database_url=IN_MEMORY_DATABASE_URL), redis_client=redis_client)
    await stores.connect()
    yield stores
    await stores.close()


@pytest_asyncio.fixture
async def db(stores):
    async with stores.session_factory() as session:
        yield session


@pytest.fixture
def mirror(stores):
    return stores.mirror
