"""Shared fixtures.

The bcrypt work factor is lowered before any application module reads the
settings, which keeps the password tests fast.
"""
import os

os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

import models  # noqa: F401,E402  registers tables on Base.metadata
from core.database import Gateway  # noqa: E402
from repositories import ItemRepository, UserRepository, WarehouseRepository  # noqa: E402


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def gateway(database_url):
    gw = Gateway.open(database_url, echo=False)
    await gw.create_tables()
    yield gw
    await gw.close()


@pytest.fixture
def item_repo(gateway) -> ItemRepository:
    return ItemRepository(gateway)


@pytest.fixture
def user_repo(gateway) -> UserRepository:
    return UserRepository(gateway)


@pytest.fixture
def warehouse_repo(gateway) -> WarehouseRepository:
    return WarehouseRepository(gateway)
