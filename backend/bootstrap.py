"""Process startup and shutdown.

    async with running() as container:
        items = await container.items.index()

Logging is configured and the gateway opened on entry; the gateway is
closed on exit even when the block raises.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import models  # noqa: F401  registers tables on Base.metadata
from core.config import Settings, get_settings
from core.database import Gateway
from core.logging import configure_logging, get_logger
from repositories import ItemRepository, UserRepository, WarehouseRepository

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Container:
    """The gateway and the repositories built on it."""
    gateway: Gateway
    items: ItemRepository
    users: UserRepository
    warehouses: WarehouseRepository

    @classmethod
    def build(cls, gateway: Gateway) -> Container:
        return cls(
            gateway=gateway,
            items=ItemRepository(gateway),
            users=UserRepository(gateway),
            warehouses=WarehouseRepository(gateway),
        )


@asynccontextmanager
async def running(settings: Settings | None = None, *, setup_logging: bool = True) -> AsyncIterator[Container]:
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(
            level=settings.LOG_LEVEL,
            json_logs=settings.LOG_JSON or settings.is_production,
            log_sql=settings.LOG_SQL,
        )

    log.info("startup", message="Plumelet backend starting up")
    gateway = Gateway.open(settings.DATABASE_URL, echo=settings.LOG_SQL)
    try:
        if settings.DB_CREATE_TABLES:
            await gateway.create_tables()
        yield Container.build(gateway)
    finally:
        log.info("shutdown", message="Plumelet backend shutting down")
        await gateway.close()
