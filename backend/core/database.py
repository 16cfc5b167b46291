"""Persistence Gateway

Row-oriented CRUD over async SQLAlchemy Core. The gateway is the only module
that talks to the database: rows leave it as plain dicts of raw scalars,
identifiers as decimal strings and datetimes as ``YYYY-MM-DD HH:MM:SS``.
SQLAlchemy failures are mapped to ``AppError`` and raised as
``AppErrorException``.

The gateway is explicitly constructed and closed:

    gateway = Gateway.open(settings.DATABASE_URL)
    try:
        ...
    finally:
        await gateway.close()

or ``async with open_gateway(url) as gateway: ...``.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, AsyncIterator, Mapping

from sqlalchemy import BigInteger, Integer, Table, func, select
from sqlalchemy.dialects import mysql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from core.config import settings
from core.errors import AppErrorException, DatabaseErrorMapper, ErrorCode, db_error
from core.logging import db_logger
from core.validation.validators import format_datetime

log = db_logger()

Base = declarative_base()

# BIGINT UNSIGNED on MySQL/MariaDB; SQLite only autoincrements INTEGER primary keys
Serial = (
    BigInteger()
    .with_variant(Integer, "sqlite")
    .with_variant(mysql.BIGINT(unsigned=True), "mysql", "mariadb")
)

Row = dict[str, Any]

# Largest key a signed BIGINT or SQLite INTEGER can hold
SIGNED_ID_MAX = 2**63 - 1
_UNSIGNED_ID_DIALECTS = frozenset({"mysql", "mariadb"})


def _raw_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, Decimal):
        return str(value)
    return value


def _to_row(mapping: Mapping[str, Any]) -> Row:
    row = {key: _raw_value(value) for key, value in mapping.items()}
    if row.get("id") is not None:
        row["id"] = str(row["id"])
    return row


class Gateway:
    """CRUD operations over the tables registered on ``Base.metadata``."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._mapper = DatabaseErrorMapper("database.gateway")

    @classmethod
    def open(cls, url: str | None = None, *, echo: bool | None = None) -> Gateway:
        url = url or settings.DATABASE_URL
        engine_kwargs: dict[str, Any] = {
            "echo": settings.LOG_SQL if echo is None else echo,
        }
        if "sqlite" not in url:
            engine_kwargs.update({
                "pool_pre_ping": True,
                "pool_size": 5,
                "max_overflow": 10,
            })
        engine = create_async_engine(url, **engine_kwargs)
        log.info("gateway_opened", dialect=engine.dialect.name)
        return cls(engine)

    async def close(self) -> None:
        await self.engine.dispose()
        log.info("gateway_closed")

    async def create_tables(self) -> None:
        async with self._transaction("*", "create_tables") as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("tables_created", tables=sorted(Base.metadata.tables))

    def _table(self, name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            error = db_error(f"Unknown table '{name}'", code=ErrorCode.E4002_QUERY_FAILED, table=name,
                origin="database.gateway").error
            raise AppErrorException(error) from None

    @asynccontextmanager
    async def _transaction(self, table: str, operation: str) -> AsyncIterator[AsyncConnection]:
        """Run a block in its own transaction, mapping driver errors."""
        try:
            async with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            error = self._mapper.map_exception(e, table=table).with_origin(f"gateway.{operation}")
            log.error(
                "gateway_operation_failed",
                table=table,
                operation=operation,
                error_code=error.code.name,
                error=error.message,
            )
            raise AppErrorException(error) from e

    async def insert(self, table: str, fields: Mapping[str, Any]) -> str:
        """Insert one row and return its new identifier."""
        tbl = self._table(table)
        async with self._transaction(table, "insert") as conn:
            result = await conn.execute(tbl.insert().values(**fields))
        new_id = str(result.inserted_primary_key[0])
        log.debug("row_inserted", table=table, id=new_id)
        return new_id

    def _id_key(self, id: str) -> int | None:
        """Bind value for ``id``. None when the backend cannot store it, so no row matches."""
        key = int(id)
        if key > SIGNED_ID_MAX and self.engine.dialect.name not in _UNSIGNED_ID_DIALECTS:
            return None
        return key

    async def select_one(self, table: str, id: str) -> Row | None:
        tbl = self._table(table)
        key = self._id_key(id)
        if key is None:
            return None
        async with self._transaction(table, "select_one") as conn:
            result = await conn.execute(select(tbl).where(tbl.c.id == key))
            row = result.mappings().first()
        return _to_row(row) if row is not None else None

    async def select_all(self, table: str) -> list[Row]:
        tbl = self._table(table)
        async with self._transaction(table, "select_all") as conn:
            result = await conn.execute(select(tbl).order_by(tbl.c.id))
            return [_to_row(row) for row in result.mappings()]

    async def update(self, table: str, id: str, fields: Mapping[str, Any]) -> int:
        """Update one row in a single-statement transaction. Returns affected count."""
        tbl = self._table(table)
        key = self._id_key(id)
        if not fields or key is None:
            return 0
        async with self._transaction(table, "update") as conn:
            result = await conn.execute(tbl.update().where(tbl.c.id == key).values(**fields))
        log.debug("row_updated", table=table, id=id, affected=result.rowcount)
        return result.rowcount

    async def delete(self, table: str, id: str) -> bool:
        tbl = self._table(table)
        key = self._id_key(id)
        if key is None:
            return False
        async with self._transaction(table, "delete") as conn:
            result = await conn.execute(tbl.delete().where(tbl.c.id == key))
        log.debug("row_deleted", table=table, id=id, affected=result.rowcount)
        return result.rowcount > 0

    async def count(self, table: str) -> int:
        tbl = self._table(table)
        async with self._transaction(table, "count") as conn:
            result = await conn.execute(select(func.count()).select_from(tbl))
            return int(result.scalar_one())

    async def search_by_name_pattern(self, table: str, fragment: str) -> list[Row]:
        """Rows whose name contains ``fragment``. LIKE wildcards in it match literally."""
        tbl = self._table(table)
        query = select(tbl).where(tbl.c.name.contains(fragment, autoescape=True)).order_by(tbl.c.id)
        async with self._transaction(table, "search_by_name_pattern") as conn:
            result = await conn.execute(query)
            return [_to_row(row) for row in result.mappings()]

    async def select_page(self, table: str, limit: int, offset: int) -> list[Row]:
        tbl = self._table(table)
        query = select(tbl).order_by(tbl.c.id).limit(limit).offset(offset)
        async with self._transaction(table, "select_page") as conn:
            result = await conn.execute(query)
            return [_to_row(row) for row in result.mappings()]

    async def search_page(self, table: str, fragment: str, limit: int, offset: int) -> list[Row]:
        tbl = self._table(table)
        query = (
            select(tbl)
            .where(tbl.c.name.contains(fragment, autoescape=True))
            .order_by(tbl.c.id)
            .limit(limit)
            .offset(offset)
        )
        async with self._transaction(table, "search_page") as conn:
            result = await conn.execute(query)
            return [_to_row(row) for row in result.mappings()]

    async def count_by_name_pattern(self, table: str, fragment: str) -> int:
        tbl = self._table(table)
        query = select(func.count()).select_from(tbl).where(tbl.c.name.contains(fragment, autoescape=True))
        async with self._transaction(table, "count_by_name_pattern") as conn:
            result = await conn.execute(query)
            return int(result.scalar_one())


@asynccontextmanager
async def open_gateway(url: str | None = None, *, echo: bool | None = None) -> AsyncIterator[Gateway]:
    """Open a gateway for the duration of the block."""
    gateway = Gateway.open(url, echo=echo)
    try:
        yield gateway
    finally:
        await gateway.close()
