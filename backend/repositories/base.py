"""Repository base over the persistence gateway.

Repositories speak records; the gateway speaks rows. Incoming identifiers
are cleaned with ``validate_serial`` and every row coming back is turned
into a record by the hydrator, never by hand.
"""
from __future__ import annotations

from typing import Any, ClassVar, Generic, Mapping, Protocol, Sequence, TypeVar

from core.config import settings
from core.database import Gateway
from core.logging import repo_logger
from core.pagination import Page, Pagination
from core.validation import ValidationError, ValidationKind, validate_serial

log = repo_logger()


class Record(Protocol):
    TABLE_NAME: ClassVar[str]

    @property
    def id(self) -> str | None: ...

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Record: ...

    def validate(self) -> Record: ...

    def to_row(self) -> dict[str, Any]: ...


RecordT = TypeVar("RecordT", bound=Record)


def _search_fragment(name: str) -> str:
    fragment = (name or "").strip()
    if not fragment:
        raise ValidationError(ValidationKind.EMPTY, "Search name cannot be empty", field="name")
    return fragment


class Repository(Generic[RecordT]):
    """CRUD, listing and name search for one record type."""

    record_cls: ClassVar[type]
    model: ClassVar[type]

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    @property
    def table(self) -> str:
        return self.model.__tablename__

    def _hydrate_all(self, rows: Sequence[Mapping[str, Any]]) -> list[RecordT]:
        return [self.record_cls.from_row(row) for row in rows]

    def _insert_values(self, record: RecordT) -> dict[str, Any]:
        return record.to_row()

    def _update_values(self, record: RecordT) -> dict[str, Any]:
        return record.to_row()

    async def index(self) -> list[RecordT]:
        rows = await self.gateway.select_all(self.table)
        log.debug("records_listed", table=self.table, count=len(rows))
        return self._hydrate_all(rows)

    async def create(self, record: RecordT) -> str:
        """Validate and insert ``record``. Returns the new identifier."""
        record.validate()
        new_id = await self.gateway.insert(self.table, self._insert_values(record))
        log.debug("record_created", table=self.table, id=new_id)
        return new_id

    async def read(self, id: str | int) -> RecordT | None:
        row = await self.gateway.select_one(self.table, validate_serial(id))
        return self.record_cls.from_row(row) if row is not None else None

    async def update(self, record: RecordT) -> RecordT | None:
        """Persist ``record``'s current values. Returns the stored record, None if it is gone."""
        if record.id is None:
            raise ValidationError(ValidationKind.EMPTY, "Record has no identifier", field="id")
        id = validate_serial(record.id)
        record.validate()
        affected = await self.gateway.update(self.table, id, self._update_values(record))
        log.debug("record_updated", table=self.table, id=id, affected=affected)
        if affected == 0:
            return None
        return await self.read(id)

    async def delete(self, id: str | int) -> bool:
        deleted = await self.gateway.delete(self.table, validate_serial(id))
        log.debug("record_deleted", table=self.table, id=str(id), deleted=deleted)
        return deleted

    async def find_by_name(self, name: str) -> list[RecordT]:
        """All records whose name contains ``name``."""
        rows = await self.gateway.search_by_name_pattern(self.table, _search_fragment(name))
        return self._hydrate_all(rows)

    async def count(self) -> int:
        return await self.gateway.count(self.table)

    async def paginate(self, page: int = 1, per_page: int | None = None) -> Page[RecordT]:
        pagination = Pagination(page, settings.DEFAULT_PAGE_SIZE if per_page is None else per_page)
        rows = await self.gateway.select_page(self.table, pagination.limit, pagination.offset)
        total = await self.gateway.count(self.table)
        return Page(self._hydrate_all(rows), pagination, total)

    async def search_by_name(self, name: str, page: int = 1, per_page: int | None = None) -> Page[RecordT]:
        fragment = _search_fragment(name)
        pagination = Pagination(page, settings.SEARCH_PAGE_SIZE if per_page is None else per_page)
        rows = await self.gateway.search_page(self.table, fragment, pagination.limit, pagination.offset)
        total = await self.gateway.count_by_name_pattern(self.table, fragment)
        return Page(self._hydrate_all(rows), pagination, total)

    async def count_by_name(self, name: str) -> int:
        return await self.gateway.count_by_name_pattern(self.table, _search_fragment(name))
