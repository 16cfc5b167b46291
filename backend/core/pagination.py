"""Page / per-page / offset arithmetic for listings."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from core.config import settings
from core.validation import ValidationError, ValidationKind

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Pagination:
    page: int = 1
    per_page: int = field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE)

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError(ValidationKind.OUT_OF_RANGE, "Page must be at least 1", field="page")
        if self.per_page < 1:
            raise ValidationError(ValidationKind.OUT_OF_RANGE, "Items per page must be at least 1", field="per_page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page

    def total_pages(self, total: int) -> int:
        """Number of pages needed for ``total`` rows. Never less than 1."""
        return max(1, -(-total // self.per_page))

    def has_next(self, total: int) -> bool:
        return self.page < self.total_pages(total)

    def has_previous(self) -> bool:
        return self.page > 1


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """One page of records plus what a pager needs to render around it."""
    records: list[T]
    pagination: Pagination
    total: int

    @property
    def total_pages(self) -> int:
        return self.pagination.total_pages(self.total)

    @property
    def has_next(self) -> bool:
        return self.pagination.has_next(self.total)
