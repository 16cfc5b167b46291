from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from core.validation import (
    FieldSpec,
    FieldType,
    ellipsis_preserve_words,
    hydrate,
    validate_price,
    validate_varchar,
)
from records.common import ID_FIELD, TIMESTAMP_FIELDS, optional_varchar, stored_timestamp

NAME_MAX = 255
DESCRIPTION_MAX = 1020
CURRENCY_MAX = 255
PRICE_DIGITS = 2
SHORT_DESCRIPTION_LIMIT = 24


class Item:
    """A catalogue item. Every setter validates; hydration bypasses them."""

    TABLE_NAME = "items"
    FIELDS = (
        ID_FIELD,
        FieldSpec("name", FieldType.STR, required=True),
        FieldSpec("description", FieldType.STR, required=True),
        FieldSpec("price", FieldType.FLOAT, required=True),
        FieldSpec("currency", FieldType.STR),
        *TIMESTAMP_FIELDS,
    )

    __slots__ = ("_id", "_name", "_description", "_price", "_currency", "_created_at", "_updated_at")

    def __init__(
        self,
        id: str | None = None,
        name: str | None = None,
        description: str | None = None,
        price: float | None = None,
        currency: str | None = None,
        created_at: str | None = None,
        updated_at: str | None = None,
    ):
        self._id = id
        self._name = name
        self._description = description
        self._price = price
        self._currency = currency
        self._created_at = created_at
        self._updated_at = updated_at

    @classmethod
    def new(cls, name: str, description: str, price: float, currency: str | None = None) -> Item:
        """A fresh, validated item with no identifier yet."""
        return cls(name=name, description=description, price=price, currency=currency).validate()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Item:
        return hydrate(cls, row)

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = validate_varchar(value, NAME_MAX, field="name")

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, value: str) -> None:
        self._description = validate_varchar(value, DESCRIPTION_MAX, field="description")

    @property
    def short_description(self) -> str:
        return ellipsis_preserve_words(self._description or "", SHORT_DESCRIPTION_LIMIT)

    @property
    def price(self) -> float:
        return validate_price(self._price, PRICE_DIGITS)

    @price.setter
    def price(self, value: float) -> None:
        self._price = validate_price(value, PRICE_DIGITS)

    @property
    def currency(self) -> str:
        return self._currency or ""

    @currency.setter
    def currency(self, value: str | None) -> None:
        self._currency = optional_varchar(value, CURRENCY_MAX, field="currency")

    @property
    def created_at(self) -> datetime | None:
        return stored_timestamp(self._created_at, "created_at")

    @property
    def updated_at(self) -> datetime | None:
        return stored_timestamp(self._updated_at, "updated_at")

    @property
    def is_persisted(self) -> bool:
        return self._id is not None

    def validate(self) -> Item:
        """Re-run every setter on the current values."""
        self.name = self._name
        self.description = self._description
        self.price = self._price
        self.currency = self._currency
        return self

    def with_name(self, name: str) -> Item:
        """Copy with a new name, sharing identifier and timestamps."""
        copy = Item(
            id=self._id,
            name=self._name,
            description=self._description,
            price=self._price,
            currency=self._currency,
            created_at=self._created_at,
            updated_at=self._updated_at,
        )
        copy.name = name
        return copy

    def to_row(self) -> dict[str, Any]:
        """Column values for insert/update."""
        return {
            "name": self._name,
            "description": self._description,
            "price": self._price,
            "currency": self._currency,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return all(getattr(self, slot) == getattr(other, slot) for slot in self.__slots__)

    def __repr__(self) -> str:
        return f"Item(id={self._id!r}, name={self._name!r}, price={self._price!r})"
