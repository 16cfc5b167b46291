from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from core.validation import (
    FieldSpec,
    FieldType,
    hydrate,
    validate_email,
    validate_enum,
    validate_varchar,
)
from records.common import ID_FIELD, TIMESTAMP_FIELDS, is_blank, optional_varchar, stored_timestamp
from records.enums import WarehouseType

NAME_MAX = 255
ADDRESS_MAX = 255
EMAIL_MAX = 255


class Warehouse:
    """A warehouse site. ``type`` is restricted to ``WarehouseType`` values."""

    TABLE_NAME = "warehouses"
    FIELDS = (
        ID_FIELD,
        FieldSpec("name", FieldType.STR, required=True),
        FieldSpec("address", FieldType.STR),
        FieldSpec("email", FieldType.STR),
        FieldSpec("type", FieldType.STR, required=True),
        *TIMESTAMP_FIELDS,
    )

    __slots__ = ("_id", "_name", "_address", "_email", "_type", "_created_at", "_updated_at")

    def __init__(
        self,
        id: str | None = None,
        name: str | None = None,
        address: str | None = None,
        email: str | None = None,
        type: str | None = None,
        created_at: str | None = None,
        updated_at: str | None = None,
    ):
        self._id = id
        self._name = name
        self._address = address
        self._email = email
        self._type = type
        self._created_at = created_at
        self._updated_at = updated_at

    @classmethod
    def new(
        cls,
        name: str,
        type: str | WarehouseType,
        address: str | None = None,
        email: str | None = None,
    ) -> Warehouse:
        return cls(name=name, address=address, email=email, type=type).validate()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Warehouse:
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
    def address(self) -> str:
        return self._address or ""

    @address.setter
    def address(self, value: str | None) -> None:
        self._address = optional_varchar(value, ADDRESS_MAX, field="address")

    @property
    def email(self) -> str:
        return self._email or ""

    @email.setter
    def email(self, value: str | None) -> None:
        self._email = None if is_blank(value) else validate_email(value, EMAIL_MAX, field="email")

    @property
    def type(self) -> str:
        return self._type

    @type.setter
    def type(self, value: str | WarehouseType) -> None:
        self._type = validate_enum(value, WarehouseType, field="type").value

    @property
    def warehouse_type(self) -> WarehouseType:
        return validate_enum(self._type, WarehouseType, field="type")

    @property
    def type_label(self) -> str:
        return self.warehouse_type.label

    @property
    def created_at(self) -> datetime | None:
        return stored_timestamp(self._created_at, "created_at")

    @property
    def updated_at(self) -> datetime | None:
        return stored_timestamp(self._updated_at, "updated_at")

    @property
    def is_persisted(self) -> bool:
        return self._id is not None

    def validate(self) -> Warehouse:
        self.name = self._name
        self.address = self._address
        self.email = self._email
        self.type = self._type
        return self

    def with_name(self, name: str) -> Warehouse:
        copy = Warehouse(
            id=self._id,
            name=self._name,
            address=self._address,
            email=self._email,
            type=self._type,
            created_at=self._created_at,
            updated_at=self._updated_at,
        )
        copy.name = name
        return copy

    def to_row(self) -> dict[str, Any]:
        return {
            "name": self._name,
            "address": self._address,
            "email": self._email,
            "type": self._type,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Warehouse):
            return NotImplemented
        return all(getattr(self, slot) == getattr(other, slot) for slot in self.__slots__)

    def __repr__(self) -> str:
        return f"Warehouse(id={self._id!r}, name={self._name!r}, type={self._type!r})"
