from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from core.security import BCRYPT_MAX_BYTES, get_password_hash, verify_password
from core.validation import (
    FieldSpec,
    FieldType,
    ValidationError,
    ValidationKind,
    hydrate,
    validate_email,
    validate_varchar,
)
from records.common import ID_FIELD, TIMESTAMP_FIELDS, stored_timestamp

NAME_MAX = 255
EMAIL_MAX = 255


class User:
    """An application user.

    The plaintext password is held transiently until ``hash_password`` is
    called; only the hash is ever written back to storage.
    """

    TABLE_NAME = "users"
    FIELDS = (
        ID_FIELD,
        FieldSpec("name", FieldType.STR, required=True),
        FieldSpec("email", FieldType.STR, required=True),
        FieldSpec("password_plain", FieldType.STR),
        FieldSpec("password_hash", FieldType.STR),
        *TIMESTAMP_FIELDS,
    )

    __slots__ = ("_id", "_name", "_email", "_password_plain", "_password_hash", "_created_at", "_updated_at")

    def __init__(
        self,
        id: str | None = None,
        name: str | None = None,
        email: str | None = None,
        password_plain: str | None = None,
        password_hash: str | None = None,
        created_at: str | None = None,
        updated_at: str | None = None,
    ):
        self._id = id
        self._name = name
        self._email = email
        self._password_plain = password_plain
        self._password_hash = password_hash
        self._created_at = created_at
        self._updated_at = updated_at

    @classmethod
    def new(cls, name: str, email: str, password: str | None = None) -> User:
        return cls(name=name, email=email, password_plain=password).validate()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> User:
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
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = validate_email(value, EMAIL_MAX, field="email")

    @property
    def plain_password(self) -> str:
        return self._password_plain or ""

    @plain_password.setter
    def plain_password(self, value: str) -> None:
        if not value:
            raise ValidationError(ValidationKind.EMPTY, "Password cannot be empty", field="password")
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValidationError(
                ValidationKind.TOO_LONG, f"Password too long (max {BCRYPT_MAX_BYTES} bytes)", field="password"
            )
        self._password_plain = value

    @property
    def has_plain_password(self) -> bool:
        return bool(self._password_plain)

    @property
    def password_hash(self) -> str:
        return self._password_hash or ""

    def hash_password(self, rounds: int | None = None) -> str:
        """Replace the stored hash with one of the transient plaintext."""
        if not self._password_plain:
            raise ValidationError(ValidationKind.EMPTY, "Password cannot be empty", field="password")
        self._password_hash = get_password_hash(self._password_plain, rounds)
        return self._password_hash

    def check_password(self, plain: str, stored_hash: str | None = None) -> bool:
        """Verify ``plain`` against ``stored_hash`` (defaults to this user's hash)."""
        return verify_password(plain, self.password_hash if stored_hash is None else stored_hash)

    @property
    def created_at(self) -> datetime | None:
        return stored_timestamp(self._created_at, "created_at")

    @property
    def updated_at(self) -> datetime | None:
        return stored_timestamp(self._updated_at, "updated_at")

    @property
    def is_persisted(self) -> bool:
        return self._id is not None

    def validate(self) -> User:
        self.name = self._name
        self.email = self._email
        if self._password_plain is not None:
            self.plain_password = self._password_plain
        return self

    def with_name(self, name: str) -> User:
        """Copy with a new name. The plaintext password is not carried over."""
        copy = User(
            id=self._id,
            name=self._name,
            email=self._email,
            password_hash=self._password_hash,
            created_at=self._created_at,
            updated_at=self._updated_at,
        )
        copy.name = name
        return copy

    def to_row(self) -> dict[str, Any]:
        row = {"name": self._name, "email": self._email}
        if self._password_hash:
            row["password_hash"] = self._password_hash
        return row

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return all(getattr(self, slot) == getattr(other, slot) for slot in self.__slots__)

    def __repr__(self) -> str:
        return f"User(id={self._id!r}, name={self._name!r}, email={self._email!r})"
