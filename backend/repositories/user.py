from typing import Any

from models import UserModel
from records import User
from repositories.base import Repository, log


class UserRepository(Repository[User]):
    """Users are stored with a bcrypt hash of their password.

    A transient plaintext password on the record is hashed right before
    insert/update. On update the hash is only replaced when a new plaintext
    password was supplied.
    """
    record_cls = User
    model = UserModel

    def _insert_values(self, user: User) -> dict[str, Any]:
        if user.has_plain_password:
            user.hash_password()
        return user.to_row()

    def _update_values(self, user: User) -> dict[str, Any]:
        values = {"name": user.name, "email": user.email}
        if user.has_plain_password:
            values["password_hash"] = user.hash_password()
            log.debug("password_rehashed", table=self.table, id=user.id)
        return values
