"""
User resource client.
"""

from __future__ import annotations

from typing import Any

from lcpconsole.client.crud import CrudService
from lcpconsole.common.crypto import CryptoUtils
from lcpconsole.common.models import User


class UserService(CrudService[User]):
    """CRUD client for /users."""

    path = "/users"

    def decode(self, json_obj: dict[str, Any]) -> User:
        return User.model_validate(json_obj)

    def encode(self, obj: User) -> dict[str, Any]:
        # the clear password never leaves the console, only its derived key
        if obj.clear_password:
            obj = obj.model_copy(
                update={
                    "password": CryptoUtils.hash_passphrase(obj.clear_password),
                    "clear_password": None,
                }
            )
        return obj.model_dump(mode="json", by_alias=True, exclude_none=True)

    def find_by_email(self, email: str) -> User | None:
        for user in self.iter_all():
            if user.email == email:
                return user
        return None
