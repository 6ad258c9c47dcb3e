from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, replace
from typing import Protocol

from werkzeug.security import check_password_hash, generate_password_hash

from tokenauth.services._shared.policies.common import password_fingerprint


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Minimal user view needed by the auth flows.

    :ivar id: User identifier (stringified).
    :ivar username: Login name.
    :ivar password_hash: Current stored password hash.
    """

    id: str
    username: str
    password_hash: str

    @property
    def fingerprint(self) -> str:
        return password_fingerprint(self.password_hash)

    def to_public(self) -> dict[str, str]:
        return {"id": self.id, "username": self.username}


class UserDirectory(Protocol):
    """Credential-verification collaborator."""

    def verify_credentials(self, username: str, password: str) -> UserRecord | None:
        """Return the user when the password matches, otherwise ``None``."""

    def get_user(self, user_id: str) -> UserRecord | None:
        """Fetch the current state of a user (``None`` when deleted)."""


class InMemoryUserDirectory(UserDirectory):
    """Dictionary-backed directory used by unit tests."""

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add_user(self, username: str, password: str) -> UserRecord:
        with self._lock:
            user = UserRecord(
                id=str(next(self._ids)),
                username=username,
                password_hash=generate_password_hash(password),
            )
            self._users[user.id] = user
            return user

    def set_password(self, user_id: str, new_password: str) -> UserRecord:
        with self._lock:
            user = replace(self._users[user_id], password_hash=generate_password_hash(new_password))
            self._users[user_id] = user
            return user

    def delete_user(self, user_id: str) -> None:
        with self._lock:
            self._users.pop(user_id, None)

    def verify_credentials(self, username: str, password: str) -> UserRecord | None:
        user = next((u for u in self._users.values() if u.username == username), None)
        if user is None or not check_password_hash(user.password_hash, password):
            return None
        return user

    def get_user(self, user_id: str) -> UserRecord | None:
        return self._users.get(str(user_id))
