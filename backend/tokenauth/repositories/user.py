"""User repository for persistence and credential verification."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tokenauth.models.user import User
from tokenauth.services._shared.errors import UserDirectoryError
from tokenauth.services._shared.ports import UserDirectory, UserRecord


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise UserDirectoryError("User directory unavailable.") from exc


def to_record(user: User) -> UserRecord:
    """Project an ORM user onto the service-layer view."""
    return UserRecord(id=str(user.id), username=user.username, password_hash=user.password_hash)


class UserRepository(UserDirectory):
    """Persistence-only repository for :class:`User`.

    Doubles as the :class:`UserDirectory` adapter used by the auth flows.
    It NEVER handles tokens, only DB-level user management.

    :param session: SQLAlchemy session (usually ``db.session``).
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # ---------------------------- Lookup helpers ----------------------------

    def get(self, user_id: int | str) -> User | None:
        """Fetch a user by primary key; non-numeric ids simply miss."""
        try:
            pk = int(user_id)
        except (TypeError, ValueError):
            return None
        return cast(User | None, self.session.get(User, pk))

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username (trimmed, case-sensitive)."""
        stmt = select(User).where(User.username == username.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def list_all(self) -> list[User]:
        """Return every user ordered by id."""
        return list(self.session.execute(select(User).order_by(User.id)).scalars())

    # ---------------------------- Writes ----------------------------

    def create(self, username: str, password: str) -> User:
        """Persist a new user; the model setter hashes ``password``."""
        user = User(username=username)
        user.password = password
        self.session.add(user)
        self.session.flush()
        return user

    def update_password(self, user_id: int | str, new_password: str) -> User:
        """Replace a user's password hash and flush the session.

        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password  # invokes setter → hash
        self.session.flush()
        return user

    # ---------------------------- UserDirectory ----------------------------

    def verify_credentials(self, username: str, password: str) -> UserRecord | None:
        with _translate_errors():
            user = self.get_by_username(username)
            if user is None or not user.verify_password(password):
                return None
            return to_record(user)

    def get_user(self, user_id: str) -> UserRecord | None:
        with _translate_errors():
            user = self.get(user_id)
            return to_record(user) if user is not None else None
