# tokenauth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from tokenauth.services._shared.dto import CookieDirective, ErrorDetail
from tokenauth.services._shared.ports import RefreshTokenRecord

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Login name.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for silent refresh.

    :param refresh_token: Value of the refresh cookie (may be missing).
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Value of the refresh cookie, if any.
    :type refresh_token: str | None
    :param access_token: Bearer token from the ``Authorization`` header, if any.
    :type access_token: str | None
    """

    refresh_token: str | None
    access_token: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Outcome of a login attempt.

    ``cookie`` is only set on success; the edge must apply it before the
    access token is handed to the client.
    """

    status_code: int
    user: dict[str, str] | None = None
    access_token: str = ""
    refresh_record: RefreshTokenRecord | None = None
    errors: list[ErrorDetail] = field(default_factory=list)
    cookie: CookieDirective | None = None


@dataclass(frozen=True, slots=True)
class RefreshOut:
    """
    Outcome of a silent refresh.

    ``cookie`` holds the rotated token on success, a clearing directive on
    rejection and ``None`` on internal failure (cookie left untouched).
    """

    status_code: int
    user: dict[str, str] | None = None
    access_token: str = ""
    errors: list[ErrorDetail] = field(default_factory=list)
    cookie: CookieDirective | None = None


@dataclass(frozen=True, slots=True)
class LogoutOut:
    """Outcome of a logout; ``cookie`` always clears the refresh cookie."""

    status_code: int
    errors: list[ErrorDetail] = field(default_factory=list)
    cookie: CookieDirective | None = None


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime (and cookie ``Max-Age``).
    :type refresh_expires: timedelta
    """

    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=7)

    @property
    def refresh_max_age(self) -> int:
        return int(self.refresh_expires.total_seconds())
