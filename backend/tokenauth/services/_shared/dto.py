# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error taxonomy shared by every auth outcome."""

    INVALID_CREDENTIALS = "InvalidCredentials"
    UNAUTHENTICATED = "Unauthenticated"
    UNAUTHORIZED = "Unauthorized"
    INVALID_REFRESH_TOKEN = "InvalidRefreshToken"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """
    A single error entry of an envelope.

    :param code: Taxonomy value.
    :type code: ErrorCode
    :param message: Client-safe explanation.
    :type message: str
    """

    code: ErrorCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


@dataclass(frozen=True, slots=True)
class Envelope:
    """
    Uniform result of a gated operation.

    :param data: Operation payload, ``None`` on failure.
    :type data: Any
    :param errors: Errors collected while running the operation.
    :type errors: list[ErrorDetail]
    :param status_code: HTTP-flavoured status the transport edge should use.
    :type status_code: int
    """

    data: Any = None
    errors: list[ErrorDetail] = field(default_factory=list)
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls, data: Any = None, status_code: int = 200) -> Envelope:
        return cls(data=data, errors=[], status_code=status_code)

    @classmethod
    def failure(cls, code: ErrorCode, message: str, status_code: int) -> Envelope:
        return cls(data=None, errors=[ErrorDetail(code, message)], status_code=status_code)


@dataclass(frozen=True, slots=True)
class AuthStatus:
    """
    Request-scoped authentication state derived from the access token.

    :param is_authenticated: Whether the presented token passed every check.
    :type is_authenticated: bool
    :param user_id: Subject of the token when authenticated.
    :type user_id: str | None
    """

    is_authenticated: bool
    user_id: str | None = None

    @classmethod
    def anonymous(cls) -> AuthStatus:
        return cls(is_authenticated=False, user_id=None)


@dataclass(frozen=True, slots=True)
class CookieDirective:
    """
    Refresh-cookie mutation requested by a flow.

    The service layer never touches the response; the HTTP edge applies the
    directive with the configured cookie attributes.

    :param value: New cookie value (empty when clearing).
    :param max_age: ``Max-Age`` in seconds when setting a cookie.
    :param expires: Absolute expiry, set to the epoch when clearing.
    """

    value: str
    max_age: int | None = None
    expires: datetime | None = None

    @property
    def clears(self) -> bool:
        return self.max_age is None
