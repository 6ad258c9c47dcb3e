"""Refresh-cookie directives produced by the auth flows."""

from __future__ import annotations

from datetime import UTC, datetime

from tokenauth.services._shared.dto import CookieDirective
from tokenauth.services._shared.ports import RefreshTokenRecord

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def set_refresh_cookie(record: RefreshTokenRecord, max_age: int) -> CookieDirective:
    """Carry ``record.token`` in the cookie for ``max_age`` seconds."""
    return CookieDirective(value=record.token, max_age=max_age)


def clear_refresh_cookie() -> CookieDirective:
    """Expire the cookie immediately."""
    return CookieDirective(value="", expires=EPOCH)
