"""Shared API helpers: service wiring, bearer parsing, cookies, timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from tokenauth.core.extensions import db, get_token_store
from tokenauth.infra.jwt.flask_jwt_token_issuer import FlaskJWTTokenIssuer
from tokenauth.repositories.user import UserRepository
from tokenauth.services._shared.dto import AuthStatus, CookieDirective
from tokenauth.services.auth import AuthService, AuthTokenConfig

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


def token_config() -> AuthTokenConfig:
    """Build token lifetimes from the application config."""
    cfg = current_app.config
    return AuthTokenConfig(
        access_expires=timedelta(seconds=int(cfg["ACCESS_TOKEN_TTL_SECONDS"])),
        refresh_expires=timedelta(seconds=int(cfg["REFRESH_TOKEN_TTL_SECONDS"])),
    )


def get_auth_service() -> AuthService:
    """Wire an :class:`AuthService` to the app's store and the current session."""
    ttl = token_config()
    return AuthService(
        token_issuer=FlaskJWTTokenIssuer(
            access_ttl=ttl.access_expires, refresh_ttl=ttl.refresh_expires
        ),
        token_store=get_token_store(),
        user_directory=UserRepository(db.session),
        token_cfg=ttl,
    )


def bearer_token() -> str | None:
    """Extract ``<token>`` from ``Authorization: Bearer <token>``.

    Any other header shape is treated as no token at all.
    """
    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def refresh_cookie() -> str | None:
    """Return the refresh token carried by the request cookie."""
    return request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"]) or None


def current_auth_status() -> AuthStatus:
    """Derive the caller's :class:`AuthStatus` from the bearer token."""
    return get_auth_service().authenticate(bearer_token())


def apply_refresh_cookie(response: Response, directive: CookieDirective | None) -> Response:
    """Write the refresh cookie requested by a flow onto ``response``."""
    if directive is None:
        return response
    cfg = current_app.config
    response.set_cookie(
        cfg["REFRESH_COOKIE_NAME"],
        directive.value,
        max_age=directive.max_age,
        expires=directive.expires,
        path="/",
        httponly=True,
        secure=bool(cfg["REFRESH_COOKIE_SECURE"]),
        samesite=cfg["REFRESH_COOKIE_SAMESITE"],
    )
    return response


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
