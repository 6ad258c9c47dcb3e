"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request

from tokenauth.api.deps import (
    apply_refresh_cookie,
    bearer_token,
    current_auth_status,
    get_auth_service,
    json_response,
    refresh_cookie,
    timing,
)
from tokenauth.api.errors import envelope_response, failure_response
from tokenauth.core.extensions import db
from tokenauth.repositories.user import UserRepository, to_record
from tokenauth.schemas import LoginSchema, TokenResponseSchema, UserSchema
from tokenauth.services.auth import LoginIn, LogoutIn, RefreshIn
from tokenauth.services.gate import run_if_authenticated

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
token_schema = TokenResponseSchema()
user_schema = UserSchema()


@bp.post("/login")
@timing
def login():
    """Authenticate credentials, set the refresh cookie, return an access token."""

    data = login_schema.load(request.get_json(silent=True) or {})
    out = get_auth_service().login(LoginIn(username=data["username"], password=data["password"]))
    if out.errors:
        return failure_response(out.status_code, out.errors)

    body = {
        "data": token_schema.dump(
            {
                "user": out.user,
                "access_token": out.access_token,
                "refresh_expires_at": out.refresh_record.expires_at if out.refresh_record else None,
            }
        )
    }
    return apply_refresh_cookie(json_response(body, status=out.status_code), out.cookie)


@bp.post("/refresh")
@timing
def silent_refresh():
    """Rotate the refresh cookie and return a new access token."""

    out = get_auth_service().silent_refresh(RefreshIn(refresh_token=refresh_cookie()))
    if out.errors:
        response = failure_response(out.status_code, out.errors)
    else:
        body = {"data": token_schema.dump({"user": out.user, "access_token": out.access_token})}
        response = json_response(body, status=out.status_code)
    return apply_refresh_cookie(response, out.cookie)


@bp.post("/logout")
@timing
def logout():
    """Blacklist the bearer token, delist the refresh cookie and clear it."""

    out = get_auth_service().logout(
        LogoutIn(refresh_token=refresh_cookie(), access_token=bearer_token())
    )
    if out.errors:
        response = failure_response(out.status_code, out.errors)
    else:
        response = json_response({"data": None}, status=out.status_code)
    return apply_refresh_cookie(response, out.cookie)


@bp.get("/whoami")
@timing
def whoami():
    """Return the authenticated user profile."""

    auth_status = current_auth_status()

    def _load():
        user = UserRepository(db.session).get(auth_status.user_id)
        return to_record(user).to_public()

    envelope = run_if_authenticated(auth_status=auth_status, operation=_load)
    return envelope_response(envelope, dump=user_schema.dump)
