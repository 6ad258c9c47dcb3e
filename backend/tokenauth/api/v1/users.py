"""User operations reached only through the authorization gate."""

from __future__ import annotations

import logging

from flask import Blueprint, request

from tokenauth.api.deps import current_auth_status, timing
from tokenauth.api.errors import envelope_response
from tokenauth.core.extensions import db
from tokenauth.repositories.user import UserRepository, to_record
from tokenauth.schemas import PasswordChangeSchema, UserSchema
from tokenauth.services.gate import run_if_authenticated, run_if_authorized

bp = Blueprint("users", __name__)

logger = logging.getLogger(__name__)

user_schema = UserSchema()
users_schema = UserSchema(many=True)
password_schema = PasswordChangeSchema()


@bp.get("")
@timing
def list_users():
    """List every user (any authenticated caller)."""

    def _list():
        return [to_record(u).to_public() for u in UserRepository(db.session).list_all()]

    envelope = run_if_authenticated(auth_status=current_auth_status(), operation=_list)
    return envelope_response(envelope, dump=users_schema.dump)


@bp.get("/<user_id>")
@timing
def get_user(user_id: str):
    """Return one user; callers may only read themselves."""

    def _get():
        return to_record(UserRepository(db.session).get(user_id)).to_public()

    envelope = run_if_authorized(
        auth_status=current_auth_status(), target_user_id=user_id, operation=_get
    )
    return envelope_response(envelope, dump=user_schema.dump)


@bp.put("/<user_id>/password")
@timing
def change_password(user_id: str):
    """Replace the caller's password.

    Every token issued before the change stops working: access tokens fail
    the fingerprint check and refresh tokens are rejected on next use.
    """

    data = password_schema.load(request.get_json(silent=True) or {})
    auth_status = current_auth_status()

    def _change():
        repo = UserRepository(db.session)
        try:
            user = repo.update_password(user_id, data["password"])
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("users.password_changed", extra={"user_id": str(user.id)})
        return to_record(user).to_public()

    envelope = run_if_authorized(auth_status=auth_status, target_user_id=user_id, operation=_change)
    return envelope_response(envelope, dump=user_schema.dump)
