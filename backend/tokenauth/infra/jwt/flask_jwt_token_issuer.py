# tokenauth/infra/jwt/flask_jwt_token_issuer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError

from tokenauth.services._shared.errors import TokenSigningError
from tokenauth.services._shared.ports import (
    AccessTokenClaims,
    RefreshTokenRecord,
    TokenIssuer,
    new_refresh_record,
)

log = logging.getLogger(__name__)

# Custom claim carrying the password-hash fingerprint.
FINGERPRINT_CLAIM = "fp"
ACCESS_TOKEN_TYPE = "access"


@dataclass(slots=True)
class FlaskJWTTokenIssuer(TokenIssuer):
    """
    Adapter for Flask-JWT-Extended.

    .. note::
       Requires an active Flask app context with ``JWT_SECRET_KEY`` (or
       ``SECRET_KEY``) configured. Refresh tokens are opaque random strings,
       not JWTs: their validity lives in the whitelist only.
    """

    access_ttl: timedelta
    refresh_ttl: timedelta

    def issue_access_token(self, *, user_id: str, fingerprint: str) -> str:
        try:
            return cast(
                str,
                create_access_token(
                    identity=str(user_id),
                    additional_claims={FINGERPRINT_CLAIM: fingerprint},
                    expires_delta=self.access_ttl,
                ),
            )
        except (RuntimeError, PyJWTError, TypeError, ValueError) as exc:
            # Missing key, bad algorithm or unusable key material: nothing a
            # client can fix, so report it as a configuration failure.
            log.critical("access_token.signing_failed", exc_info=True)
            raise TokenSigningError("Unable to sign access token.") from exc

    def issue_refresh_token(self, *, user_id: str, fingerprint: str) -> RefreshTokenRecord:
        return new_refresh_record(user_id=user_id, fingerprint=fingerprint, ttl=self.refresh_ttl)

    def verify_access_token(self, token: str) -> AccessTokenClaims | None:
        if not token:
            return None
        try:
            payload = cast(dict[str, Any], decode_token(token))
        except (PyJWTError, JWTExtendedException):
            return None
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return None
        try:
            return AccessTokenClaims(
                user_id=str(payload["sub"]),
                fingerprint=str(payload.get(FINGERPRINT_CLAIM) or ""),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            )
        except (KeyError, TypeError, ValueError):
            return None
