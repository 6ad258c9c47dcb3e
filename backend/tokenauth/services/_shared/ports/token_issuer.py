from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from tokenauth.services._shared.errors import TokenSigningError

from .token_store import RefreshTokenRecord

# 48 random bytes -> 64 url-safe characters.
REFRESH_TOKEN_BYTES = 48


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    """
    Verified content of an access token.

    :ivar user_id: Token subject.
    :ivar fingerprint: Password-hash fingerprint at issuance.
    :ivar issued_at: ``iat`` claim (UTC).
    :ivar expires_at: ``exp`` claim (UTC).
    """

    user_id: str
    fingerprint: str
    issued_at: datetime
    expires_at: datetime


def new_refresh_record(*, user_id: str, fingerprint: str, ttl: timedelta) -> RefreshTokenRecord:
    """Build a whitelist record around a fresh CSPRNG token."""
    return RefreshTokenRecord(
        token=secrets.token_urlsafe(REFRESH_TOKEN_BYTES),
        user_id=str(user_id),
        fingerprint=fingerprint,
        expires_at=datetime.now(UTC) + ttl,
    )


class TokenIssuer(Protocol):
    """Port for issuing access/refresh tokens and verifying access tokens."""

    def issue_access_token(self, *, user_id: str, fingerprint: str) -> str:
        """
        Sign a short-lived access token.

        :raises TokenSigningError: When the signing key is missing or unusable.
        """
        ...

    def issue_refresh_token(self, *, user_id: str, fingerprint: str) -> RefreshTokenRecord: ...

    def verify_access_token(self, token: str) -> AccessTokenClaims | None:
        """
        Check signature and expiry only.

        :returns: Claims, or ``None`` for any kind of invalid token.
        """
        ...


class StubTokenIssuer(TokenIssuer):
    """Deterministic token issuer used in unit tests."""

    def __init__(
        self,
        *,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.fail_signing = False
        self._seq = 0
        self._lock = threading.Lock()
        self._issued: dict[str, AccessTokenClaims] = {}

    def issue_access_token(self, *, user_id: str, fingerprint: str) -> str:
        if self.fail_signing:
            raise TokenSigningError("Signing key unavailable (stub).")
        now = datetime.now(UTC)
        with self._lock:
            self._seq += 1
            token = f"access.{user_id}.{self._seq}"
            self._issued[token] = AccessTokenClaims(
                user_id=str(user_id),
                fingerprint=fingerprint,
                issued_at=now,
                expires_at=now + self.access_ttl,
            )
        return token

    def issue_refresh_token(self, *, user_id: str, fingerprint: str) -> RefreshTokenRecord:
        return new_refresh_record(user_id=user_id, fingerprint=fingerprint, ttl=self.refresh_ttl)

    def verify_access_token(self, token: str) -> AccessTokenClaims | None:
        with self._lock:
            claims = self._issued.get(token)
        if claims is None or claims.expires_at <= datetime.now(UTC):
            return None
        return claims
