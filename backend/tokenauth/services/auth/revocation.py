"""Logout: blacklist the access token and delist the refresh token."""

from __future__ import annotations

import logging

from tokenauth.services._shared.dto import ErrorCode, ErrorDetail
from tokenauth.services._shared.errors import ServiceError
from tokenauth.services._shared.ports import TokenIssuer, TokenStore

from .cookies import clear_refresh_cookie
from .dto import LogoutIn, LogoutOut

logger = logging.getLogger(__name__)


class RevocationFlow:
    """Idempotent logout; missing, malformed or expired tokens are skipped."""

    def __init__(self, *, token_issuer: TokenIssuer, token_store: TokenStore) -> None:
        self.tokens = token_issuer
        self.store = token_store

    def run(self, dto: LogoutIn) -> LogoutOut:
        try:
            if dto.access_token:
                claims = self.tokens.verify_access_token(dto.access_token)
                if claims is not None:
                    # The entry lives exactly as long as the token it shadows.
                    self.store.blacklist_add(dto.access_token, claims.expires_at)
            if dto.refresh_token:
                self.store.whitelist_remove(dto.refresh_token)
        except ServiceError:
            logger.error("auth.logout.failed", exc_info=True)
            return LogoutOut(
                status_code=500,
                errors=[ErrorDetail(ErrorCode.INTERNAL_ERROR, "Unable to complete logout.")],
                cookie=clear_refresh_cookie(),
            )

        logger.info("auth.logout")
        return LogoutOut(status_code=200, cookie=clear_refresh_cookie())
