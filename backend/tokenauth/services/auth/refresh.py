"""Silent renewal: validate, rotate and re-issue a token pair."""

from __future__ import annotations

import logging

from tokenauth.services._shared.dto import ErrorCode, ErrorDetail
from tokenauth.services._shared.errors import ServiceError
from tokenauth.services._shared.policies.common import fingerprints_match
from tokenauth.services._shared.ports import ReplaceResult, TokenIssuer, TokenStore, UserDirectory

from .cookies import clear_refresh_cookie, set_refresh_cookie
from .dto import AuthTokenConfig, RefreshIn, RefreshOut

logger = logging.getLogger(__name__)

INVALID_REFRESH_MESSAGE = "Authentication Error: Invalid refresh token."


class RefreshFlow:
    """
    Presented -> Validated -> Rotated -> Reissued, or Presented -> Rejected.

    The old token is consumed by ``TokenStore.whitelist_replace`` (an atomic
    compare-and-swap), so two concurrent calls with the same token yield one
    success and one rejection.
    """

    def __init__(
        self,
        *,
        token_issuer: TokenIssuer,
        token_store: TokenStore,
        user_directory: UserDirectory,
        token_cfg: AuthTokenConfig,
    ) -> None:
        self.tokens = token_issuer
        self.store = token_store
        self.users = user_directory
        self.cfg = token_cfg

    def run(self, dto: RefreshIn) -> RefreshOut:
        old = dto.refresh_token
        if not old:
            return self._reject("missing")

        try:
            # 1) Whitelist membership (expired records report absent)
            record = self.store.whitelist_lookup(old)
            if record is None:
                return self._reject("not_whitelisted")

            # 2) Fingerprint must still match the user's password hash
            user = self.users.get_user(record.user_id)
            if user is None or not fingerprints_match(record.fingerprint, user.fingerprint):
                self.store.whitelist_remove(old)
                return self._reject("fingerprint_mismatch", user_id=record.user_id)

            # 3) Mint the new pair first, then swap; losing the race discards it
            new_record = self.tokens.issue_refresh_token(
                user_id=user.id, fingerprint=user.fingerprint
            )
            access = self.tokens.issue_access_token(user_id=user.id, fingerprint=user.fingerprint)
            if self.store.whitelist_replace(old, new_record) is not ReplaceResult.OK:
                return self._reject("already_rotated", user_id=user.id)
        except ServiceError:
            logger.error("auth.refresh.failed", exc_info=True)
            return RefreshOut(
                status_code=500,
                errors=[ErrorDetail(ErrorCode.INTERNAL_ERROR, "Unable to refresh tokens.")],
            )

        # 4) Reissued
        logger.info("auth.refresh.rotated", extra={"user_id": user.id})
        return RefreshOut(
            status_code=200,
            user=user.to_public(),
            access_token=access,
            cookie=set_refresh_cookie(new_record, self.cfg.refresh_max_age),
        )

    @staticmethod
    def _reject(reason: str, *, user_id: str | None = None) -> RefreshOut:
        logger.warning("auth.refresh.rejected", extra={"reason": reason, "user_id": user_id})
        return RefreshOut(
            status_code=400,
            errors=[ErrorDetail(ErrorCode.INVALID_REFRESH_TOKEN, INVALID_REFRESH_MESSAGE)],
            cookie=clear_refresh_cookie(),
        )
