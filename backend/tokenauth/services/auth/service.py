# tokenauth/services/auth/service.py
from __future__ import annotations

import logging

from tokenauth.services._shared.dto import AuthStatus, ErrorCode, ErrorDetail
from tokenauth.services._shared.errors import ServiceError
from tokenauth.services._shared.policies.common import fingerprints_match
from tokenauth.services._shared.ports import TokenIssuer, TokenStore, UserDirectory

from .cookies import set_refresh_cookie
from .dto import AuthTokenConfig, LoginIn, LoginOut, LogoutIn, LogoutOut, RefreshIn, RefreshOut
from .refresh import RefreshFlow
from .revocation import RevocationFlow

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication lifecycle service (login / silent refresh / logout).

    This service issues and verifies tokens via a pluggable TokenIssuer,
    keeps refresh tokens in the TokenStore whitelist (atomic rotation), and
    enforces early revocation of access tokens via the TokenStore blacklist.
    None of its public methods raise: every outcome carries a status code
    and a list of errors.
    """

    def __init__(
        self,
        *,
        token_issuer: TokenIssuer,
        token_store: TokenStore,
        user_directory: UserDirectory,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_issuer: Adapter for signing/verifying access tokens.
        :param token_store: Shared whitelist/blacklist.
        :param user_directory: Credential verification and user lookup.
        :param token_cfg: Access/Refresh expiry configuration.
        """
        self.tokens = token_issuer
        self.store = token_store
        self.users = user_directory
        self.cfg = token_cfg or AuthTokenConfig()
        self.refresh_flow = RefreshFlow(
            token_issuer=token_issuer,
            token_store=token_store,
            user_directory=user_directory,
            token_cfg=self.cfg,
        )
        self.revocation_flow = RevocationFlow(token_issuer=token_issuer, token_store=token_store)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: 200 with user, access token, refresh record and cookie;
            401 ``InvalidCredentials``; 500 ``InternalError``.
        """
        try:
            user = self.users.verify_credentials(dto.username, dto.password)
            if user is None:
                logger.warning("auth.login.rejected", extra={"reason": "invalid_credentials"})
                return LoginOut(
                    status_code=401,
                    errors=[
                        ErrorDetail(ErrorCode.INVALID_CREDENTIALS, "Invalid username or password.")
                    ],
                )

            record = self.tokens.issue_refresh_token(user_id=user.id, fingerprint=user.fingerprint)
            access = self.tokens.issue_access_token(user_id=user.id, fingerprint=user.fingerprint)
            # Whitelist before the pair leaves the server.
            self.store.whitelist_add(record)
        except ServiceError:
            logger.error("auth.login.failed", exc_info=True)
            return LoginOut(
                status_code=500,
                errors=[ErrorDetail(ErrorCode.INTERNAL_ERROR, "Unable to complete login.")],
            )

        logger.info("auth.login", extra={"user_id": user.id})
        return LoginOut(
            status_code=200,
            user=user.to_public(),
            access_token=access,
            refresh_record=record,
            cookie=set_refresh_cookie(record, self.cfg.refresh_max_age),
        )

    # ------------------------------------------------------------------ #
    # Refresh / Logout
    # ------------------------------------------------------------------ #

    def silent_refresh(self, dto: RefreshIn) -> RefreshOut:
        """Rotate the presented refresh token and emit a new access token."""
        return self.refresh_flow.run(dto)

    def logout(self, dto: LogoutIn) -> LogoutOut:
        """Revoke the presented tokens; safe to call any number of times."""
        return self.revocation_flow.run(dto)

    # ------------------------------------------------------------------ #
    # Request authentication
    # ------------------------------------------------------------------ #

    def authenticate(self, access_token: str | None) -> AuthStatus:
        """
        Derive the request's :class:`AuthStatus` from an access token.

        Bad signature, expiry, blacklisting, a deleted user and a stale
        fingerprint all produce the same anonymous status.
        """
        if not access_token:
            return AuthStatus.anonymous()

        claims = self.tokens.verify_access_token(access_token)
        if claims is None:
            return self._deny("invalid_token")

        try:
            if self.store.blacklist_contains(access_token):
                return self._deny("revoked", claims.user_id)
            user = self.users.get_user(claims.user_id)
        except ServiceError:
            logger.error("auth.authenticate.failed", exc_info=True)
            return AuthStatus.anonymous()

        if user is None or not fingerprints_match(claims.fingerprint, user.fingerprint):
            return self._deny("stale_fingerprint", claims.user_id)
        return AuthStatus(is_authenticated=True, user_id=user.id)

    @staticmethod
    def _deny(reason: str, user_id: str | None = None) -> AuthStatus:
        logger.debug("auth.authenticate.denied", extra={"reason": reason, "user_id": user_id})
        return AuthStatus.anonymous()
