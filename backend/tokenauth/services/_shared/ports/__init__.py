"""
tokenauth.services._shared.ports
================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token issuing, token state and credential verification.

Modules
-------
- :mod:`token_issuer`:
    Defines :class:`~.TokenIssuer`: signing and verification of access
    tokens, minting of refresh-token records.

- :mod:`token_store`:
    Defines :class:`~.TokenStore`, :class:`~.RefreshTokenRecord` and
    :class:`~.ReplaceResult`: the refresh-token whitelist and the
    access-token blacklist, with atomic rotation.

- :mod:`user_directory`:
    Defines :class:`~.UserDirectory` and :class:`~.UserRecord`: credential
    verification and user lookup.

Design Notes
------------
Services depend on these protocols only. Concrete adapters (Redis,
Flask-JWT-Extended, SQLAlchemy) live under ``tokenauth.infra`` and
``tokenauth.repositories``; in-memory doubles live next to each protocol.
"""

from __future__ import annotations

from .token_issuer import AccessTokenClaims, StubTokenIssuer, TokenIssuer, new_refresh_record
from .token_store import InMemoryTokenStore, RefreshTokenRecord, ReplaceResult, TokenStore
from .user_directory import InMemoryUserDirectory, UserDirectory, UserRecord

__all__ = [
    "AccessTokenClaims",
    "InMemoryTokenStore",
    "InMemoryUserDirectory",
    "RefreshTokenRecord",
    "ReplaceResult",
    "StubTokenIssuer",
    "TokenIssuer",
    "TokenStore",
    "UserDirectory",
    "UserRecord",
    "new_refresh_record",
]
