from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum, auto
from typing import Protocol


class ReplaceResult(Enum):
    """Outcome of an atomic whitelist compare-and-swap."""

    OK = auto()
    ALREADY_GONE = auto()


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Whitelist entry for a refresh token.

    :ivar token: Opaque random token value (whitelist key).
    :ivar user_id: Owner user id.
    :ivar fingerprint: Password-hash fingerprint at issuance.
    :ivar expires_at: Absolute expiration (UTC).
    """

    token: str
    user_id: str
    fingerprint: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or datetime.now(UTC))

    def ttl_seconds(self, now: datetime | None = None) -> int:
        return int((self.expires_at - (now or datetime.now(UTC))).total_seconds())


class TokenStore(Protocol):
    """
    Shared whitelist (refresh tokens) and blacklist (revoked access tokens).

    All write operations MUST be idempotent, and ``whitelist_replace`` MUST be
    atomic with respect to concurrent callers.
    """

    def whitelist_add(self, record: RefreshTokenRecord) -> None:
        """Insert or overwrite the record keyed by ``record.token``."""

    def whitelist_remove(self, token: str) -> None:
        """Delete the record; absent tokens are ignored."""

    def whitelist_lookup(self, token: str) -> RefreshTokenRecord | None:
        """Return the live record, or ``None`` when absent or expired."""

    def whitelist_replace(self, old_token: str, new_record: RefreshTokenRecord) -> ReplaceResult:
        """
        Atomically swap ``old_token`` for ``new_record``.

        :returns: ``ReplaceResult.OK`` only if ``old_token`` was still live at
            the moment of the swap; ``ReplaceResult.ALREADY_GONE`` otherwise,
            in which case nothing is written.
        """

    def blacklist_add(self, token: str, expires_at: datetime) -> None:
        """Shadow an access token until ``expires_at``."""

    def blacklist_contains(self, token: str) -> bool:
        """Return True while the token is blacklisted and not yet expired."""

    def prune(self, now: datetime | None = None) -> int:
        """Drop expired entries. :returns: number of entries removed."""

    def ping(self) -> bool:
        """Return True when the backend is reachable."""


class InMemoryTokenStore(TokenStore):
    """
    Process-local token store.

    .. note::
       A single lock guards both maps, which makes every operation atomic
       within one process. Use the Redis store when running several workers.
    """

    # Sweep expired entries every N writes so the maps stay bounded even
    # when nobody calls ``prune``.
    SWEEP_EVERY = 256

    def __init__(self) -> None:
        self._whitelist: dict[str, RefreshTokenRecord] = {}
        self._blacklist: dict[str, datetime] = {}
        self._lock = threading.Lock()
        self._writes = 0

    # ------------------------- helpers -------------------------

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _live(self, token: str, now: datetime) -> RefreshTokenRecord | None:
        record = self._whitelist.get(token)
        if record is None:
            return None
        if record.is_expired(now):
            del self._whitelist[token]
            return None
        return record

    def _count_write(self) -> None:
        self._writes += 1
        if self._writes % self.SWEEP_EVERY == 0:
            self._sweep(self._now())

    def _sweep(self, now: datetime) -> int:
        stale_rt = [t for t, r in self._whitelist.items() if r.is_expired(now)]
        stale_at = [t for t, exp in self._blacklist.items() if exp <= now]
        for t in stale_rt:
            del self._whitelist[t]
        for t in stale_at:
            del self._blacklist[t]
        return len(stale_rt) + len(stale_at)

    # -------------------------- API ----------------------------

    def whitelist_add(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            self._whitelist[record.token] = record
            self._count_write()

    def whitelist_remove(self, token: str) -> None:
        with self._lock:
            self._whitelist.pop(token, None)

    def whitelist_lookup(self, token: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._live(token, self._now())

    def whitelist_replace(self, old_token: str, new_record: RefreshTokenRecord) -> ReplaceResult:
        with self._lock:
            if self._live(old_token, self._now()) is None:
                return ReplaceResult.ALREADY_GONE
            del self._whitelist[old_token]
            self._whitelist[new_record.token] = new_record
            self._count_write()
            return ReplaceResult.OK

    def blacklist_add(self, token: str, expires_at: datetime) -> None:
        with self._lock:
            if expires_at <= self._now():
                # Already expired: signature checks reject it anyway.
                return
            self._blacklist[token] = expires_at
            self._count_write()

    def blacklist_contains(self, token: str) -> bool:
        with self._lock:
            expires_at = self._blacklist.get(token)
            if expires_at is None:
                return False
            if expires_at <= self._now():
                del self._blacklist[token]
                return False
            return True

    def prune(self, now: datetime | None = None) -> int:
        with self._lock:
            return self._sweep(now or self._now())

    def ping(self) -> bool:
        return True
