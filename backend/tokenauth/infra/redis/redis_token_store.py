# comments in English; reST docstrings
from __future__ import annotations

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]

from tokenauth.services._shared.errors import TokenStoreError
from tokenauth.services._shared.ports import RefreshTokenRecord, ReplaceResult, TokenStore


# WATCH conflicts tolerated by whitelist_replace before giving up.
MAX_REPLACE_ATTEMPTS = 5


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Re-raise redis-py failures as the store's domain error."""
    try:
        yield
    except redis.WatchError:
        raise
    except redis.RedisError as exc:
        raise TokenStoreError(f"Redis token store failure: {exc}") from exc


def _b(value: bytes | None, default: str = "") -> str:
    return value.decode() if value is not None else default


@dataclass(slots=True)
class RedisTokenStore(TokenStore):
    """
    Redis-backed whitelist/blacklist.

    Key layout
    ----------
    - ``rt:{token}``: hash ``{user_id, fingerprint, expires_at}`` with a key
      TTL equal to the record's remaining lifetime.
    - ``deny:at:{sha256(token)}``: marker with a TTL equal to the access
      token's remaining lifetime; Redis expiry does the pruning.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token: str) -> str:
        return f"rt:{token}"

    @staticmethod
    def _kd(token: str) -> str:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return f"deny:at:{digest}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        return int(dt.timestamp())

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _mapping(self, record: RefreshTokenRecord) -> dict[str, str]:
        return {
            "user_id": record.user_id,
            "fingerprint": record.fingerprint,
            "expires_at": str(self._to_ts(record.expires_at)),
        }

    def _from_hash(self, token: str, h: dict[bytes, bytes]) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            token=token,
            user_id=_b(h.get(b"user_id")),
            fingerprint=_b(h.get(b"fingerprint")),
            expires_at=datetime.fromtimestamp(int(_b(h.get(b"expires_at"), "0")), tz=UTC),
        )

    # -------------------- API ------------------------

    def whitelist_add(self, record: RefreshTokenRecord) -> None:
        ttl = record.ttl_seconds(self._now())
        if ttl <= 0:
            return
        key = self._k(record.token)
        with _translate_errors():
            pipe = self.r.pipeline(transaction=True)
            pipe.delete(key)
            pipe.hset(key, mapping=self._mapping(record))
            pipe.expire(key, ttl)
            pipe.execute()

    def whitelist_remove(self, token: str) -> None:
        with _translate_errors():
            self.r.delete(self._k(token))

    def whitelist_lookup(self, token: str) -> RefreshTokenRecord | None:
        with _translate_errors():
            h = self.r.hgetall(self._k(token))
        if not h:
            return None
        record = self._from_hash(token, h)
        if record.is_expired(self._now()):
            return None
        return record

    def whitelist_replace(self, old_token: str, new_record: RefreshTokenRecord) -> ReplaceResult:
        """
        Atomically consume ``old_token`` and insert ``new_record``.

        Uses WATCH/MULTI/EXEC (optimistic locking): if another client touches
        the old key between the read and EXEC, the transaction aborts and is
        retried; the retry then sees the key gone and reports
        ``ALREADY_GONE``, so at most one caller ever gets ``OK``.

        :raises TokenStoreError: After ``MAX_REPLACE_ATTEMPTS`` conflicts.
        """
        k_old = self._k(old_token)
        k_new = self._k(new_record.token)

        for _ in range(MAX_REPLACE_ATTEMPTS):
            try:
                with _translate_errors(), self.r.pipeline() as p:
                    p.watch(k_old)

                    h = p.hgetall(k_old)
                    if not h or self._from_hash(old_token, h).is_expired(self._now()):
                        p.unwatch()
                        return ReplaceResult.ALREADY_GONE

                    ttl = new_record.ttl_seconds(self._now())
                    p.multi()
                    p.delete(k_old)
                    p.hset(k_new, mapping=self._mapping(new_record))
                    p.expire(k_new, max(1, ttl))
                    p.execute()
                return ReplaceResult.OK
            except redis.WatchError:
                # Concurrent modification detected; re-read the old key.
                continue
        raise TokenStoreError(
            f"Refresh token rotation kept conflicting after {MAX_REPLACE_ATTEMPTS} attempts."
        )

    def blacklist_add(self, token: str, expires_at: datetime) -> None:
        ttl = int((expires_at - self._now()).total_seconds())
        if ttl <= 0:
            return
        with _translate_errors():
            # small marker with TTL; idempotent
            self.r.set(self._kd(token), "1", ex=ttl)

    def blacklist_contains(self, token: str) -> bool:
        with _translate_errors():
            return int(self.r.exists(self._kd(token))) == 1

    def prune(self, now: datetime | None = None) -> int:
        # Key TTLs already evict expired entries.
        return 0

    def ping(self) -> bool:
        with _translate_errors():
            return bool(self.r.ping())
