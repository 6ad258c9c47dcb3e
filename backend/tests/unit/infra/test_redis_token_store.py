# tests/unit/infra/test_redis_token_store.py
"""
Unit tests for RedisTokenStore using fakeredis.

They cover whitelist add/lookup/remove, the WATCH-based compare-and-swap
(including a competing delete between read and EXEC), blacklist TTLs and
translation of connection failures into ``TokenStoreError``.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from tokenauth.infra.redis.redis_token_store import MAX_REPLACE_ATTEMPTS, RedisTokenStore
from tokenauth.services._shared.errors import TokenStoreError
from tokenauth.services._shared.ports import RefreshTokenRecord, ReplaceResult


def _now() -> datetime:
    return datetime.now(UTC)


def _record(token: str, ttl: timedelta = timedelta(hours=1)) -> RefreshTokenRecord:
    return RefreshTokenRecord(token=token, user_id="7", fingerprint="fp-7", expires_at=_now() + ttl)


@pytest.fixture
def server():
    return fakeredis.FakeServer()


@pytest.fixture
def fake_redis(server):
    """Provide a fresh FakeRedis instance for each test."""
    return fakeredis.FakeRedis(server=server)


@pytest.fixture
def store(fake_redis):
    return RedisTokenStore(r=fake_redis)


def test_whitelist_roundtrip_sets_key_ttl(store, fake_redis):
    rec = _record("r1")
    store.whitelist_add(rec)

    got = store.whitelist_lookup("r1")
    assert got is not None
    assert got.user_id == "7"
    assert got.fingerprint == "fp-7"
    assert int(got.expires_at.timestamp()) == int(rec.expires_at.timestamp())
    assert 0 < fake_redis.ttl("rt:r1") <= 3600


def test_whitelist_add_skips_expired_record(store, fake_redis):
    store.whitelist_add(_record("r1", ttl=timedelta(seconds=-5)))
    assert fake_redis.exists("rt:r1") == 0


def test_whitelist_remove_is_idempotent(store):
    store.whitelist_add(_record("r1"))
    store.whitelist_remove("r1")
    store.whitelist_remove("r1")
    assert store.whitelist_lookup("r1") is None


def test_replace_ok_then_already_gone(store):
    store.whitelist_add(_record("old"))

    assert store.whitelist_replace("old", _record("new-a")) is ReplaceResult.OK
    assert store.whitelist_lookup("old") is None
    assert store.whitelist_lookup("new-a") is not None

    assert store.whitelist_replace("old", _record("new-b")) is ReplaceResult.ALREADY_GONE
    assert store.whitelist_lookup("new-b") is None


def test_replace_retries_after_competing_delete(store, server, monkeypatch):
    """A delete between WATCH and EXEC aborts the swap; the retry sees it gone."""
    store.whitelist_add(_record("old"))
    other = fakeredis.FakeRedis(server=server)
    original = RedisTokenStore._from_hash
    calls = {"n": 0}

    def racing_from_hash(self, token, h):
        calls["n"] += 1
        if calls["n"] == 1:
            other.delete("rt:old")
        return original(self, token, h)

    monkeypatch.setattr(RedisTokenStore, "_from_hash", racing_from_hash)

    assert store.whitelist_replace("old", _record("new")) is ReplaceResult.ALREADY_GONE
    assert store.whitelist_lookup("new") is None


def test_replace_gives_up_after_repeated_conflicts(store, server, monkeypatch):
    """A key rewritten on every attempt ends in TokenStoreError, not a spin."""
    store.whitelist_add(_record("old"))
    other = fakeredis.FakeRedis(server=server)
    original = RedisTokenStore._from_hash
    calls = {"n": 0}

    def contended_from_hash(self, token, h):
        calls["n"] += 1
        other.hset("rt:old", "touch", str(calls["n"]))
        return original(self, token, h)

    monkeypatch.setattr(RedisTokenStore, "_from_hash", contended_from_hash)

    with pytest.raises(TokenStoreError):
        store.whitelist_replace("old", _record("new"))

    assert calls["n"] == MAX_REPLACE_ATTEMPTS
    assert store.whitelist_lookup("new") is None
    assert other.exists("rt:old") == 1


def test_blacklist_uses_hashed_key_with_ttl(store, fake_redis):
    token = "header.payload.signature"
    store.blacklist_add(token, _now() + timedelta(minutes=15))

    assert store.blacklist_contains(token) is True
    assert store.blacklist_contains("other") is False
    keys = [k.decode() for k in fake_redis.keys("deny:at:*")]
    assert len(keys) == 1
    assert token not in keys[0]
    assert 0 < fake_redis.ttl(keys[0]) <= 900


def test_blacklist_skips_expired_tokens(store, fake_redis):
    store.blacklist_add("at", _now() - timedelta(seconds=1))
    assert store.blacklist_contains("at") is False
    assert fake_redis.keys("deny:at:*") == []


def test_prune_is_a_noop(store):
    assert store.prune() == 0


def test_connection_failures_become_token_store_errors(server, store):
    server.connected = False
    with pytest.raises(TokenStoreError):
        store.whitelist_lookup("r1")
    with pytest.raises(TokenStoreError):
        store.blacklist_contains("at")
    with pytest.raises(TokenStoreError):
        store.ping()


def test_ping(store):
    assert store.ping() is True
