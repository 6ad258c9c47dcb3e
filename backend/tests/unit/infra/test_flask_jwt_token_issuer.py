# tests/unit/infra/test_flask_jwt_token_issuer.py
"""Unit tests for the Flask-JWT-Extended access-token issuer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from flask_jwt_extended import create_refresh_token
from freezegun import freeze_time

from tokenauth.infra.jwt.flask_jwt_token_issuer import FlaskJWTTokenIssuer
from tokenauth.services._shared.errors import TokenSigningError


@pytest.fixture()
def jwt_issuer(app) -> FlaskJWTTokenIssuer:
    return FlaskJWTTokenIssuer(access_ttl=timedelta(minutes=15), refresh_ttl=timedelta(days=7))


def test_issue_and_verify_carries_subject_and_fingerprint(jwt_issuer):
    token = jwt_issuer.issue_access_token(user_id="42", fingerprint="abc123")
    claims = jwt_issuer.verify_access_token(token)

    assert claims is not None
    assert claims.user_id == "42"
    assert claims.fingerprint == "abc123"
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)


def test_two_tokens_for_same_user_differ(jwt_issuer):
    a = jwt_issuer.issue_access_token(user_id="42", fingerprint="fp")
    b = jwt_issuer.issue_access_token(user_id="42", fingerprint="fp")
    assert a != b


def test_tampered_token_is_rejected(jwt_issuer):
    token = jwt_issuer.issue_access_token(user_id="42", fingerprint="fp")
    header, payload, signature = token.split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
    assert jwt_issuer.verify_access_token(f"{header}.{payload}.{flipped}") is None


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_garbage_is_rejected(jwt_issuer, garbage):
    assert jwt_issuer.verify_access_token(garbage) is None


def test_expired_token_is_rejected(jwt_issuer):
    with freeze_time("2026-03-01 10:00:00"):
        token = jwt_issuer.issue_access_token(user_id="42", fingerprint="fp")
    with freeze_time("2026-03-01 10:14:00"):
        assert jwt_issuer.verify_access_token(token) is not None
    with freeze_time("2026-03-01 10:16:00"):
        assert jwt_issuer.verify_access_token(token) is None


def test_token_signed_with_another_key_is_rejected(app, jwt_issuer, monkeypatch):
    monkeypatch.setitem(app.config, "JWT_SECRET_KEY", "some-other-secret-with-enough-entropy")
    foreign = jwt_issuer.issue_access_token(user_id="42", fingerprint="fp")
    monkeypatch.undo()
    assert jwt_issuer.verify_access_token(foreign) is None


def test_jwt_refresh_tokens_are_not_access_tokens(jwt_issuer):
    assert jwt_issuer.verify_access_token(create_refresh_token(identity="42")) is None


def test_missing_signing_key_raises_signing_error(app, jwt_issuer, monkeypatch):
    monkeypatch.setitem(app.config, "JWT_SECRET_KEY", None)
    monkeypatch.setitem(app.config, "SECRET_KEY", None)
    with pytest.raises(TokenSigningError):
        jwt_issuer.issue_access_token(user_id="42", fingerprint="fp")


def test_refresh_token_is_opaque_and_bound_to_user(jwt_issuer):
    rec = jwt_issuer.issue_refresh_token(user_id="42", fingerprint="fp")
    assert rec.user_id == "42"
    assert rec.fingerprint == "fp"
    assert rec.token.count(".") == 0
    assert len(rec.token) >= 64
    remaining = rec.expires_at - datetime.now(UTC)
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)
