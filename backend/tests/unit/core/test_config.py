"""Unit tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from tokenauth import create_app
from tokenauth.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    ensure_signing_secret,
    env_bool,
    env_int,
    get_config,
)


@pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
def test_env_bool_truthy(monkeypatch, raw):
    monkeypatch.setenv("FLAG", raw)
    assert env_bool("FLAG") is True


def test_env_bool_default_and_falsy(monkeypatch):
    monkeypatch.delenv("FLAG", raising=False)
    assert env_bool("FLAG", True) is True
    monkeypatch.setenv("FLAG", "off")
    assert env_bool("FLAG", True) is False


def test_env_int(monkeypatch):
    monkeypatch.setenv("TTL", " 60 ")
    assert env_int("TTL", 5) == 60
    monkeypatch.setenv("TTL", "")
    assert env_int("TTL", 5) == 5


def test_env_int_rejects_garbage(monkeypatch):
    monkeypatch.setenv("TTL", "soon")
    with pytest.raises(ValueError):
        env_int("TTL", 5)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_selects_by_app_env(monkeypatch, name, expected):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is expected


def test_token_and_cookie_defaults():
    assert TestingConfig.ACCESS_TOKEN_TTL_SECONDS == 15 * 60
    assert TestingConfig.REFRESH_TOKEN_TTL_SECONDS == 7 * 24 * 60 * 60
    assert TestingConfig.REFRESH_COOKIE_NAME == "refreshToken"
    assert TestingConfig.REFRESH_COOKIE_SAMESITE == "None"
    assert TestingConfig.REDIS_URL is None


@pytest.mark.parametrize(
    "settings",
    [
        {"JWT_SECRET_KEY": "CHANGE_ME_JWT", "SECRET_KEY": "CHANGE_ME"},
        {"JWT_SECRET_KEY": None, "SECRET_KEY": "CHANGE_ME"},
        {"JWT_SECRET_KEY": "", "SECRET_KEY": ""},
        {},
    ],
)
def test_ensure_signing_secret_rejects_placeholder_keys(settings):
    with pytest.raises(RuntimeError):
        ensure_signing_secret(settings)


@pytest.mark.parametrize(
    "settings",
    [
        {"JWT_SECRET_KEY": "a-real-private-key", "SECRET_KEY": "CHANGE_ME"},
        {"JWT_SECRET_KEY": None, "SECRET_KEY": "a-real-private-key"},
    ],
)
def test_ensure_signing_secret_accepts_real_keys(settings):
    ensure_signing_secret(settings)


def test_production_app_refuses_placeholder_signing_key(monkeypatch):
    monkeypatch.setattr(ProductionConfig, "JWT_SECRET_KEY", "CHANGE_ME_JWT")
    monkeypatch.setattr(ProductionConfig, "SECRET_KEY", "CHANGE_ME")

    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        create_app(ProductionConfig, instance_relative_config=False)


def test_testing_config_does_not_require_signing_secret():
    assert TestingConfig.REQUIRE_SIGNING_SECRET is False
    assert ProductionConfig.REQUIRE_SIGNING_SECRET is True
