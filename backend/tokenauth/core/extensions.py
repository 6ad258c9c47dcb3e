"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import logging
from typing import cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

from tokenauth.infra.redis.redis_token_store import RedisTokenStore
from tokenauth.services._shared.ports import InMemoryTokenStore, TokenStore

log = logging.getLogger(__name__)

convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
jwt = JWTManager()

TOKEN_STORE_KEY = "token_store"


def _build_token_store(app: Flask) -> TokenStore:
    """Pick the token store backend from ``REDIS_URL``.

    The in-memory store only works for a single process; multi-worker
    deployments must set ``REDIS_URL`` so every worker sees the same
    whitelist and blacklist.
    """
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        log.info("token_store.backend=memory")
        return InMemoryTokenStore()

    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = client
    log.info("token_store.backend=redis")
    return RedisTokenStore(r=client)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, JWT signing and the token store.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`tokenauth.models` package so the ``users`` table is registered
        on the metadata.
    """
    db.init_app(app)

    from tokenauth import models as _models  # noqa: F401

    jwt.init_app(app)
    app.extensions[TOKEN_STORE_KEY] = _build_token_store(app)


def get_token_store() -> TokenStore:
    """Return the token store bound to the current application."""
    store = current_app.extensions.get(TOKEN_STORE_KEY)
    if store is None:
        raise RuntimeError("Token store is not initialized. Call init_app() first.")
    return cast(TokenStore, store)
