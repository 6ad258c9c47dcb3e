"""Pytest fixtures: Flask app, transactional database session, HTTP client.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from tokenauth.core.config import TestingConfig
from tokenauth.core.extensions import db as _db
from tokenauth.factory import create_app
from tokenauth.services._shared.ports import (
    InMemoryTokenStore,
    InMemoryUserDirectory,
    StubTokenIssuer,
)


@pytest.fixture(scope="session")
def app():
    """Create the Flask application with :class:`TestingConfig`.

    Returns
    -------
    flask.Flask
        Application with the in-memory token store and SQLite database.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    Begins a top-level transaction, starts a SAVEPOINT per test, and
    reinstalls the SAVEPOINT whenever SQLAlchemy ends one, so application
    code may ``commit()`` freely.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # Application code reaches the session through ``db.session``.
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


@pytest.fixture()
def client(app):
    """Flask test client without a cookie jar.

    Refresh cookies are sent explicitly through the ``Cookie`` header so each
    test controls exactly which token is presented.
    """
    return app.test_client(use_cookies=False)


@pytest.fixture()
def token_store(app):
    """The application's (in-memory) token store."""
    return app.extensions["token_store"]


# -- Service-level doubles --------------------------------------------------


@pytest.fixture()
def issuer():
    return StubTokenIssuer()


@pytest.fixture()
def memory_store():
    return InMemoryTokenStore()


@pytest.fixture()
def directory():
    return InMemoryUserDirectory()
