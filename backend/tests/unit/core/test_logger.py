"""Unit tests for structured logging and request correlation."""

from __future__ import annotations

import json
import logging

from tokenauth.core.logger import JSONFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("tokenauth.test", logging.INFO, __file__, 1, "auth.login", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_configure_logging_sets_level() -> None:
    try:
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
    finally:
        configure_logging("INFO")


def test_json_formatter_copies_known_extras_only() -> None:
    line = JSONFormatter().format(_record(user_id="7", reason="revoked", password="hunter2"))
    payload = json.loads(line)

    assert payload["message"] == "auth.login"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == "7"
    assert payload["reason"] == "revoked"
    assert "password" not in payload


def test_request_id_header_is_echoed(client) -> None:
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated_per_request(client) -> None:
    first = client.get("/api/v1/health").headers["X-Request-ID"]
    second = client.get("/api/v1/health").headers["X-Request-ID"]
    assert first and second
    assert first != second
