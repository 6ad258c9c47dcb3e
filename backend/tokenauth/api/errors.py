"""Render service envelopes as HTTP responses (RFC 7807 for failures)."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from flask import Response

from tokenauth.core.errors import as_problem, problem_response
from tokenauth.services._shared.dto import Envelope, ErrorDetail

from .deps import json_response


def failure_response(status_code: int, errors: list[ErrorDetail]) -> Response:
    """Build a Problem Details response from envelope errors.

    :param status_code: Status chosen by the service layer.
    :type status_code: int
    :param errors: Non-empty list of errors; the first one names the problem.
    :type errors: list[ErrorDetail]
    :returns: ``application/problem+json`` response.
    :rtype: flask.Response
    """
    first = errors[0]
    problem = as_problem(status=status_code, code=first.code.value, message=first.message)
    problem["errors"] = [e.to_dict() for e in errors]
    return problem_response(problem)


def envelope_response(
    envelope: Envelope, *, dump: Callable[[Any], Any] | None = None
) -> Response:
    """Translate an :class:`Envelope` into a Flask response.

    :param envelope: Result returned by the gate.
    :param dump: Optional serializer applied to ``envelope.data`` on success.
    :returns: ``{"data": ...}`` on success, a problem response otherwise.
    """
    if envelope.errors:
        return failure_response(envelope.status_code, envelope.errors)
    data = dump(envelope.data) if dump is not None else envelope.data
    return json_response({"data": data}, status=envelope.status_code)
