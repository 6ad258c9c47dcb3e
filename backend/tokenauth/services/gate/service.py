"""Authentication/ownership gate for business operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from tokenauth.services._shared.dto import AuthStatus, Envelope, ErrorCode
from tokenauth.services._shared.policies.common import is_owner

logger = logging.getLogger(__name__)

Operation = Callable[[], Any]

UNAUTHENTICATED_MESSAGE = "You must be logged in to perform this operation."
UNAUTHORIZED_MESSAGE = "You are not allowed to perform this operation."
INTERNAL_MESSAGE = "The operation failed unexpectedly."


def _unauthenticated() -> Envelope:
    return Envelope.failure(ErrorCode.UNAUTHENTICATED, UNAUTHENTICATED_MESSAGE, 401)


def _run(operation: Operation) -> Envelope:
    try:
        result = operation()
    except Exception:
        # The gate never raises; the edge decides how a 500 is shown.
        logger.exception("gate.operation_failed")
        return Envelope.failure(ErrorCode.INTERNAL_ERROR, INTERNAL_MESSAGE, 500)
    if isinstance(result, Envelope):
        return result
    return Envelope.success(result)


def run_if_authenticated(*, auth_status: AuthStatus, operation: Operation) -> Envelope:
    """
    Run ``operation`` only for an authenticated caller.

    :param auth_status: Status derived from the request's access token.
    :param operation: Zero-argument callable. An :class:`Envelope` result is
        forwarded as is; any other value becomes the ``data`` of a 200.
    :returns: Envelope; 401 ``Unauthenticated`` without running the
        operation, 500 ``InternalError`` if it raised.
    """
    if not auth_status.is_authenticated:
        return _unauthenticated()
    return _run(operation)


def run_if_authorized(
    *, auth_status: AuthStatus, target_user_id: str | int, operation: Operation
) -> Envelope:
    """
    Run ``operation`` only when the caller is the owner of ``target_user_id``.

    A caller whose user id differs from the target is denied with 401
    ``Unauthorized`` even when authenticated.
    """
    if not auth_status.is_authenticated:
        return _unauthenticated()
    if not is_owner(actor_id=auth_status.user_id, owner_id=target_user_id):
        logger.warning(
            "gate.unauthorized",
            extra={"user_id": auth_status.user_id, "reason": "owner_mismatch"},
        )
        return Envelope.failure(ErrorCode.UNAUTHORIZED, UNAUTHORIZED_MESSAGE, 401)
    return _run(operation)
