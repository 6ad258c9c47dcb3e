"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask, HTTP
or Redis. Auth flows catch them and turn them into envelopes; anything escaping a
flow reaches the generic 500 handler in ``tokenauth/core/errors.py``.
"""

from __future__ import annotations


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from adapters or domain logic.
    """


class TokenSigningError(ServiceError):
    """
    Raised when an access token cannot be signed.

    This is a configuration problem (missing or unusable key), not a
    request-level failure: no retry of the same request can succeed.
    """


class TokenStoreError(ServiceError):
    """Raised when the whitelist/blacklist backend cannot be reached."""


class UserDirectoryError(ServiceError):
    """Raised when the user directory backend fails (not for unknown users)."""
