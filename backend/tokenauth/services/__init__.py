"""Service layer public API.

This package exposes the framework-agnostic building blocks so that callers
can import from :mod:`tokenauth.services` without knowing internal structure.

Re-exports
----------
- Shared DTOs (from ``tokenauth.services._shared.dto``)
    * :class:`AuthStatus`
    * :class:`Envelope`
    * :class:`ErrorCode`
    * :class:`ErrorDetail`
    * :class:`CookieDirective`

The auth service lives in :mod:`tokenauth.services.auth` and the gate in
:mod:`tokenauth.services.gate`; both are imported explicitly by callers to
keep this module free of import cycles with the ports.
"""

from __future__ import annotations

from ._shared.dto import AuthStatus, CookieDirective, Envelope, ErrorCode, ErrorDetail

__all__ = ["AuthStatus", "CookieDirective", "Envelope", "ErrorCode", "ErrorDetail"]
