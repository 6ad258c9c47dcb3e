from .dto import AuthTokenConfig, LoginIn, LoginOut, LogoutIn, LogoutOut, RefreshIn, RefreshOut
from .refresh import RefreshFlow
from .revocation import RevocationFlow
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthTokenConfig",
    "LoginIn",
    "LoginOut",
    "LogoutIn",
    "LogoutOut",
    "RefreshFlow",
    "RefreshIn",
    "RefreshOut",
    "RevocationFlow",
]
