"""Marshmallow schemas for request validation and response shaping."""

from __future__ import annotations

from .auth import LoginSchema, TokenResponseSchema
from .user import PasswordChangeSchema, UserSchema

__all__ = ["LoginSchema", "PasswordChangeSchema", "TokenResponseSchema", "UserSchema"]
