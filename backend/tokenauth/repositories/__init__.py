"""Repository layer exposing persistence helpers."""

from __future__ import annotations

from .user import UserRepository, to_record

__all__ = ["UserRepository", "to_record"]
