"""User-facing Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserSchema(Schema):
    """Public representation of a user."""

    id = fields.String(required=True)
    username = fields.String(required=True)


class PasswordChangeSchema(Schema):
    """Input payload for replacing the caller's password."""

    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
