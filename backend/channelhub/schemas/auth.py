"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .account import AccountSchema
from .common import InputSchema, blank_or_email, text_field


class LoginSchema(InputSchema):
    """Input payload for authenticating. Either ``username`` or ``email``."""

    username = fields.String(load_default=None, allow_none=True)
    email = fields.String(load_default=None, allow_none=True, validate=blank_or_email)
    password = text_field()


class RefreshSchema(InputSchema):
    """Refresh token supplied in the body when no cookie is present."""

    refresh_token = fields.String(load_default=None, allow_none=True, data_key="refreshToken")


class ChangePasswordSchema(InputSchema):
    """Input payload for changing the password."""

    old_password = text_field("oldPassword")
    new_password = text_field("newPassword")


class TokenPairSchema(Schema):
    """Response payload with both tokens."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class LoginResponseSchema(Schema):
    """Response payload of a successful login."""

    user = fields.Nested(AccountSchema, required=True)
    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
