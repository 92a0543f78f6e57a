"""Account resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import InputSchema, blank_or_email, text_field


class RegisterSchema(InputSchema):
    """Multipart form fields for registration; files travel separately."""

    full_name = text_field("fullName")
    email = text_field(validate=blank_or_email)
    username = text_field()
    password = text_field()


class AccountUpdateSchema(InputSchema):
    """Input payload for profile updates."""

    full_name = text_field("fullName")
    email = text_field(validate=blank_or_email)


class AccountSchema(Schema):
    """Public representation of an account. No password or refresh token."""

    id = fields.String(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    full_name = fields.String(required=True, data_key="fullName")
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
