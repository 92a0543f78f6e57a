"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load


def blank_or_email(value: str | None) -> None:
    """Accept blanks (reported later as missing) or something email-shaped."""
    stripped = (value or "").strip()
    if stripped and ("@" not in stripped or stripped.startswith("@") or stripped.endswith("@")):
        raise ValidationError("Not a valid email address.")


class InputSchema(Schema):
    """
    Base for request payloads.

    Unknown keys are dropped. Text fields default to ``""`` so that missing
    and blank values reach the service, which reports both as a 400.
    Passwords are kept verbatim; every other string is stripped.
    """

    verbatim: frozenset[str] = frozenset({"password", "old_password", "new_password"})

    class Meta:
        unknown = EXCLUDE

    @post_load
    def strip_strings(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        return {
            k: v.strip() if isinstance(v, str) and k not in self.verbatim else v
            for k, v in data.items()
        }


def text_field(data_key: str | None = None, **kwargs: Any) -> fields.String:
    """Optional string input defaulting to ``""``."""
    return fields.String(load_default="", data_key=data_key, **kwargs)


def envelope(data: Any, message: str) -> dict[str, Any]:
    """Wrap a payload into the response envelope."""
    return {"data": data, "message": message}
