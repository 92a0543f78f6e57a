"""``werkzeug.security`` adapter for the password hasher port."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from channelhub.services._shared.ports import PasswordHasher, PasswordHasherSettings


class WerkzeugPasswordHasher(PasswordHasher):
    """
    Salted PBKDF2/scrypt hashing through werkzeug.

    The digest embeds method, cost factor and salt, so changing the settings
    only affects new hashes; existing ones keep verifying.
    """

    def __init__(self, settings: PasswordHasherSettings | None = None) -> None:
        self.settings = settings or PasswordHasherSettings()

    def hash(self, plaintext: str) -> str:
        if not isinstance(plaintext, str) or not plaintext:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(
            plaintext,
            method=self.settings.method,
            salt_length=self.settings.salt_length,
        )

    def verify(self, plaintext: str, digest: str) -> bool:
        if not plaintext or not digest:
            return False
        try:
            # ``check_password_hash`` compares with ``hmac.compare_digest``
            return bool(check_password_hash(digest, plaintext))
        except (ValueError, TypeError):
            # Unknown method or truncated digest
            return False
