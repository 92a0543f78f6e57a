from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class PasswordHasherSettings:
    """
    Hashing parameters fixed at construction.

    :param method: ``werkzeug.security`` method string, e.g.
        ``"pbkdf2:sha256:600000"`` or ``"scrypt:32768:8:1"``.
    :type method: str
    :param salt_length: Length of the random salt added to every digest.
    :type salt_length: int
    """

    method: str = "pbkdf2:sha256:600000"
    salt_length: int = 16


class PasswordHasher(Protocol):
    """Port for one-way password hashing."""

    def hash(self, plaintext: str) -> str:
        """Return a salted digest. Raises on failure; never returns plaintext."""
        ...

    def verify(self, plaintext: str, digest: str) -> bool:
        """Compare in constant time. Malformed digests yield ``False``."""
        ...
