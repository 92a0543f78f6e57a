"""
channelhub.services._shared.ports
=================================

Collection of *ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`password_hasher`:
    :class:`~.PasswordHasher` and its :class:`~.PasswordHasherSettings`.

- :mod:`token_issuer`:
    :class:`~.TokenIssuer` for signed access and refresh tokens, with
    :class:`~.TokenSettings`, :class:`~.TokenKind` and the
    :class:`~.TokenVerification` outcome.

- :mod:`media_store`:
    :class:`~.MediaStore` for avatar and cover uploads, plus the
    :class:`~.InMemoryMediaStore` test double.

Concrete adapters live under ``channelhub.infra``.
"""

from __future__ import annotations

from .media_store import InMemoryMediaStore, MediaStore, StoredMedia
from .password_hasher import PasswordHasher, PasswordHasherSettings
from .token_issuer import (
    TokenIssuer,
    TokenKind,
    TokenSettings,
    TokenStatus,
    TokenVerification,
)

__all__ = [
    "InMemoryMediaStore",
    "MediaStore",
    "PasswordHasher",
    "PasswordHasherSettings",
    "StoredMedia",
    "TokenIssuer",
    "TokenKind",
    "TokenSettings",
    "TokenStatus",
    "TokenVerification",
]
