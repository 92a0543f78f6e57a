from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Protocol


class TokenKind(str, Enum):
    """Which secret and lifetime a token is bound to."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenStatus(Enum):
    """Outcome of a token verification."""

    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Signing configuration for both token kinds.

    :param access_secret: HMAC key for access tokens.
    :param access_ttl: Access token lifetime.
    :param refresh_secret: HMAC key for refresh tokens.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: JWS algorithm shared by both kinds.
    """

    access_secret: str
    access_ttl: timedelta
    refresh_secret: str
    refresh_ttl: timedelta
    algorithm: str = "HS256"

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenSettings:
        """Build settings from a Flask-style config mapping (TTLs in seconds)."""
        return cls(
            access_secret=config["ACCESS_TOKEN_SECRET"],
            access_ttl=timedelta(seconds=int(config["ACCESS_TOKEN_EXPIRY"])),
            refresh_secret=config["REFRESH_TOKEN_SECRET"],
            refresh_ttl=timedelta(seconds=int(config["REFRESH_TOKEN_EXPIRY"])),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )


@dataclass(frozen=True, slots=True)
class TokenVerification:
    """
    Result of :meth:`TokenIssuer.verify`.

    :ivar status: Verification outcome.
    :ivar claims: Decoded claims; empty unless ``status`` is ``VALID``.
    """

    status: TokenStatus
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.VALID


class TokenIssuer(Protocol):
    """Port for minting and verifying signed, expiring tokens."""

    def issue_access(self, claims: Mapping[str, Any]) -> str: ...

    def issue_refresh(self, claims: Mapping[str, Any]) -> str: ...

    def verify(self, token: str, kind: TokenKind) -> TokenVerification: ...
