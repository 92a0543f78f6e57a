"""PyJWT adapter for :class:`~channelhub.services._shared.ports.TokenIssuer`."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from channelhub.services._shared.ports import (
    TokenIssuer,
    TokenKind,
    TokenSettings,
    TokenStatus,
    TokenVerification,
)

log = logging.getLogger(__name__)

# Registered claims the issuer owns; callers cannot override them
_RESERVED = frozenset({"exp", "iat", "jti", "type"})


class PyJWTTokenIssuer(TokenIssuer):
    """
    Mint and verify HMAC-signed JWTs.

    Access and refresh tokens use separate secrets, so a refresh token never
    verifies as an access token and vice versa. Each token carries a random
    ``jti``: two tokens minted for the same claims in the same second differ.
    """

    def __init__(self, settings: TokenSettings) -> None:
        self.settings = settings

    def _secret(self, kind: TokenKind) -> str:
        if kind is TokenKind.ACCESS:
            return self.settings.access_secret
        return self.settings.refresh_secret

    def _ttl(self, kind: TokenKind) -> timedelta:
        if kind is TokenKind.ACCESS:
            return self.settings.access_ttl
        return self.settings.refresh_ttl

    def _issue(self, claims: Mapping[str, Any], kind: TokenKind) -> str:
        now = datetime.now(UTC)
        payload = {k: v for k, v in claims.items() if k not in _RESERVED}
        payload.update(
            {
                "type": kind.value,
                "jti": uuid4().hex,
                "iat": now,
                "exp": now + self._ttl(kind),
            }
        )
        return jwt.encode(payload, self._secret(kind), algorithm=self.settings.algorithm)

    def issue_access(self, claims: Mapping[str, Any]) -> str:
        return self._issue(claims, TokenKind.ACCESS)

    def issue_refresh(self, claims: Mapping[str, Any]) -> str:
        return self._issue(claims, TokenKind.REFRESH)

    def verify(self, token: str, kind: TokenKind) -> TokenVerification:
        """
        Check signature, expiry and token kind.

        :param token: Encoded JWT.
        :param kind: Expected kind; selects the secret.
        :returns: ``VALID`` with claims, ``EXPIRED`` for a well-signed token
            past its ``exp``, ``INVALID`` for anything else.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret(kind),
                algorithms=[self.settings.algorithm],
                options={"require": ["exp", "iat", "type"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenVerification(status=TokenStatus.EXPIRED)
        except jwt.InvalidTokenError as exc:
            log.debug("Token rejected: %s", exc)
            return TokenVerification(status=TokenStatus.INVALID)

        if claims.get("type") != kind.value:
            return TokenVerification(status=TokenStatus.INVALID)
        return TokenVerification(status=TokenStatus.VALID, claims=claims)
