# channelhub/services/auth/service.py
from __future__ import annotations

import logging
from typing import Any

from channelhub.models.account import Account
from channelhub.repositories.account import AccountRepository
from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import (
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from channelhub.services._shared.ports import PasswordHasher, TokenIssuer, TokenKind
from channelhub.services.accounts.dto import AccountOut
from channelhub.services.auth.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    TokenPairOut,
)

log = logging.getLogger(__name__)


class SessionManager(BaseService):
    """
    Session lifecycle service (login / refresh / logout / password change).

    Each account holds at most one refresh token. Login overwrites it,
    refresh swaps it atomically for a new one, logout clears it. A refresh
    token that is no longer the stored value is rejected, so every issued
    refresh token can be exchanged at most once.
    """

    def __init__(self, *, tokens: TokenIssuer, hasher: PasswordHasher) -> None:
        """
        Initialize the service with its dependencies.

        :param tokens: Adapter minting and verifying JWTs.
        :param hasher: Password hasher.
        """
        super().__init__()
        self.tokens = tokens
        self.hasher = hasher

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and start a session.

        :param dto: Login input.
        :returns: Account projection and token pair.
        :raises ValidationError: Neither username nor email supplied.
        :raises InvalidCredentialsError: Unknown identifier or wrong password.
        """
        if not (dto.username or dto.email) or not dto.password:
            raise ValidationError("Username or email is required")

        with self.rw_uow() as uow:
            repo: AccountRepository = uow.accounts
            account = repo.find_by_username_or_email(username=dto.username, email=dto.email)
            if account is None:
                raise InvalidCredentialsError(reason="unknown_identifier")
            if not self.hasher.verify(dto.password, account.password_hash):
                raise InvalidCredentialsError(reason="bad_password")

            pair = self._mint_pair(account)
            if not repo.set_refresh_token(account.id, pair.refresh_token):
                raise NotFoundError("Account", account.id)
            out = AccountOut.from_model(account)

        log.info("Session opened", extra={"account_id": out.id, "event": "login"})
        return LoginOut(account=out, tokens=pair)

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, incoming: str | None) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair.

        Security
        --------
        - Expired and tampered tokens fail the same way.
        - The stored token is replaced by a single conditional update keyed on
          the presented value: a token already rotated out (or raced by a
          concurrent call) matches no row and is rejected.

        :param incoming: Encoded refresh token.
        :raises UnauthorizedError: On any verification or rotation failure.
        """
        if not incoming:
            raise UnauthorizedError(reason="missing_refresh_token")

        result = self.tokens.verify(incoming, TokenKind.REFRESH)
        if not result.ok:
            raise UnauthorizedError(
                "Invalid refresh token", reason=f"refresh_{result.status.value}"
            )

        account_id = result.claims.get("id")
        with self.rw_uow() as uow:
            repo: AccountRepository = uow.accounts
            account = repo.get(account_id) if isinstance(account_id, str) else None
            if account is None:
                raise UnauthorizedError("Invalid refresh token", reason="unknown_account")

            pair = self._mint_pair(account)
            if not repo.swap_refresh_token(
                account.id, expected=incoming, new=pair.refresh_token
            ):
                raise UnauthorizedError(
                    "Refresh token is expired or used", reason="refresh_reused"
                )

        log.info("Session refreshed", extra={"account_id": account_id, "event": "refresh"})
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, account_id: str) -> None:
        """
        End the session by clearing the stored refresh token. Idempotent.

        :raises NotFoundError: Unknown account.
        """
        with self.rw_uow() as uow:
            if not uow.accounts.clear_refresh_token(account_id):
                raise NotFoundError("Account", account_id)
        log.info("Session closed", extra={"account_id": account_id, "event": "logout"})

    # ------------------------------------------------------------------ #
    # Password
    # ------------------------------------------------------------------ #

    def change_password(self, account_id: str, dto: ChangePasswordIn) -> None:
        """
        Replace the password after verifying the current one.

        The stored refresh token is left untouched.

        :raises ValidationError: New password is blank.
        :raises UnauthorizedError: ``old_password`` does not match.
        :raises NotFoundError: Unknown account.
        """
        self.require_text(dto.new_password)
        with self.rw_uow() as uow:
            repo: AccountRepository = uow.accounts
            account = repo.get(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            if not self.hasher.verify(dto.old_password or "", account.password_hash):
                raise UnauthorizedError("Invalid old password", reason="bad_old_password")
            repo.set_password_hash(account.id, self.hasher.hash(dto.new_password))
        log.info("Password changed", extra={"account_id": account_id, "event": "change_password"})

    # ------------------------------------------------------------------ #
    # Guard support
    # ------------------------------------------------------------------ #

    def authenticate(self, access_token: str | None) -> AccountOut:
        """
        Resolve the account behind an access token.

        :raises UnauthorizedError: Missing, invalid or expired token, or the
            account no longer exists.
        """
        if not access_token:
            raise UnauthorizedError(reason="missing_access_token")
        result = self.tokens.verify(access_token, TokenKind.ACCESS)
        if not result.ok:
            raise UnauthorizedError(
                "Invalid access token", reason=f"access_{result.status.value}"
            )
        account_id = result.claims.get("id")
        with self.ro_uow() as uow:
            account = uow.accounts.get(account_id) if isinstance(account_id, str) else None
            if account is None:
                raise UnauthorizedError("Invalid access token", reason="unknown_account")
            return AccountOut.from_model(account)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _mint_pair(self, account: Account) -> TokenPairOut:
        access_claims: dict[str, Any] = {
            "id": account.id,
            "email": account.email,
            "username": account.username,
            "fullName": account.full_name,
        }
        return TokenPairOut(
            access_token=self.tokens.issue_access(access_claims),
            refresh_token=self.tokens.issue_refresh({"id": account.id}),
        )
