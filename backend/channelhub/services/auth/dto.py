# channelhub/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from channelhub.services.accounts.dto import AccountOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login. Either identifier may be supplied.

    :param password: Raw password (to be verified).
    :type password: str
    :param username: Account username.
    :type username: str | None
    :param email: Account email.
    :type email: str | None
    """

    password: str
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    """
    Input DTO for a password change.

    :param old_password: Current password, verified before the change.
    :type old_password: str
    :param new_password: Replacement password.
    :type new_password: str
    """

    old_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for login: the account projection plus a fresh token pair.

    :param account: Public account projection.
    :type account: AccountOut
    :param tokens: Newly minted tokens.
    :type tokens: TokenPairOut
    """

    account: AccountOut
    tokens: TokenPairOut
