"""
DTOs for AccountService.

Data Transfer Objects isolate the service layer from ORM models: no
``Account`` instance ever leaves a service, so the password digest and the
refresh token cannot leak into a response.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """
    A file received by the delivery layer and staged on local disk.

    :param path: Local path of the staged file.
    :type path: str
    :param filename: Client-supplied file name (sanitized).
    :type filename: str
    :param content_type: Declared MIME type.
    :type content_type: str | None
    """

    path: str
    filename: str
    content_type: str | None = None


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param full_name: Display name.
    :param email: Login email.
    :param username: Public handle; stored lowercase.
    :param password: Raw password; hashed before storage.
    :param avatar: Staged avatar upload. Required.
    :param cover: Staged cover upload. Optional.
    """

    full_name: str
    email: str
    username: str
    password: str
    avatar: UploadedFile | None = None
    cover: UploadedFile | None = None


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Input DTO for profile updates. Both fields are required.

    :param full_name: New display name.
    :type full_name: str
    :param email: New email.
    :type email: str
    """

    full_name: str
    email: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AccountOut:
    """
    Public projection of an account.

    :ivar id: Opaque identifier.
    :ivar username: Lowercase handle.
    :ivar email: Lowercase email.
    :ivar full_name: Display name.
    :ivar avatar: Avatar URL.
    :ivar cover_image: Cover URL, empty when none.
    """

    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, account) -> AccountOut:
        """
        Map an ORM ``Account``.

        :param account: ORM account instance.
        :type account: :class:`channelhub.models.account.Account`
        """
        return cls(
            id=account.id,
            username=account.username,
            email=account.email,
            full_name=account.full_name,
            avatar=account.avatar,
            cover_image=account.cover_image or "",
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
