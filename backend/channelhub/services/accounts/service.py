"""
AccountService
==============

Registration and self-service profile operations.

Media handling follows one rule: nothing is persisted until the required
upload succeeded, and media superseded by a successful write is deleted
afterwards on a best-effort basis.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from channelhub.repositories.account import AccountRepository
from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    UpstreamFailureError,
    ValidationError,
    violates,
)
from channelhub.services._shared.ports import MediaStore, PasswordHasher, StoredMedia
from channelhub.services.accounts.dto import (
    AccountOut,
    ProfileUpdateIn,
    RegisterIn,
    UploadedFile,
)

log = logging.getLogger(__name__)


class AccountService(BaseService):
    """
    Orchestrates account creation and profile mutations.

    :param hasher: Password hasher used at registration.
    :param media: Media store for avatar and cover images.
    """

    def __init__(self, *, hasher: PasswordHasher, media: MediaStore) -> None:
        super().__init__()
        self.hasher = hasher
        self.media = media

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AccountOut:
        """
        Create an account.

        :param dto: Registration input.
        :returns: The created account.
        :raises ValidationError: Blank field, or no avatar supplied.
        :raises ConflictError: Username or email already taken.
        :raises UpstreamFailureError: The avatar upload failed.
        """
        self.require_text(dto.full_name, dto.email, dto.username, dto.password)
        username = dto.username.strip().lower()
        email = dto.email.strip().lower()

        with self.ro_uow() as uow:
            repo: AccountRepository = uow.accounts
            if repo.find_by_username_or_email(username=username, email=email) is not None:
                raise ConflictError("Account", "User with email or username already exists")

        if dto.avatar is None:
            raise ValidationError("Avatar file is required")

        avatar = self.media.upload(dto.avatar.path)
        if avatar is None:
            raise UpstreamFailureError("Avatar upload failed")
        cover = self.media.upload(dto.cover.path) if dto.cover is not None else None
        if dto.cover is not None and cover is None:
            log.warning("Cover upload failed; registering without cover")

        try:
            with self.rw_uow() as uow:
                repo_rw: AccountRepository = uow.accounts
                account = repo_rw.model(
                    full_name=dto.full_name,
                    email=email,
                    username=username,
                    password_hash=self.hasher.hash(dto.password),
                    avatar=avatar.url,
                    avatar_public_id=avatar.public_id,
                    cover_image=cover.url if cover else "",
                    cover_public_id=cover.public_id if cover else None,
                )
                repo_rw.add(account)
                out = AccountOut.from_model(account)
        except Exception as exc:
            self._discard(avatar, cover)
            if isinstance(exc, IntegrityError) and (
                violates(exc, "username") or violates(exc, "email")
            ):
                raise ConflictError(
                    "Account", "User with email or username already exists"
                ) from exc
            raise

        log.info("Account registered", extra={"account_id": out.id, "event": "register"})
        return out

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def current_account(self, account_id: str) -> AccountOut:
        """
        Return the public projection of ``account_id``.

        :raises NotFoundError: Unknown account.
        """
        with self.ro_uow() as uow:
            account = uow.accounts.get(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            return AccountOut.from_model(account)

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def update_profile(self, account_id: str, dto: ProfileUpdateIn) -> AccountOut:
        """
        Replace display name and email.

        :raises ValidationError: A field is blank.
        :raises ConflictError: The email belongs to another account.
        :raises NotFoundError: Unknown account.
        """
        self.require_text(dto.full_name, dto.email)
        with self.rw_uow() as uow:
            repo: AccountRepository = uow.accounts
            account = repo.get(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            if repo.exists_by_email(dto.email, exclude_id=account_id):
                raise ConflictError("Account", "Email already in use")
            repo.update(account, full_name=dto.full_name, email=dto.email)
            return AccountOut.from_model(account)

    def update_avatar(self, account_id: str, file: UploadedFile | None) -> AccountOut:
        """
        Replace the avatar image.

        :raises ValidationError: No file supplied.
        :raises UpstreamFailureError: The upload failed.
        """
        return self._replace_media(account_id, file, field="avatar", label="Avatar")

    def update_cover(self, account_id: str, file: UploadedFile | None) -> AccountOut:
        """
        Replace the cover image.

        :raises ValidationError: No file supplied.
        :raises UpstreamFailureError: The upload failed.
        """
        return self._replace_media(account_id, file, field="cover", label="Cover image")

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _replace_media(
        self, account_id: str, file: UploadedFile | None, *, field: str, label: str
    ) -> AccountOut:
        if file is None:
            raise ValidationError(f"{label} file is missing")

        with self.ro_uow() as uow:
            if uow.accounts.get(account_id) is None:
                raise NotFoundError("Account", account_id)

        stored = self.media.upload(file.path)
        if stored is None:
            raise UpstreamFailureError(f"Error while uploading {label.lower()}")

        url_attr = "avatar" if field == "avatar" else "cover_image"
        id_attr = f"{field}_public_id"
        try:
            with self.rw_uow() as uow:
                repo: AccountRepository = uow.accounts
                account = repo.get(account_id)
                if account is None:
                    raise NotFoundError("Account", account_id)
                previous = getattr(account, id_attr)
                repo.update(account, **{url_attr: stored.url, id_attr: stored.public_id})
                out = AccountOut.from_model(account)
        except Exception:
            self._discard(stored)
            raise

        if previous:
            self._delete_quietly(previous)
        return out

    def _discard(self, *items: StoredMedia | None) -> None:
        for item in items:
            if item is not None:
                self._delete_quietly(item.public_id)

    def _delete_quietly(self, public_id: str) -> None:
        if not self.media.delete(public_id):
            log.warning("Media delete did not succeed", extra={"event": "media_delete"})
