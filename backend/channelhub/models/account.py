"""Account model: identity, credentials and channel media."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from channelhub.core.extensions import db

from .base import IdMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .watch_history import WatchHistoryEntry


class Account(IdMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Registered account. Every account is also a channel others subscribe to.

    Fields
    ------
    username : str
        Public handle. Stored lowercase and trimmed; unique.
    email : str
        Login email. Stored lowercase and trimmed; unique.
    full_name : str
        Display name.
    password_hash : str
        Hasher digest. Never serialized.
    refresh_token : str | None
        The single refresh token currently valid for this account.
    avatar, cover_image : str
        Public URLs of the channel media. ``cover_image`` may be empty.
    avatar_public_id, cover_public_id : str | None
        Media store handles used to delete replaced media.
    """

    __tablename__ = "accounts"

    username: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    avatar: Mapped[str] = mapped_column(String(1024), nullable=False)
    avatar_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cover_image: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    cover_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_accounts_email"),
        UniqueConstraint("username", name="uq_accounts_username"),
    )

    watch_history: Mapped[list[WatchHistoryEntry]] = relationship(
        "WatchHistoryEntry",
        back_populates="account",
        order_by="WatchHistoryEntry.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        if "@" not in v:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        """
        Normalize username to its lowercase trimmed form.

        :raises ValueError: If username is missing or only whitespace.
        """
        if not isinstance(value, str):
            raise ValueError("Username is required.")
        v = value.strip().lower()
        if not v:
            raise ValueError("Username is required.")
        return v

    @validates("full_name")
    def _strip_full_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Full name is required.")
        return value.strip()
