"""Ordered watch history of an account."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from channelhub.core.extensions import db

from .base import IdMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .account import Account


class WatchHistoryEntry(IdMixin, TimestampMixin, ReprMixin, db.Model):
    """
    One slot in an account's watch history.

    ``position`` grows with every append, so ordering by it reproduces the
    insertion order. ``video_id`` is a soft reference; deleted videos leave
    dangling entries behind.
    """

    __tablename__ = "watch_history_entries"

    account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    video_id: Mapped[str] = mapped_column(String(32), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "position", name="uq_watch_history_account_position"),
    )

    account: Mapped[Account] = relationship("Account", back_populates="watch_history")
