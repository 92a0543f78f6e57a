"""Directed subscription edges between accounts."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from channelhub.core.extensions import db

from .base import IdMixin, ReprMixin, TimestampMixin


class Subscription(IdMixin, TimestampMixin, ReprMixin, db.Model):
    """
    ``subscriber`` follows ``channel``. Both ends are accounts.

    The pair is unique, so counts equal the number of distinct accounts.
    Self-subscriptions are allowed.
    """

    __tablename__ = "subscriptions"

    subscriber_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    channel_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"
        ),
        Index("ix_subscriptions_channel", "channel_id"),
    )
