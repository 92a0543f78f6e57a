"""Column mixins shared by the account, video and relationship tables."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column


def new_id() -> str:
    """Opaque row identifier: a UUID4 rendered as 32 lowercase hex digits."""
    return uuid4().hex


class IdMixin:
    """String primary key ``id``, assigned by :func:`new_id` on insert."""

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)


class TimestampMixin:
    """Database-managed ``created_at`` / ``updated_at`` columns.

    Both are timezone aware. ``updated_at`` is bumped by an ``onupdate``
    expression, so bulk ``UPDATE`` statements issued through Core (the
    refresh-token slot, for instance) refresh it too.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class ReprMixin:
    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"
