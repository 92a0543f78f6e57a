"""Video records referenced by watch history."""

from __future__ import annotations

from sqlalchemy import Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from channelhub.core.extensions import db

from .base import IdMixin, ReprMixin, TimestampMixin


class Video(IdMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Uploaded video.

    Attributes
    ----------
    owner_id:
        Account id of the uploader. Plain reference without a foreign key:
        the owner may disappear and readers must tolerate that.
    duration:
        Length in seconds.
    """

    __tablename__ = "videos"

    video_file: Mapped[str] = mapped_column(String(1024), nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(1024), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    owner_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
