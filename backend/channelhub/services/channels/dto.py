"""
DTOs for ChannelService.

Read models produced by the aggregation queries. Field names follow the
public JSON contract once passed through the response schemas.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """
    A channel as seen by a viewer.

    :ivar subscribers_count: Edges pointing at this channel.
    :ivar channels_subscribed_to_count: Edges leaving this channel.
    :ivar is_subscribed: Whether the viewer subscribes to this channel.
    """

    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


@dataclass(frozen=True, slots=True)
class VideoOwnerOut:
    """Minimal owner projection embedded into each watched video."""

    full_name: str
    username: str
    avatar: str


@dataclass(frozen=True, slots=True)
class WatchedVideoOut:
    """
    One resolved watch-history entry.

    :ivar owner: Single owner object, or ``None`` when the uploader is gone.
    """

    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner: VideoOwnerOut | None
    created_at: datetime | None = None
