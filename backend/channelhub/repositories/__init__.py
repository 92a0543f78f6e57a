"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from channelhub.repositories.account import AccountRepository
from channelhub.repositories.base import BaseRepository
from channelhub.repositories.subscription import SubscriptionRepository
from channelhub.repositories.video import VideoRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
    "SubscriptionRepository",
    "VideoRepository",
]
