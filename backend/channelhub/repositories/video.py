"""Video repository."""

from __future__ import annotations

from channelhub.models.video import Video
from channelhub.repositories.base import BaseRepository


class VideoRepository(BaseRepository[Video]):
    """Persistence-only repository for :class:`Video`."""

    model = Video
