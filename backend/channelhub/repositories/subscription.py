"""Subscription edge repository."""

from __future__ import annotations

from sqlalchemy import delete

from channelhub.models.subscription import Subscription
from channelhub.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Persistence-only repository for :class:`Subscription` edges."""

    model = Subscription

    def exists_edge(self, subscriber_id: str, channel_id: str) -> bool:
        return self.exists(subscriber_id=subscriber_id, channel_id=channel_id)

    def add_edge(self, subscriber_id: str, channel_id: str) -> Subscription:
        return self.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))

    def remove_edge(self, subscriber_id: str, channel_id: str) -> bool:
        """Delete the edge if present. Returns whether a row was removed."""
        stmt = delete(Subscription).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
        return self.session.execute(stmt).rowcount > 0
