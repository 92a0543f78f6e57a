"""
ChannelService
==============

Relationship reads and writes around the subscription graph and the watch
history.

- ``channel_profile`` derives counts and the viewer flag from the edge set in
  one statement, inside a single read-only transaction.
- ``watch_history`` denormalizes each video's owner into a single object.
"""

from __future__ import annotations

import logging

from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import NotFoundError
from channelhub.services.channels.dto import (
    ChannelProfileOut,
    VideoOwnerOut,
    WatchedVideoOut,
)

log = logging.getLogger(__name__)


class ChannelService(BaseService):
    """Aggregation queries over accounts, subscriptions and videos."""

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def channel_profile(self, username: str, viewer_id: str | None) -> ChannelProfileOut:
        """
        Build the public profile of ``username`` relative to ``viewer_id``.

        :param username: Channel username, case-insensitive.
        :param viewer_id: Account looking at the channel.
        :raises NotFoundError: No account has that username.
        """
        if not username or not username.strip():
            raise NotFoundError("Channel", username or "")

        with self.ro_uow() as uow:
            row = uow.accounts.channel_profile_row(username, viewer_id)
            if row is None:
                raise NotFoundError("Channel", username.strip().lower())
            account, subscribers, subscribed_to, is_subscribed = row
            return ChannelProfileOut(
                id=account.id,
                username=account.username,
                email=account.email,
                full_name=account.full_name,
                avatar=account.avatar,
                cover_image=account.cover_image or "",
                subscribers_count=int(subscribers or 0),
                channels_subscribed_to_count=int(subscribed_to or 0),
                is_subscribed=bool(is_subscribed),
            )

    def watch_history(self, account_id: str) -> list[WatchedVideoOut]:
        """
        Resolve the watch history of ``account_id``.

        Videos come oldest first: ascending ``position``, the order in which
        :meth:`record_watch` appended them. A rewatch appends a new entry.

        Entries pointing at deleted videos are skipped; a missing owner
        yields ``owner=None``.

        :raises NotFoundError: Unknown account.
        """
        with self.ro_uow() as uow:
            if uow.accounts.get(account_id) is None:
                raise NotFoundError("Account", account_id)
            rows = uow.accounts.watch_history_rows(account_id)
            return [
                WatchedVideoOut(
                    id=video.id,
                    video_file=video.video_file,
                    thumbnail=video.thumbnail,
                    title=video.title,
                    description=video.description,
                    duration=video.duration,
                    views=video.views,
                    is_published=video.is_published,
                    owner=(
                        VideoOwnerOut(full_name=full_name, username=username, avatar=avatar)
                        if username is not None
                        else None
                    ),
                    created_at=video.created_at,
                )
                for video, full_name, username, avatar in rows
            ]

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def subscribe(self, subscriber_id: str, channel_username: str) -> ChannelProfileOut:
        """
        Subscribe ``subscriber_id`` to a channel. Idempotent.

        :raises NotFoundError: Unknown channel.
        """
        with self.rw_uow() as uow:
            channel = uow.accounts.get_by_username(channel_username)
            if channel is None:
                raise NotFoundError("Channel", channel_username)
            if not uow.subscriptions.exists_edge(subscriber_id, channel.id):
                uow.subscriptions.add_edge(subscriber_id, channel.id)
                log.info("Subscribed", extra={"account_id": subscriber_id, "event": "subscribe"})
        return self.channel_profile(channel_username, subscriber_id)

    def unsubscribe(self, subscriber_id: str, channel_username: str) -> ChannelProfileOut:
        """
        Remove the subscription if present. Idempotent.

        :raises NotFoundError: Unknown channel.
        """
        with self.rw_uow() as uow:
            channel = uow.accounts.get_by_username(channel_username)
            if channel is None:
                raise NotFoundError("Channel", channel_username)
            if uow.subscriptions.remove_edge(subscriber_id, channel.id):
                log.info(
                    "Unsubscribed", extra={"account_id": subscriber_id, "event": "unsubscribe"}
                )
        return self.channel_profile(channel_username, subscriber_id)

    def record_watch(self, account_id: str, video_id: str) -> list[WatchedVideoOut]:
        """
        Append ``video_id`` to the watch history and return the new history.

        :raises NotFoundError: Unknown account or video.
        """
        with self.rw_uow() as uow:
            if uow.accounts.get(account_id) is None:
                raise NotFoundError("Account", account_id)
            if uow.videos.get(video_id) is None:
                raise NotFoundError("Video", video_id)
            uow.accounts.append_watch_history(account_id, video_id)
        return self.watch_history(account_id)
