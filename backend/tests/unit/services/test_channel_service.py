"""Tests for ChannelService: profile aggregation, subscriptions and history."""

from __future__ import annotations

import pytest
from channelhub.models.video import Video
from channelhub.services._shared.errors import NotFoundError
from channelhub.services.channels.dto import VideoOwnerOut
from channelhub.services.channels.service import ChannelService

from tests.factories.account import AccountFactory
from tests.factories.subscription import SubscriptionFactory
from tests.factories.video import VideoFactory
from tests.factories.watch_history import WatchHistoryEntryFactory


@pytest.fixture()
def service() -> ChannelService:
    return ChannelService()


@pytest.fixture()
def graph(session):
    """Channel ``c`` followed by three accounts and following two of them."""
    c = AccountFactory(username="c", full_name="Channel C")
    a, b, d = AccountFactory(username="a"), AccountFactory(username="b"), AccountFactory(username="d")
    stranger = AccountFactory(username="stranger")
    for follower in (a, b, d):
        SubscriptionFactory(subscriber_id=follower.id, channel_id=c.id)
    for target in (a, b):
        SubscriptionFactory(subscriber_id=c.id, channel_id=target.id)
    session.commit()
    return {"c": c.id, "a": a.id, "b": b.id, "d": d.id, "stranger": stranger.id}


# ---------------------------- Channel profile ----------------------------- #
def test_channel_profile_counts(service, graph):
    profile = service.channel_profile("c", graph["a"])

    assert profile.id == graph["c"]
    assert profile.full_name == "Channel C"
    assert profile.subscribers_count == 3
    assert profile.channels_subscribed_to_count == 2
    assert profile.is_subscribed is True


def test_channel_profile_for_non_subscriber(service, graph):
    profile = service.channel_profile("C", graph["stranger"])
    assert profile.is_subscribed is False
    assert profile.subscribers_count == 3


def test_channel_profile_without_edges(service, graph):
    profile = service.channel_profile("stranger", graph["a"])
    assert (profile.subscribers_count, profile.channels_subscribed_to_count) == (0, 0)
    assert profile.is_subscribed is False


@pytest.mark.parametrize("username", ["ghost", "", "   "])
def test_channel_profile_unknown(service, graph, username):
    with pytest.raises(NotFoundError):
        service.channel_profile(username, graph["a"])


# ----------------------------- Subscriptions ------------------------------ #
def test_subscribe_is_idempotent(service, graph):
    first = service.subscribe(graph["stranger"], "c")
    second = service.subscribe(graph["stranger"], "c")

    assert first.is_subscribed and second.is_subscribed
    assert second.subscribers_count == 4


def test_unsubscribe_is_idempotent(service, graph):
    first = service.unsubscribe(graph["a"], "c")
    second = service.unsubscribe(graph["a"], "c")

    assert not first.is_subscribed and not second.is_subscribed
    assert second.subscribers_count == 2


def test_subscribe_unknown_channel(service, graph):
    with pytest.raises(NotFoundError):
        service.subscribe(graph["a"], "ghost")


# ------------------------------ Watch history ----------------------------- #
def test_watch_history_denormalizes_owner(service, session):
    viewer = AccountFactory()
    owner = AccountFactory(username="uploader", full_name="Up Loader")
    v1 = VideoFactory(owner_id=owner.id, title="First")
    v2 = VideoFactory(owner_id=owner.id, title="Second")
    WatchHistoryEntryFactory(account_id=viewer.id, video_id=v1.id, position=1)
    WatchHistoryEntryFactory(account_id=viewer.id, video_id=v2.id, position=2)
    session.commit()

    history = service.watch_history(viewer.id)

    assert [v.title for v in history] == ["First", "Second"]
    assert history[0].owner == VideoOwnerOut(
        full_name="Up Loader", username="uploader", avatar=owner.avatar
    )


def test_watch_history_skips_deleted_videos(service, session):
    viewer = AccountFactory()
    kept, gone = VideoFactory(), VideoFactory()
    WatchHistoryEntryFactory(account_id=viewer.id, video_id=kept.id, position=1)
    WatchHistoryEntryFactory(account_id=viewer.id, video_id=gone.id, position=2)
    session.commit()
    kept_id, gone_id = kept.id, gone.id

    session.delete(session.get(Video, gone_id))
    session.commit()

    history = service.watch_history(viewer.id)
    assert [v.id for v in history] == [kept_id]


def test_watch_history_missing_owner(service, session):
    viewer = AccountFactory()
    video = VideoFactory(owner_id="e" * 32)
    WatchHistoryEntryFactory(account_id=viewer.id, video_id=video.id, position=1)
    session.commit()

    [entry] = service.watch_history(viewer.id)
    assert entry.owner is None


def test_watch_history_empty_and_unknown(service, session):
    viewer = AccountFactory()
    session.commit()
    assert service.watch_history(viewer.id) == []

    with pytest.raises(NotFoundError):
        service.watch_history("0" * 32)


def test_record_watch_appends_in_order(service, session):
    viewer = AccountFactory()
    v1, v2 = VideoFactory(), VideoFactory()
    session.commit()
    viewer_id, v1_id, v2_id = viewer.id, v1.id, v2.id

    service.record_watch(viewer_id, v1_id)
    history = service.record_watch(viewer_id, v2_id)

    assert [v.id for v in history] == [v1_id, v2_id]

    # Rewatching appends at the end; oldest entries stay first
    history = service.record_watch(viewer_id, v1_id)
    assert [v.id for v in history] == [v1_id, v2_id, v1_id]
    assert [v.id for v in service.watch_history(viewer_id)] == [v1_id, v2_id, v1_id]


def test_record_watch_unknown_video(service, session):
    viewer = AccountFactory()
    session.commit()
    with pytest.raises(NotFoundError) as exc:
        service.record_watch(viewer.id, "0" * 32)
    assert exc.value.entity == "Video"
