"""Unit tests for AccountRepository."""

from __future__ import annotations

import pytest
from channelhub.models.account import Account
from channelhub.repositories import AccountRepository
from sqlalchemy.exc import IntegrityError

from tests.factories.account import AccountFactory
from tests.factories.subscription import SubscriptionFactory
from tests.factories.video import VideoFactory
from tests.factories.watch_history import WatchHistoryEntryFactory


class TestAccountRepository:
    """Lookups, refresh-token slot and aggregation reads."""

    @pytest.fixture()
    def repo(self, session):
        return AccountRepository(session=session)

    def test_find_by_username_or_email(self, repo, session):
        acc = AccountFactory(username="alice", email="alice@example.com")
        session.commit()

        assert repo.find_by_username_or_email(username="ALICE").id == acc.id
        assert repo.find_by_username_or_email(email=" Alice@Example.com").id == acc.id
        assert repo.find_by_username_or_email(username="nobody", email="alice@example.com").id == acc.id
        assert repo.find_by_username_or_email(username="nobody") is None
        assert repo.find_by_username_or_email() is None

    def test_exists_by_email_excludes_self(self, repo, session):
        acc = AccountFactory(email="bob@example.com")
        session.commit()

        assert repo.exists_by_email("BOB@example.com")
        assert not repo.exists_by_email("bob@example.com", exclude_id=acc.id)
        assert not repo.exists_by_email("nobody@example.com")

    def test_swap_refresh_token_only_matches_current_value(self, repo, session):
        acc = AccountFactory(refresh_token="r1")
        session.commit()
        account_id = acc.id

        assert repo.swap_refresh_token(account_id, expected="r1", new="r2") is True
        assert repo.swap_refresh_token(account_id, expected="r1", new="r3") is False
        session.commit()
        session.expire_all()

        assert session.get(Account, account_id).refresh_token == "r2"

    def test_swap_never_matches_a_cleared_slot(self, repo, session):
        acc = AccountFactory(refresh_token="r1")
        session.commit()

        assert repo.clear_refresh_token(acc.id) is True
        assert repo.clear_refresh_token(acc.id) is True
        assert repo.swap_refresh_token(acc.id, expected="r1", new="r2") is False

    def test_slot_writes_report_unknown_account(self, repo):
        assert repo.set_refresh_token("0" * 32, "r") is False
        assert repo.clear_refresh_token("0" * 32) is False
        assert repo.set_password_hash("0" * 32, "digest") is False

    def test_channel_profile_row_counts_edges(self, repo, session):
        channel = AccountFactory(username="chan")
        a, b, c, outsider = AccountFactory(), AccountFactory(), AccountFactory(), AccountFactory()
        for follower in (a, b, c):
            SubscriptionFactory(subscriber_id=follower.id, channel_id=channel.id)
        for target in (a, b):
            SubscriptionFactory(subscriber_id=channel.id, channel_id=target.id)
        session.commit()

        row = repo.channel_profile_row("CHAN", a.id)
        account, subscribers, subscribed_to, is_subscribed = row
        assert account.id == channel.id
        assert (subscribers, subscribed_to, bool(is_subscribed)) == (3, 2, True)

        assert bool(repo.channel_profile_row("chan", outsider.id)[3]) is False
        assert bool(repo.channel_profile_row("chan", None)[3]) is False

    def test_channel_profile_row_unknown_username(self, repo):
        assert repo.channel_profile_row("ghost", None) is None

    def test_watch_history_rows_resolve_owner_and_skip_missing_videos(self, repo, session):
        viewer = AccountFactory()
        owner = AccountFactory(full_name="Owner One", username="owner1")
        kept = VideoFactory(owner_id=owner.id)
        orphan = VideoFactory(owner_id="f" * 32)
        gone = VideoFactory(owner_id=owner.id)
        for pos, video in enumerate((kept, gone, orphan), start=1):
            WatchHistoryEntryFactory(account_id=viewer.id, video_id=video.id, position=pos)
        session.delete(gone)
        session.commit()

        rows = repo.watch_history_rows(viewer.id)

        assert [r[0].id for r in rows] == [kept.id, orphan.id]
        assert tuple(rows[0][1:]) == ("Owner One", "owner1", owner.avatar)
        assert tuple(rows[1][1:]) == (None, None, None)

    def test_append_watch_history_grows_position(self, repo, session):
        viewer = AccountFactory()
        v1, v2 = VideoFactory(), VideoFactory()
        session.commit()

        first = repo.append_watch_history(viewer.id, v1.id)
        second = repo.append_watch_history(viewer.id, v2.id)
        again = repo.append_watch_history(viewer.id, v1.id)

        assert (first.position, second.position, again.position) == (1, 2, 3)
        assert [r[0].id for r in repo.watch_history_rows(viewer.id)] == [v1.id, v2.id, v1.id]

    def test_append_watch_history_retries_taken_position(self, repo, session, monkeypatch):
        viewer = AccountFactory()
        v1, v2 = VideoFactory(), VideoFactory()
        WatchHistoryEntryFactory(account_id=viewer.id, video_id=v1.id, position=1)
        session.commit()

        # First read is stale, as if another request appended in between
        real_next = repo._next_position
        stale = iter([1])
        monkeypatch.setattr(repo, "_next_position", lambda aid: next(stale, None) or real_next(aid))

        entry = repo.append_watch_history(viewer.id, v2.id)

        assert entry.position == 2
        assert [r[0].id for r in repo.watch_history_rows(viewer.id)] == [v1.id, v2.id]

    def test_append_watch_history_gives_up_after_attempts(self, repo, session, monkeypatch):
        viewer = AccountFactory()
        v1, v2 = VideoFactory(), VideoFactory()
        WatchHistoryEntryFactory(account_id=viewer.id, video_id=v1.id, position=1)
        session.commit()
        monkeypatch.setattr(repo, "_next_position", lambda aid: 1)

        with pytest.raises(IntegrityError):
            repo.append_watch_history(viewer.id, v2.id)

        assert [r[0].id for r in repo.watch_history_rows(viewer.id)] == [v1.id]

    def test_update_rejects_non_whitelisted_fields(self, repo, session):
        acc = AccountFactory()
        session.commit()

        with pytest.raises(ValueError):
            repo.update(acc, refresh_token="sneaky")
