"""Account repository: lookups, refresh-token slot and aggregation reads."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Row, false, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased

from channelhub.models.account import Account
from channelhub.models.subscription import Subscription
from channelhub.models.video import Video
from channelhub.models.watch_history import WatchHistoryEntry
from channelhub.repositories.base import BaseRepository


def _norm(value: str) -> str:
    return value.strip().lower()


class AccountRepository(BaseRepository[Account]):
    """Persistence-only repository for :class:`Account`.

    Refresh-token writes are single ``UPDATE`` statements so the stored value
    is never read and written in two steps.
    """

    model = Account

    def _updatable_fields(self):
        """Fields changed through the profile and media operations."""
        return {
            "full_name",
            "email",
            "avatar",
            "avatar_public_id",
            "cover_image",
            "cover_public_id",
        }

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> Account | None:
        """Fetch an account by username (case-insensitive)."""
        stmt = select(Account).where(Account.username == _norm(username))
        return cast(Account | None, self.session.execute(stmt).scalars().first())

    def find_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> Account | None:
        """Return the first account matching either identifier.

        :param username: Candidate username; ignored when empty.
        :param email: Candidate email; ignored when empty.
        :returns: Matching account or ``None`` when neither matches.
        """
        clauses = []
        if username and username.strip():
            clauses.append(Account.username == _norm(username))
        if email and email.strip():
            clauses.append(Account.email == _norm(email))
        if not clauses:
            return None
        stmt = select(Account).where(or_(*clauses)).limit(1)
        return cast(Account | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str, *, exclude_id: str | None = None) -> bool:
        """Return ``True`` when another account already uses ``email``."""
        stmt = select(Account.id).where(Account.email == _norm(email))
        if exclude_id is not None:
            stmt = stmt.where(Account.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Credentials ----------------------------

    def set_password_hash(self, account_id: str, digest: str) -> bool:
        """Replace the stored password digest. Returns whether a row changed."""
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(password_hash=digest)
        )
        return self.session.execute(stmt).rowcount == 1

    def set_refresh_token(self, account_id: str, token: str) -> bool:
        """Overwrite the refresh-token slot unconditionally."""
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(refresh_token=token)
        )
        return self.session.execute(stmt).rowcount == 1

    def swap_refresh_token(self, account_id: str, *, expected: str, new: str) -> bool:
        """Compare-and-set the refresh-token slot.

        The update only matches while the stored token still equals
        ``expected``; of two concurrent callers presenting the same token,
        exactly one sees ``True``.

        :param account_id: Account identifier.
        :param expected: Token the caller presented.
        :param new: Replacement token.
        :returns: ``True`` when the slot held ``expected`` and now holds ``new``.
        """
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.refresh_token == expected)
            .values(refresh_token=new)
        )
        return self.session.execute(stmt).rowcount == 1

    def clear_refresh_token(self, account_id: str) -> bool:
        """Empty the refresh-token slot. Returns whether the account exists."""
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(refresh_token=None)
        )
        return self.session.execute(stmt).rowcount == 1

    # ---------------------------- Aggregations ----------------------------

    def channel_profile_row(self, username: str, viewer_id: str | None) -> Row[Any] | None:
        """Load a channel with its subscription counts in one statement.

        Returns a row ``(Account, subscribers_count, channels_subscribed_to_count,
        is_subscribed)`` or ``None`` when no account has ``username``.
        """
        subscribers = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == Account.id)
            .correlate(Account)
            .scalar_subquery()
        )
        subscribed_to = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == Account.id)
            .correlate(Account)
            .scalar_subquery()
        )
        if viewer_id is None:
            is_subscribed = false()
        else:
            is_subscribed = (
                select(Subscription.id)
                .where(
                    Subscription.channel_id == Account.id,
                    Subscription.subscriber_id == viewer_id,
                )
                .correlate(Account)
                .exists()
            )
        stmt = select(
            Account,
            subscribers.label("subscribers_count"),
            subscribed_to.label("channels_subscribed_to_count"),
            is_subscribed.label("is_subscribed"),
        ).where(Account.username == _norm(username))
        return self.session.execute(stmt).first()

    def watch_history_rows(self, account_id: str) -> list[Row[Any]]:
        """Resolve the watch history in stored order.

        Entries whose video no longer exists are dropped by the inner join.
        Owner columns are ``None`` when the uploader account is gone.
        Each row is ``(Video, owner_full_name, owner_username, owner_avatar)``.
        """
        owner = aliased(Account)
        stmt = (
            select(Video, owner.full_name, owner.username, owner.avatar)
            .select_from(WatchHistoryEntry)
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .outerjoin(owner, owner.id == Video.owner_id)
            .where(WatchHistoryEntry.account_id == account_id)
            .order_by(WatchHistoryEntry.position.asc())
        )
        return list(self.session.execute(stmt).all())

    def append_watch_history(
        self, account_id: str, video_id: str, *, attempts: int = 2
    ) -> WatchHistoryEntry:
        """Append ``video_id`` at the end of the account's history.

        A concurrent append may take the same position between the read and
        the insert. The insert runs in its own SAVEPOINT, so on a position
        collision the enclosing transaction survives and a fresh position is
        tried, up to ``attempts`` times.

        :raises IntegrityError: When every attempt collides.
        """
        for _ in range(attempts - 1):
            try:
                return self._insert_history_entry(account_id, video_id)
            except IntegrityError as exc:
                if "position" not in str(exc.orig).lower():
                    raise
        return self._insert_history_entry(account_id, video_id)

    def _next_position(self, account_id: str) -> int:
        last = self.session.execute(
            select(func.max(WatchHistoryEntry.position)).where(
                WatchHistoryEntry.account_id == account_id
            )
        ).scalar()
        return (last or 0) + 1

    def _insert_history_entry(self, account_id: str, video_id: str) -> WatchHistoryEntry:
        entry = WatchHistoryEntry(
            account_id=account_id,
            video_id=video_id,
            position=self._next_position(account_id),
        )
        with self.session.begin_nested():
            self.session.add(entry)
        return entry
