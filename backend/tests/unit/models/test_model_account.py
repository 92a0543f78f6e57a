"""Tests for the Account model."""

from __future__ import annotations

import pytest
from channelhub.models.account import Account
from sqlalchemy.exc import IntegrityError

from tests.factories.account import AccountFactory
from tests.factories.video import VideoFactory
from tests.factories.watch_history import WatchHistoryEntryFactory


def _account(**overrides) -> Account:
    values = {
        "email": "Ana@Example.com ",
        "username": "  AnaR ",
        "full_name": " Ana Ruiz ",
        "password_hash": "x",
        "avatar": "memory://media/a.png",
    }
    values.update(overrides)
    return Account(**values)


class TestAccount:
    def test_identifiers_are_normalized(self, session):
        acc = _account()
        session.add(acc)
        session.commit()

        assert acc.email == "ana@example.com"
        assert acc.username == "anar"
        assert acc.full_name == "Ana Ruiz"
        assert acc.cover_image == ""
        assert acc.refresh_token is None
        assert len(acc.id) == 32

    def test_email_unique(self, session):
        session.add(_account())
        session.commit()

        session.add(_account(username="other"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_username_unique_case_insensitively(self, session):
        session.add(_account())
        session.commit()

        session.add(_account(email="second@example.com", username="ANAR"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    @pytest.mark.parametrize(
        "field, value",
        [("email", "not-an-email"), ("username", "   "), ("full_name", "")],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValueError):
            _account(**{field: value})

    def test_watch_history_relationship_is_ordered(self, session):
        acc = AccountFactory()
        first, second = VideoFactory(), VideoFactory()
        WatchHistoryEntryFactory(account_id=acc.id, video_id=second.id, position=2)
        WatchHistoryEntryFactory(account_id=acc.id, video_id=first.id, position=1)
        session.commit()
        session.expire_all()

        reloaded = session.get(Account, acc.id)
        assert [e.video_id for e in reloaded.watch_history] == [first.id, second.id]
