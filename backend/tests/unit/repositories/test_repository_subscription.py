"""Unit tests for SubscriptionRepository."""

from __future__ import annotations

import pytest
from channelhub.repositories import SubscriptionRepository
from sqlalchemy.exc import IntegrityError

from tests.factories.account import AccountFactory


class TestSubscriptionRepository:
    @pytest.fixture()
    def repo(self, session):
        return SubscriptionRepository(session=session)

    def test_add_exists_remove(self, repo, session):
        a, b = AccountFactory(), AccountFactory()
        session.commit()

        repo.add_edge(a.id, b.id)
        assert repo.exists_edge(a.id, b.id)
        assert not repo.exists_edge(b.id, a.id)

        assert repo.remove_edge(a.id, b.id) is True
        assert repo.remove_edge(a.id, b.id) is False
        assert not repo.exists_edge(a.id, b.id)

    def test_pair_is_unique(self, repo, session):
        a, b = AccountFactory(), AccountFactory()
        repo.add_edge(a.id, b.id)
        session.commit()

        with pytest.raises(IntegrityError):
            repo.add_edge(a.id, b.id)
        session.rollback()

    def test_self_subscription_allowed(self, repo, session):
        a = AccountFactory()
        repo.add_edge(a.id, a.id)
        assert repo.exists_edge(a.id, a.id)
