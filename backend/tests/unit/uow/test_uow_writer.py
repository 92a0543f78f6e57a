"""Unit tests for SQLAlchemyUnitOfWork (writer), using factories."""

from __future__ import annotations

import pytest
from channelhub.models.account import Account
from channelhub.uow import SQLAlchemyUnitOfWork
from sqlalchemy import func, select

from tests.factories.account import AccountFactory


def _count(session) -> int:
    return session.execute(select(func.count(Account.id))).scalar_one()


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, session):
        initial = _count(session)

        with SQLAlchemyUnitOfWork() as uow:
            uow.accounts.add(AccountFactory.build())

        assert _count(session) == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, session):
        initial = _count(session)

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.accounts.add(AccountFactory.build())
            raise RuntimeError("boom")

        assert _count(session) == initial
