"""Tests for the ``flask seed`` command group."""

from __future__ import annotations

import pytest
from channelhub.models import Account, Subscription, WatchHistoryEntry
from channelhub.services._shared.errors import UnauthorizedError
from channelhub.services.auth.dto import LoginIn
from channelhub.services.auth.service import SessionManager
from channelhub.services.channels.service import ChannelService
from sqlalchemy import func, select


def _count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def test_seed_run_is_idempotent(app, session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "run"])
    assert first.exit_code == 0, first.output
    assert "Seed summary:" in first.output
    accounts, edges = _count(session, Account), _count(session, Subscription)
    history = _count(session, WatchHistoryEntry)

    second = runner.invoke(args=["seed", "run"])
    assert second.exit_code == 0, second.output
    assert "created= 0" in second.output
    assert (
        _count(session, Account),
        _count(session, Subscription),
        _count(session, WatchHistoryEntry),
    ) == (accounts, edges, history)


def test_seeded_data_is_usable(app, session, tokens, hasher):
    result = app.test_cli_runner().invoke(args=["seed", "run"])
    assert result.exit_code == 0, result.output

    sessions = SessionManager(tokens=tokens, hasher=hasher)
    login = sessions.login(LoginIn(username="alexm", password="devPass123!"))
    assert login.account.username == "alexm"

    profile = ChannelService().channel_profile("alexm", login.account.id)
    assert profile.subscribers_count == 3
    assert profile.channels_subscribed_to_count == 2

    with pytest.raises(UnauthorizedError):
        sessions.login(LoginIn(username="alexm", password="wrong"))
