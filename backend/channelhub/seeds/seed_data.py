"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from channelhub.models.account import Account
from channelhub.models.subscription import Subscription
from channelhub.models.video import Video
from channelhub.models.watch_history import WatchHistoryEntry
from channelhub.services._shared.ports import PasswordHasher

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

ACCOUNT_FIXTURES: list[dict[str, str]] = [
    {
        "email": "alex.martinez@example.com",
        "username": "alexm",
        "full_name": "Alex Martinez",
        "password": "devPass123!",
    },
    {
        "email": "jamie.lee@example.com",
        "username": "jamielee",
        "full_name": "Jamie Lee",
        "password": "strongPass123",
    },
    {
        "email": "sara.kim@example.com",
        "username": "sarak",
        "full_name": "Sara Kim",
        "password": "filmMore2024",
    },
    {
        "email": "maria.garcia@example.com",
        "username": "mariag",
        "full_name": "Maria Garcia",
        "password": "studio456!",
    },
]

VIDEO_FIXTURES: list[dict[str, Any]] = [
    {
        "title": "Sourdough in 10 minutes",
        "owner": "alexm",
        "duration": 612.0,
        "description": "Weeknight bread without the fuss.",
    },
    {
        "title": "Street photography basics",
        "owner": "sarak",
        "duration": 948.5,
        "description": "Light, framing and patience.",
    },
    {
        "title": "Tiny apartment studio tour",
        "owner": "mariag",
        "duration": 431.0,
        "description": "Recording setup on a budget.",
    },
    {
        "title": "Cold brew at scale",
        "owner": "alexm",
        "duration": 305.0,
        "description": "Twelve litres, one bucket.",
    },
]

# (subscriber, channel)
SUBSCRIPTION_FIXTURES: list[tuple[str, str]] = [
    ("jamielee", "alexm"),
    ("sarak", "alexm"),
    ("mariag", "alexm"),
    ("alexm", "sarak"),
    ("alexm", "mariag"),
    ("jamielee", "sarak"),
]

# username -> video titles, oldest first
HISTORY_FIXTURES: dict[str, list[str]] = {
    "jamielee": ["Sourdough in 10 minutes", "Street photography basics", "Cold brew at scale"],
    "alexm": ["Tiny apartment studio tour"],
}


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_accounts(
    database: SQLAlchemy, *, hasher: PasswordHasher, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create development accounts with hashed passwords and placeholder media."""
    if verbose:
        LOGGER.info("Seeding accounts...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for fixture in ACCOUNT_FIXTURES:
        username = fixture["username"]
        account = session.execute(
            select(Account).filter_by(username=username)
        ).scalar_one_or_none()
        created = account is None
        if account is None:
            account = Account(
                email=fixture["email"],
                username=username,
                full_name=fixture["full_name"],
                password_hash=hasher.hash(fixture["password"]),
                avatar=f"https://picsum.photos/seed/{username}/200",
            )
            session.add(account)
        else:
            account.full_name = fixture["full_name"]
        session.flush()
        _touch(summary, "accounts", created)

    return summary


def seed_videos_and_graph(
    database: SQLAlchemy, *, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create videos, subscription edges and watch history."""
    if verbose:
        LOGGER.info("Seeding videos, subscriptions and history...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}
    accounts = {a.username: a for a in session.execute(select(Account)).scalars()}

    videos: dict[str, Video] = {}
    for fixture in VIDEO_FIXTURES:
        owner = accounts.get(fixture["owner"])
        if owner is None:
            raise RuntimeError(f"Account {fixture['owner']} missing while creating videos")
        slug = fixture["title"].lower().replace(" ", "-")
        video, created = _get_or_create(
            session,
            Video,
            title=fixture["title"],
            owner_id=owner.id,
            defaults={
                "video_file": f"https://media.example.com/videos/{slug}.mp4",
                "thumbnail": f"https://picsum.photos/seed/{slug}/640/360",
                "description": fixture["description"],
                "duration": fixture["duration"],
            },
        )
        session.flush()
        videos[video.title] = video
        _touch(summary, "videos", created)

    for subscriber, channel in SUBSCRIPTION_FIXTURES:
        _, created = _get_or_create(
            session,
            Subscription,
            subscriber_id=accounts[subscriber].id,
            channel_id=accounts[channel].id,
        )
        session.flush()
        _touch(summary, "subscriptions", created)

    for username, titles in HISTORY_FIXTURES.items():
        account = accounts[username]
        existing = session.execute(
            select(func.count(WatchHistoryEntry.id)).where(
                WatchHistoryEntry.account_id == account.id
            )
        ).scalar_one()
        if existing:
            _touch(summary, "watch_history_entries", False)
            continue
        for position, title in enumerate(titles, start=1):
            session.add(
                WatchHistoryEntry(
                    account_id=account.id, video_id=videos[title].id, position=position
                )
            )
            _touch(summary, "watch_history_entries", True)
        session.flush()

    return summary


def run_all(
    database: SQLAlchemy, *, hasher: PasswordHasher, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Run all seeders in foreign-key order and commit once."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    results = (
        seed_accounts(database, hasher=hasher, verbose=verbose),
        seed_videos_and_graph(database, verbose=verbose),
    )
    for result in results:
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    _session(database).commit()
    return combined


__all__ = [
    "seed_accounts",
    "seed_videos_and_graph",
    "run_all",
]
