"""Abstract Unit of Work contract shared by the read-write and read-only scopes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from channelhub.repositories import (
        AccountRepository,
        SubscriptionRepository,
        VideoRepository,
    )


class UnitOfWork(ABC):
    """
    One transactional boundary for a use case.

    Repositories exposed here share a single session, so everything a
    service reads and writes inside a ``with`` block lands in the same
    transaction.
    """

    accounts: AccountRepository
    subscriptions: SubscriptionRepository
    videos: VideoRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
