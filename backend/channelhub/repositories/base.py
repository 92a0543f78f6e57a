"""Shared persistence helpers for the channelhub repositories.

Repositories only read and stage rows. Committing and rolling back belongs to
the Unit of Work that created their session, so nothing here ever calls
``commit()``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from channelhub.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """Single-model repository bound to one SQLAlchemy session.

    Subclasses set ``model`` and, when they allow attribute updates, list the
    assignable attributes in :meth:`_updatable_fields`.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session of the enclosing Unit of Work. When omitted
            the Flask-scoped ``db.session`` is used.
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _updatable_fields(self) -> set[str]:
        """Attributes :meth:`update` may assign. Empty means read-only."""
        return set()

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so column defaults and constraints fire."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Return the row whose primary key is ``entity_id``, or ``None``."""
        return cast(E | None, self.session.get(self.model, entity_id))

    def exists(self, **criteria: Any) -> bool:
        """Whether any row matches every ``column == value`` pair in ``criteria``.

        :raises AttributeError: When a key is not a mapped attribute.
        """
        stmt = select(func.count()).select_from(self.model)
        for name, value in criteria.items():
            stmt = stmt.where(getattr(self.model, name) == value)
        return bool(self.session.execute(stmt).scalar())

    def flush(self) -> None:
        self.session.flush()

    def update(self, instance: E, **fields: Any) -> E:
        """Assign whitelisted attributes on ``instance`` and flush.

        ``setattr`` is used so ``@validates`` hooks on the model run.

        :raises ValueError: If ``fields`` names an attribute outside
            :meth:`_updatable_fields`.
        """
        self._check_updatable(fields)
        for name, value in fields.items():
            setattr(instance, name, value)
        self.flush()
        return instance

    def _check_updatable(self, fields: Mapping[str, Any]) -> None:
        rejected = sorted(set(fields) - self._updatable_fields())
        if rejected:
            raise ValueError(f"{self.model.__name__} fields not updatable: {rejected}")
