"""Factory Boy base wired to the per-test SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session the ``session`` fixture hands out."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        if cls._session is None:
            raise RuntimeError("No factory session bound; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flushes on create; tests call ``session.commit()`` when a service must see the rows."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
