"""Database and migration extension singletons."""

from __future__ import annotations

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Constraint names are spelled out in the Alembic revisions; keep in sync
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
# Batch mode so ALTERs also work against SQLite
migrate = Migrate(render_as_batch=True)


def init_app(app: Flask) -> None:
    """Bind ``db`` and ``migrate`` to ``app``.

    The model modules are imported here so their tables are registered on
    ``db.metadata`` before Alembic autogenerate inspects it.
    """
    db.init_app(app)
    import channelhub.models  # noqa: F401

    migrate.init_app(app, db)
