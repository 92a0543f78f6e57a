"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Media uploads go
to an in-memory store installed per test.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from channelhub.api.deps import EXTENSION_KEY, build_services
from channelhub.core.config import TestingConfig
from channelhub.core.extensions import db as _db  # Flask-SQLAlchemy instance
from channelhub.factory import create_app  # application factory under test
from channelhub.infra.jwt import PyJWTTokenIssuer
from channelhub.infra.security import WerkzeugPasswordHasher
from channelhub.services._shared.ports import (
    InMemoryMediaStore,
    PasswordHasherSettings,
    TokenSettings,
)
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    """Testing app with throwaway media and upload directories."""
    os.environ.pop("DATABASE_URL", None)
    media_root = tmp_path_factory.mktemp("media")
    upload_dir = tmp_path_factory.mktemp("uploads")

    class TestConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        MEDIA_ROOT = str(media_root)
        MEDIA_BASE_URL = "http://testserver/media"
        UPLOAD_TEMP_DIR = str(upload_dir)
        LOG_LEVEL = "WARNING"

    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create the schema once; the app context stays pushed for the run."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Single connection shared by every test session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Session joined to an outer transaction that is rolled back per test.

    Services commit through their Unit of Work; with the connection already
    inside a SAVEPOINT those commits only release the session savepoint, so
    rows stay visible to the test and vanish at teardown.
    """
    top_trans = connection.begin()
    scoped = scoped_session(sessionmaker(bind=connection, future=True))
    nested = connection.begin_nested()

    # Reopen the per-test SAVEPOINT if the session released it; savepoints the
    # code under test nests inside its own transaction leave it in place
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not connection.in_nested_transaction():
            nonlocal nested
            nested = connection.begin_nested()

    # Route db.session (used by every UoW) to the test session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def media(app):
    """Install an :class:`InMemoryMediaStore` behind the app services."""
    store = InMemoryMediaStore()
    original = app.extensions[EXTENSION_KEY]
    app.extensions[EXTENSION_KEY] = build_services(app.config, media=store)
    try:
        yield store
    finally:
        app.extensions[EXTENSION_KEY] = original


@pytest.fixture()
def client(app, session, media):
    """Return a Flask test client backed by the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def hasher(app):
    """Cheap password hasher matching the testing configuration."""
    return WerkzeugPasswordHasher(
        PasswordHasherSettings(
            method=app.config["PASSWORD_HASH_METHOD"],
            salt_length=app.config["PASSWORD_SALT_LENGTH"],
        )
    )


@pytest.fixture(scope="session")
def token_settings(app):
    return TokenSettings.from_mapping(app.config)


@pytest.fixture(scope="session")
def tokens(token_settings):
    return PyJWTTokenIssuer(token_settings)


@pytest.fixture()
def upload_file(tmp_path):
    """Return a factory writing a small file and returning its path."""

    def _make(name: str = "avatar.png", content: bytes = b"\x89PNG fake") -> str:
        path = Path(tmp_path) / name
        path.write_bytes(content)
        return str(path)

    return _make


@pytest.fixture(scope="session")
def faker():
    """Seeded Faker so generated names are stable between runs."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Bind factories to the per-test session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
