"""Units of work over the Flask-scoped SQLAlchemy session."""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from channelhub.core.extensions import db
from channelhub.repositories import (
    AccountRepository,
    SubscriptionRepository,
    VideoRepository,
)
from channelhub.uow.base import UnitOfWork

log = logging.getLogger(__name__)

# Leading SQL keywords rejected inside a read-only scope
WRITE_KEYWORDS = (
    "insert",
    "update",
    "delete",
    "merge",
    "alter",
    "drop",
    "truncate",
    "create",
    "replace",
    "grant",
    "revoke",
)


class _Repositories:
    """Account, subscription and video repositories on one shared session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.accounts = AccountRepository(session=session)
        self.subscriptions = SubscriptionRepository(session=session)
        self.videos = VideoRepository(session=session)


class SQLAlchemyUnitOfWork(_Repositories, UnitOfWork):
    """
    Read-write scope: commit on a clean exit, roll back on any exception.

    A commit that itself fails is rolled back before the error propagates, so
    a refresh-token rotation or a media swap is never half applied.
    """

    def __init__(self) -> None:
        super().__init__(db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_Repositories, UnitOfWork):
    """
    Snapshot scope for aggregation reads such as the channel profile.

    Parameters
    ----------
    isolation_level:
        Issued as ``SET TRANSACTION ISOLATION LEVEL`` when the scope opened
        the transaction itself. ``None`` keeps the server default.
    enforce_db_readonly:
        Also issue ``SET TRANSACTION READ ONLY``.

    Notes
    -----
    The ``SET TRANSACTION`` directives only run on PostgreSQL and MySQL.
    Every dialect, SQLite included, gets the Python-level guards: pending ORM
    changes abort the flush and DML statements are refused before reaching
    the cursor.
    """

    _DIRECTIVE_DIALECTS = frozenset({"postgresql", "mysql", "mariadb"})

    def __init__(
        self,
        *,
        isolation_level: str | None = "REPEATABLE READ",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned: SessionTransaction | None = None
        self._conn: Connection | None = None
        self._guards: tuple | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._owned = self.session.begin()
        except InvalidRequestError:
            # Joined an enclosing transaction
            self._owned = None

        self._conn = self.session.connection()
        self._arm_guards()
        if self._owned is not None and self._conn.dialect.name in self._DIRECTIVE_DIALECTS:
            self._apply_directives()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned is not None:
                owned, self._owned = self._owned, None
                with suppress(SQLAlchemyError):
                    owned.rollback()
        finally:
            self._disarm_guards()
            self._conn = None

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    def _apply_directives(self) -> None:
        statements = []
        if self.isolation_level:
            statements.append(
                f"SET TRANSACTION ISOLATION LEVEL {self.isolation_level.strip().upper()}"
            )
        if self.enforce_db_readonly:
            statements.append("SET TRANSACTION READ ONLY")
        try:
            for sql in statements:
                self.session.execute(text(sql))
        except SQLAlchemyError as exc:
            log.warning("Read-only directives rejected, relying on guards: %s", exc)

    def _arm_guards(self) -> None:
        if self._guards is not None:
            return

        def block_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError(
                    "Read-only UnitOfWork: ORM flush blocked (pending changes in session)."
                )

        def block_dml(conn, cursor, statement, parameters, context, executemany):
            keyword = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if keyword.startswith(WRITE_KEYWORDS):
                raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

        target = self._conn if self._conn is not None else self.session.get_bind()
        event.listen(self.session, "before_flush", block_flush)
        event.listen(target, "before_cursor_execute", block_dml)
        self._guards = (target, block_flush, block_dml)

    def _disarm_guards(self) -> None:
        if self._guards is None:
            return
        target, block_flush, block_dml = self._guards
        self._guards = None
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", block_flush)
        with suppress(InvalidRequestError):
            event.remove(target, "before_cursor_execute", block_dml)
