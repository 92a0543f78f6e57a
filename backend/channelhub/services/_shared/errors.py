"""
Errors raised by the account, session and channel services.

Nothing here knows about Flask or HTTP status codes. The delivery layer turns
them into Problem Details through
:func:`channelhub.services._shared.base.translate_service_error`.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Tell whether ``exc`` was caused by ``constraint_name``.

    Parameters
    ----------
    exc : IntegrityError
        Error raised while flushing or committing.
    constraint_name : str
        Constraint or column to look for, e.g. ``"uq_accounts_email"`` or
        ``"email"``.

    Returns
    -------
    bool
        ``True`` when the driver message mentions the name.

    Notes
    -----
    PostgreSQL reports the constraint name, SQLite the ``table.column`` list,
    so callers may pass either.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ServiceError(Exception):
    """Root of every service failure. None of them are retried."""


class ValidationError(ServiceError):
    """A required field was absent or blank."""

    def __init__(self, message: str = "All fields are required") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    No row for the given key.

    :param entity: Kind of row, ``"Account"``, ``"Channel"`` or ``"Video"``.
    :param key: Identifier or username that was looked up.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    A uniqueness rule would be broken.

    :param entity: Kind of row involved.
    :param detail: Client-facing explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} conflict: {self.detail}"


class UnauthorizedError(ServiceError):
    """
    Credentials or tokens were rejected.

    ``str(err)`` goes to the client. ``reason`` is a short code such as
    ``"refresh_reused"`` that is only written to the logs.
    """

    def __init__(self, message: str = "Unauthorized request", *, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason or message


class InvalidCredentialsError(UnauthorizedError):
    """Failed login; an unknown identifier and a wrong password look identical."""

    def __init__(self, *, reason: str) -> None:
        super().__init__("Invalid user credentials", reason=reason)


class UpstreamFailureError(ServiceError):
    """The media store or the database failed in an unexpected way."""

    def __init__(self, message: str = "Upstream service failure") -> None:
        super().__init__(message)
