# channelhub/services/_shared/base.py
from __future__ import annotations

from channelhub.core import errors as api_errors
from channelhub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    UpstreamFailureError,
    ValidationError,
)
from channelhub.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


def translate_service_error(exc: ServiceError) -> api_errors.APIError:
    """
    Pick the HTTP error for a service failure.

    :param exc: Error raised by a service.
    :returns: API error whose ``message`` is safe to show to clients.
    """
    if isinstance(exc, ValidationError):
        return api_errors.BadRequest(str(exc))

    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(f"{exc.entity} not found")

    if isinstance(exc, ConflictError):
        return api_errors.Conflict(exc.detail)

    if isinstance(exc, UnauthorizedError):
        return api_errors.Unauthorized(str(exc))

    if isinstance(exc, UpstreamFailureError):
        return api_errors.UpstreamFailure(str(exc))

    # Unmapped subclasses surface as 400
    return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")


class BaseService:
    """
    Common ground for the account, session and channel services.

    Services open a :meth:`rw_uow` or :meth:`ro_uow` per operation and never
    touch ``db.session`` directly. They raise :class:`ServiceError`
    subclasses only; the API layer maps those to HTTP.
    """

    DEFAULT_READ_ISOLATION = "REPEATABLE READ"

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "REPEATABLE READ").
        :type isolation: str | None
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :type enforce_db_readonly: bool
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    @staticmethod
    def require_text(*values: str | None) -> None:
        """
        Ensure every value is a non-blank string.

        :raises ValidationError: When any value is missing or whitespace only.
        """
        if any(v is None or not str(v).strip() for v in values):
            raise ValidationError()
