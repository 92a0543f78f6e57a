"""Problem Details (RFC 7807) responses for every failure path of the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from channelhub.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Machine codes for statuses raised outside APIError
STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "unprocessable_entity",
    500: "internal_server_error",
    502: "upstream_failure",
    503: "service_unavailable",
}


def problem(
    status: int,
    detail: str,
    *,
    code: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Assemble a Problem Details body bound to the current request.

    :param status: HTTP status code.
    :param detail: Client-safe explanation.
    :param code: Machine code; derived from ``status`` when omitted.
    :param details: Optional structured payload such as validation messages.
    :returns: JSON-serializable mapping.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": detail,
        "instance": request.path if request else None,
        "code": code or STATUS_CODES.get(int(status), "error"),
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    return body


def problem_response(body: dict[str, Any]) -> tuple[Response, int]:
    resp = jsonify(body)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, int(body["status"])


class APIError(Exception):
    """
    Error raised by the delivery layer and rendered as Problem Details.

    Parameters
    ----------
    message : str
        Client-safe description, copied to ``detail``.
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Machine identifier. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Structured extras for the ``details`` member.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        return problem(
            self.status_code, self.message, code=self.code, details=self.details or None
        )


class BadRequest(APIError):
    """400: a required field is missing or blank."""

    def __init__(self, message: str = "All fields are required") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="validation_error")


class NotFound(APIError):
    """404: the addressed account, channel or video does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """409: username or email already taken."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class Unauthorized(APIError):
    """401: credentials or tokens rejected."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class UpstreamFailure(APIError):
    """502: the media store or the database failed unexpectedly."""

    def __init__(self, message: str = "Upstream service failure") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_GATEWAY, code="upstream_failure")


def init_app(app: Flask) -> None:
    """
    Register error handlers on ``app``.

    Notes
    -----
    - Service errors go through
      :func:`channelhub.services._shared.base.translate_service_error`;
      the rejection ``reason`` of authentication failures is logged, never
      returned.
    - Database and unexpected errors never expose driver messages.
    - 5xx are logged at ``error`` with traceback, 4xx at ``warning``.
    """
    from channelhub.services._shared.base import translate_service_error
    from channelhub.services._shared.errors import ServiceError, UnauthorizedError

    def _log(status: int, kind: str, detail: str, *, exc_info: bool = False) -> None:
        level = logging.ERROR if status >= 500 else logging.WARNING
        log.log(level, "%s status=%s detail=%s", kind, int(status), detail, exc_info=exc_info)

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log(err.status_code, f"APIError[{err.code}]", err.message)
        return problem_response(err.to_problem())

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        if isinstance(err, UnauthorizedError):
            log.info("Authentication rejected", extra={"reason": err.reason, "event": "auth"})
        return handle_api_error(translate_service_error(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        if status == HTTPStatus.NOT_FOUND:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or HTTPStatus(status).phrase).strip()
        _log(status, "HTTPException", detail)
        return problem_response(problem(status, detail))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        status = HTTPStatus.UNPROCESSABLE_ENTITY
        _log(status, "ValidationError", "payload rejected")
        body = problem(
            status, "Validation failed", code="validation_error", details={"errors": err.messages}
        )
        return problem_response(body)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        _log(HTTPStatus.CONFLICT, "IntegrityError", "constraint violated", exc_info=True)
        return problem_response(problem(HTTPStatus.CONFLICT, "Resource conflict"))

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        status = HTTPStatus.SERVICE_UNAVAILABLE
        _log(status, "OperationalError", "database unavailable", exc_info=True)
        return problem_response(problem(status, "Service temporarily unavailable"))

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        status = HTTPStatus.INTERNAL_SERVER_ERROR
        _log(status, "Unhandled", type(err).__name__, exc_info=True)
        return problem_response(problem(status, "Unexpected error"))
