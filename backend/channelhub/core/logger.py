"""JSON logging with request correlation and account binding."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_app_context, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# ``extra=`` keys promoted to top-level JSON fields
EXTRA_KEYS = ("endpoint", "elapsed_ms", "account_id", "event", "reason")

# Never written to logs, whatever the caller passes in ``extra=``
REDACTED_KEYS = frozenset({"password", "password_hash", "access_token", "refresh_token"})


class JSONFormatter(logging.Formatter):
    """Render log records as one JSON object per line.

    Keys listed in :data:`EXTRA_KEYS` are copied from the record when set;
    ``None`` values are dropped to keep lines short.
    """

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        for key in REDACTED_KEYS:
            if hasattr(record, key):
                payload[key] = "***"
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """Attach ``request_id`` and, once authenticated, ``account_id``."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        if not has_request_context():
            record.request_id = None
            return True
        record.request_id = ensure_request_id()
        if getattr(record, "account_id", None) is None and has_app_context():
            account = g.get("account")
            if account is not None:
                record.account_id = account.id
        return True


def ensure_request_id() -> str:
    """Return the current request identifier, generating one when necessary.

    The first of :data:`CORRELATION_HEADERS` found on the request wins;
    otherwise a UUID4 is minted. The value is cached on ``g.request_id``.
    """
    if not has_request_context():
        return str(uuid4())
    cached = g.get("request_id")
    if cached:
        return cached
    value = next(
        (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)),
        None,
    ) or str(uuid4())
    g.request_id = value
    return value


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single JSON stdout handler on the root logger."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Seed the request id per request and echo it on every response."""
    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def _bind_request_id() -> None:  # pragma: no cover - integration glue
        g.pop("request_id", None)
        g.pop("account", None)
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):  # pragma: no cover - integration glue
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "EXTRA_KEYS"]
