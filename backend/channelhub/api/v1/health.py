"""Liveness endpoint reporting database and media store reachability."""

from __future__ import annotations

import os

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from channelhub.api.deps import json_response, timing
from channelhub.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return ``ok``/``fail`` per dependency; the HTTP status is always 200."""
    checks = {"db": "ok", "media": "ok"}
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        checks["db"] = "fail"

    for key in ("MEDIA_ROOT", "UPLOAD_TEMP_DIR"):
        path = current_app.config.get(key)
        if not path or not os.access(path, os.W_OK):
            checks["media"] = "fail"

    payload = {"status": "ok", **checks, "version": current_app.config.get("APP_VERSION", "dev")}
    return json_response(payload)
