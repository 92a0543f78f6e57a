"""CORS configuration helper for the account API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from channelhub.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """Configure CORS for ``/api/*`` based on application config.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``CORS_ORIGINS`` and ``CORS_MAX_AGE`` settings are
        consulted.

    Notes
    -----
    Session cookies only travel on credentialed requests, so credentials are
    enabled whenever an explicit origin list is configured. A blank value or
    ``"*"`` allows any origin and disables credentials, which limits browser
    clients to the ``Authorization`` header.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
