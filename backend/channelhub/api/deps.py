"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar, cast
from uuid import uuid4

from flask import Flask, Response, current_app, g, jsonify, request
from werkzeug.utils import secure_filename

from channelhub.infra.jwt import PyJWTTokenIssuer
from channelhub.infra.media import LocalMediaStore
from channelhub.infra.security import WerkzeugPasswordHasher
from channelhub.services._shared.ports import (
    MediaStore,
    PasswordHasherSettings,
    TokenSettings,
)
from channelhub.services.accounts.dto import AccountOut, UploadedFile
from channelhub.services.accounts.service import AccountService
from channelhub.services.auth.dto import TokenPairOut
from channelhub.services.auth.service import SessionManager
from channelhub.services.channels.service import ChannelService

F = TypeVar("F", bound=Callable[..., Any])

EXTENSION_KEY = "channelhub.services"
ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


# ------------------------------ Service wiring -------------------------------


@dataclass(slots=True)
class Services:
    """Service instances shared by every request of one application."""

    sessions: SessionManager
    accounts: AccountService
    channels: ChannelService


def build_services(config: Mapping[str, Any], *, media: MediaStore | None = None) -> Services:
    """Construct services and adapters from explicit configuration values.

    :param config: Flask config mapping.
    :param media: Media store override; defaults to :class:`LocalMediaStore`.
    """
    hasher = WerkzeugPasswordHasher(
        PasswordHasherSettings(
            method=config["PASSWORD_HASH_METHOD"],
            salt_length=int(config["PASSWORD_SALT_LENGTH"]),
        )
    )
    tokens = PyJWTTokenIssuer(TokenSettings.from_mapping(config))
    media = media or LocalMediaStore(config["MEDIA_ROOT"], config["MEDIA_BASE_URL"])
    return Services(
        sessions=SessionManager(tokens=tokens, hasher=hasher),
        accounts=AccountService(hasher=hasher, media=media),
        channels=ChannelService(),
    )


def init_services(app: Flask) -> None:
    app.extensions[EXTENSION_KEY] = build_services(app.config)


def services() -> Services:
    """Return the services bound to the current application."""
    return cast(Services, current_app.extensions[EXTENSION_KEY])


# ------------------------------ Authentication -------------------------------


def bearer_token() -> str | None:
    """Return the access token of the request.

    The ``accessToken`` cookie wins; the ``Authorization: Bearer`` header is
    the fallback for clients without cookies.
    """
    cookie = request.cookies.get(ACCESS_COOKIE)
    if cookie:
        return cookie
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def require_session(func: F) -> F:
    """Ensure the request carries a valid access token.

    The resolved account projection is stored on ``g.account``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.account = services().sessions.authenticate(bearer_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_account() -> AccountOut:
    """Return the account attached by :func:`require_session`."""
    return cast(AccountOut, g.account)


# --------------------------------- Cookies -----------------------------------


def _cookie_options() -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": bool(current_app.config.get("AUTH_COOKIE_SECURE", True)),
        "samesite": current_app.config.get("AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }


def set_session_cookies(response: Response, pair: TokenPairOut) -> Response:
    opts = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE,
        pair.access_token,
        max_age=int(current_app.config["ACCESS_TOKEN_EXPIRY"]),
        **opts,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        pair.refresh_token,
        max_age=int(current_app.config["REFRESH_TOKEN_EXPIRY"]),
        **opts,
    )
    return response


def clear_session_cookies(response: Response) -> Response:
    opts = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **opts)
    response.delete_cookie(REFRESH_COOKIE, **opts)
    return response


# --------------------------------- Uploads -----------------------------------


@contextmanager
def staged_uploads(*fields: str) -> Iterator[dict[str, UploadedFile | None]]:
    """Save multipart files to the temp directory for the duration of a block.

    Yields a mapping of form field name to :class:`UploadedFile` (``None``
    when the field is absent). Files left behind by the block are removed.
    """
    temp_dir = Path(current_app.config["UPLOAD_TEMP_DIR"])
    temp_dir.mkdir(parents=True, exist_ok=True)
    staged: dict[str, UploadedFile | None] = {}
    try:
        for name in fields:
            storage = request.files.get(name)
            if storage is None or not storage.filename:
                staged[name] = None
                continue
            filename = secure_filename(storage.filename) or "upload"
            path = temp_dir / f"{uuid4().hex}-{filename}"
            storage.save(path)
            staged[name] = UploadedFile(
                path=str(path), filename=filename, content_type=storage.mimetype
            )
        yield staged
    finally:
        for item in staged.values():
            if item is not None:
                Path(item.path).unlink(missing_ok=True)


# --------------------------------- Responses ---------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
