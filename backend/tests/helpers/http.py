"""HTTP helper utilities for tests."""

from __future__ import annotations

import io

API = "/api/v1"
USERS = f"{API}/users"


def bearer(token: str) -> dict[str, str]:
    """Return an ``Authorization`` header carrying ``token``."""
    return {"Authorization": f"Bearer {token}"}


def image(name: str = "avatar.png", content: bytes = b"\x89PNG fake") -> tuple[io.BytesIO, str]:
    """Return a ``(stream, filename)`` pair accepted by the test client."""
    return io.BytesIO(content), name


def login(client, identifier: str, password: str = "Passw0rd!", *, field: str = "username"):
    """POST credentials and return the response."""
    return client.post(f"{USERS}/login", json={field: identifier, "password": password})
