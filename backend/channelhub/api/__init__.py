"""HTTP delivery layer: service wiring plus versioned blueprints."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join_prefix(*segments: str) -> str:
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount ``(blueprint, relative_prefix)`` pairs below ``base_prefix``.

    An empty relative prefix mounts the blueprint at ``base_prefix`` itself.
    """
    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Build the application services, then mount ``/api/v1``."""
    from channelhub.api.deps import init_services
    from channelhub.api.v1 import API_VERSION, REGISTRY

    init_services(app)
    register_blueprint_group(
        app,
        base_prefix=_join_prefix(app.config.get("API_BASE_PREFIX", "/api"), API_VERSION),
        entries=REGISTRY,
    )


__all__ = ["init_app", "register_blueprint_group"]
