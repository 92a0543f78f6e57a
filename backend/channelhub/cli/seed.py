"""``flask seed``: load demo channels, videos and watch history."""

from __future__ import annotations

import logging
import os

import click
from flask import current_app
from flask.cli import with_appcontext

from channelhub.core.config import ENV_VAR
from channelhub.core.extensions import db
from channelhub.infra.security import WerkzeugPasswordHasher
from channelhub.seeds import seed_data
from channelhub.services._shared.ports import PasswordHasherSettings

LOGGER = logging.getLogger(__name__)


def _hasher() -> WerkzeugPasswordHasher:
    """Hash seed passwords with the same settings the API uses."""
    cfg = current_app.config
    settings = PasswordHasherSettings(
        method=cfg["PASSWORD_HASH_METHOD"],
        salt_length=int(cfg["PASSWORD_SALT_LENGTH"]),
    )
    return WerkzeugPasswordHasher(settings)


def _print_summary(summary: dict[str, dict[str, int]]) -> None:
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (nothing to do)")
        return
    pad = max(map(len, summary))
    for table in sorted(summary):
        counts = summary[table]
        click.echo(
            f"  {table:<{pad}}  created={counts.get('created', 0):>2}"
            f"  existing={counts.get('existing', 0):>2}"
        )


def _seed(verbose: bool) -> None:
    try:
        summary = seed_data.run_all(db, hasher=_hasher(), verbose=verbose)
    except Exception as exc:  # pragma: no cover - CLI safeguard
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _print_summary(summary)


def _refuse_in_production() -> None:
    cfg = current_app.config
    in_production = os.getenv(ENV_VAR, "").strip().lower() == "production"
    if in_production or not (cfg.get("DEBUG") or cfg.get("TESTING")):
        raise click.UsageError("'flask seed fresh' only runs in development or testing.")


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log every row the seeders touch.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Demo data for local development."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    level = logging.DEBUG if verbose else logging.INFO
    for name in (seed_data.__name__, __name__):
        logging.getLogger(name).setLevel(level)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Insert missing demo rows; existing ones are left untouched."""
    _seed(bool(ctx.obj.get("verbose")))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Do not ask before dropping tables.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop and recreate every table, then seed."""
    _refuse_in_production()
    if not yes:
        click.confirm("Drop every channelhub table and start over?", abort=True)
    LOGGER.info("Recreating schema")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _seed(bool(ctx.obj.get("verbose")))
