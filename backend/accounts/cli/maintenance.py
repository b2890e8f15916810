"""Flask CLI commands for routine account-store maintenance."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from accounts.core.container import get_session_service
from accounts.services._shared.errors import UnexpectedError

LOGGER = logging.getLogger(__name__)


@click.group("accounts")
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def accounts_cli(verbose: bool) -> None:
    """Maintenance commands for accounts and device sessions."""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


@accounts_cli.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Delete expired verification codes and refresh-token records."""
    try:
        codes, sessions = get_session_service().purge_expired()
    except UnexpectedError as exc:
        raise click.ClickException(f"Purge failed: {exc}") from exc
    click.echo("Purge summary:")
    click.echo(f"  verification_codes  deleted={codes}")
    click.echo(f"  refresh_tokens      deleted={sessions}")
