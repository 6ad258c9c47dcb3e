"""Flask CLI commands for token store maintenance."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from tokenauth.core.extensions import get_token_store
from tokenauth.services._shared.errors import TokenStoreError

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Token store maintenance."""


@tokens_cli.command("prune")
@with_appcontext
def prune_command() -> None:
    """Drop expired whitelist and blacklist entries.

    Redis expires keys on its own, so this only removes anything for the
    in-memory store.
    """
    try:
        removed = get_token_store().prune()
    except TokenStoreError as exc:
        raise click.ClickException(f"Token store unavailable: {exc}") from exc
    LOGGER.info("tokens.pruned", extra={"pruned": removed})
    click.echo(f"Pruned {removed} expired entries.")
