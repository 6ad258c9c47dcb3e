"""Flask CLI commands for managing user accounts."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError

from tokenauth.core.extensions import db
from tokenauth.repositories.user import UserRepository

LOGGER = logging.getLogger(__name__)


@click.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create missing tables (idempotent)."""
    db.create_all()
    click.echo("Database initialized.")


@click.group("users")
def users_cli() -> None:
    """User account management."""


@users_cli.command("create")
@click.argument("username")
@click.password_option()
@with_appcontext
def create_command(username: str, password: str) -> None:
    """Create USERNAME with the given password."""
    repo = UserRepository(db.session)
    try:
        user = repo.create(username, password)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise click.ClickException(f"User {username!r} already exists.") from exc
    except ValueError as exc:
        db.session.rollback()
        raise click.ClickException(str(exc)) from exc
    LOGGER.info("users.created", extra={"user_id": str(user.id)})
    click.echo(f"Created user {user.username} (id={user.id}).")


@users_cli.command("set-password")
@click.argument("username")
@click.password_option()
@with_appcontext
def set_password_command(username: str, password: str) -> None:
    """Replace USERNAME's password, revoking every token issued before."""
    repo = UserRepository(db.session)
    user = repo.get_by_username(username)
    if user is None:
        raise click.ClickException(f"User {username!r} not found.")
    repo.update_password(user.id, password)
    db.session.commit()
    LOGGER.info("users.password_changed", extra={"user_id": str(user.id)})
    click.echo(f"Password updated for {user.username}.")
