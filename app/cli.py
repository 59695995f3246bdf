"""Command line interface for the Auth Module."""

import asyncio
import click

from alembic import command

from app.api.dependencies import get_password_service
from app.core.domain.enums import UserType
from app.infrastructure.database.init_db import (
    check_database_health,
    ensure_user,
    get_alembic_config,
    get_database_info,
    init_database,
)
from app.infrastructure.database.session import close_db_connections
from app.utils.logging import setup_logging
from app.settings import get_settings


def _run(coro):
    """Run a coroutine, then release pooled connections and hashing threads."""
    async def runner():
        try:
            return await coro
        finally:
            await close_db_connections()

    try:
        return asyncio.run(runner())
    finally:
        get_password_service().shutdown()


@click.group()
def cli():
    """Auth Module CLI."""
    setup_logging()


@cli.command()
def init_db():
    """Run migrations and seed the configured accounts."""
    click.echo("Initializing database...")
    _run(init_database(get_password_service()))
    click.echo("Database initialized successfully!")


@cli.command()
def migrate():
    """Run database migrations to the latest version."""
    click.echo("Running database migrations...")
    command.upgrade(get_alembic_config(), "head")
    click.echo("Migrations completed successfully!")


@cli.command()
@click.option('--message', '-m', required=True, help='Migration message')
def create_migration(message: str):
    """Create a new migration file."""
    click.echo(f"Creating migration: {message}")
    command.revision(get_alembic_config(), message=message, autogenerate=True)
    click.echo("Migration created successfully!")


@cli.command()
def current():
    """Show current migration version."""
    command.current(get_alembic_config(), verbose=True)


@cli.command()
def history():
    """Show migration history."""
    command.history(get_alembic_config(), verbose=True)


@cli.command()
@click.option('--revision', '-r', default="-1", help='Revision to downgrade to')
@click.confirmation_option(prompt="Are you sure you want to downgrade the database?")
def downgrade(revision: str):
    """Downgrade database to a previous migration."""
    click.echo(f"Downgrading to revision: {revision}")
    command.downgrade(get_alembic_config(), revision)
    click.echo("Downgrade completed successfully!")


@cli.command()
@click.option('--username', '-u', required=True, help='Unique username (3-50 characters)')
@click.option('--email', '-e', required=True, help='Unique email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option(
    '--user-type',
    type=click.Choice([user_type.value for user_type in UserType]),
    default=UserType.END_USER.value,
    show_default=True,
    help='Account role',
)
def create_user(username: str, email: str, password: str, user_type: str):
    """Create a user account."""
    if not 3 <= len(username) <= 50:
        raise click.BadParameter("must be 3-50 characters", param_hint="--username")
    if "@" not in email or len(email) > 100:
        raise click.BadParameter("must be a valid address of at most 100 characters", param_hint="--email")

    user = _run(
        ensure_user(
            get_password_service(),
            username=username,
            email=email,
            password=password,
            user_type=UserType(user_type),
        )
    )
    if user is None:
        click.echo(f"✗ Username '{username}' or email '{email}' is already taken")
        raise SystemExit(1)
    click.echo(f"✓ Created {user.user_type.value} '{user.username}' with id {user.id}")


@cli.command()
def check_db():
    """Check database connectivity and health."""
    click.echo("Checking database health...")

    async def check():
        if not await check_database_health():
            click.echo("✗ Database connection failed")
            return 1

        click.echo("✓ Database connection is healthy")
        info = await get_database_info()
        click.echo("\nUsers by role:")
        for user_type, count in info["users"].items():
            click.echo(f"  - {user_type}: {count}")
        return 0

    raise SystemExit(_run(check()))


@cli.command()
def show_config():
    """Display current configuration settings."""
    settings = get_settings()

    click.echo("Current configuration:")
    click.echo(f"  Environment: {settings.environment}")
    click.echo(f"  Debug: {settings.debug}")
    click.echo(f"  Database URL: {settings.database_url}")
    click.echo(f"  JWT Algorithm: {settings.jwt_algorithm}")
    click.echo(f"  JWT Issuer / Audience: {settings.jwt_issuer} / {settings.jwt_audience}")
    click.echo(f"  Access token expire: {settings.jwt_access_token_expire_minutes} minutes")
    click.echo(f"  Remember-me refresh token: {settings.remember_me_refresh_token_days} days")
    click.echo(f"  Rotated refresh token: {settings.rotated_refresh_token_days} days")
    click.echo(f"  BCrypt rounds: {settings.bcrypt_rounds}")


if __name__ == "__main__":
    cli()
