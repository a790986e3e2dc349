"""Mini README: Entry point CLI for running and maintaining DonationTrust.

This script exposes a Typer CLI that starts the FastAPI application with
uvicorn, prepares the database and manages admin accounts. Settings are
read from ``DONATIONTRUST_`` environment variables or a ``.env`` file.
"""

from __future__ import annotations

from datetime import timedelta

import typer
import uvicorn

from donationtrust.auth import AccessGate, TokenIssuer
from donationtrust.configuration import get_settings
from donationtrust.errors import ConstraintViolation
from donationtrust.logging_utils import configure_root_logger, level_for_environment
from donationtrust.store import RecordStore

cli = typer.Typer(help="Run and maintain the DonationTrust transparency ledger.")


def _gate() -> AccessGate:
    settings = get_settings()
    configure_root_logger(level_for_environment(settings.environment))
    store = RecordStore.from_url(settings.resolved_database_url())
    return AccessGate(
        store,
        TokenIssuer(settings.jwt_secret, ttl=timedelta(hours=settings.token_ttl_hours)),
        bcrypt_rounds=settings.bcrypt_rounds,
    )


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(level_for_environment(settings.environment))

    # 0.0.0.0 is not a navigable address, point the operator at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting DonationTrust on {effective_host}:{effective_port}.\n"
        f"Open your browser at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "donationtrust.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("init-db")
def init_db() -> None:
    """Create the schema and the configured default admin account."""

    settings = get_settings()
    gate = _gate()
    created = gate.ensure_default_admin(
        settings.default_admin_username, settings.default_admin_password
    )
    typer.echo(f"Database ready at {settings.resolved_database_url()}.")
    if created:
        typer.echo(
            f"Default admin created: {settings.default_admin_username}. Change its password."
        )


@cli.command("create-admin")
def create_admin(
    username: str = typer.Argument(..., help="Login name of the new admin."),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password to hash and store."
    ),
) -> None:
    """Add another admin account."""

    try:
        identity = _gate().create_admin(username, password)
    except ConstraintViolation as error:
        typer.echo(f"Admin '{username}' already exists.", err=True)
        raise typer.Exit(code=1) from error
    except ValueError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error
    typer.echo(f"Admin '{identity.username}' created with id {identity.id}.")


if __name__ == "__main__":
    cli()
