"""Operator CLI commands."""

import typer

from orbit_rbac.core.logging import configure_logging
from orbit_rbac.stores import create_store
from orbit_rbac.stores.base import AuthzStore


DATABASE_URL_OPTION = typer.Option(
    None,
    "--database-url",
    "-d",
    help="Database URL. Defaults to the DATABASE_URL setting.",
)


def open_store(database_url: str | None) -> AuthzStore:
    """Configure logging and open the store a command operates on."""
    configure_logging()
    return create_store(database_url=database_url)
