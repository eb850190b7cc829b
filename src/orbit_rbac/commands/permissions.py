"""Command: orbit-rbac permissions - List the permission catalog."""

import typer
from rich.console import Console
from rich.table import Table

from orbit_rbac.commands import DATABASE_URL_OPTION, open_store
from orbit_rbac.rbac.catalog import PermissionCatalog


console = Console()


def list_permissions(
    category: str | None = typer.Option(
        None, "--category", "-c", help="Show only one category"
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """List registered permissions in registration order."""
    catalog = PermissionCatalog(open_store(database_url))
    permissions = (
        catalog.list_by_category(category) if category else catalog.list_all()
    )

    if not permissions:
        console.print("[yellow]No permissions registered.[/yellow]")
        return

    table = Table(title="Permissions", show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Category", style="green")
    table.add_column("Description")

    for p in permissions:
        table.add_row(p.id, p.category, p.description)

    console.print()
    console.print(table)
    console.print()
