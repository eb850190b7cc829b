"""Command: orbit-rbac roles - List an organization's roles."""

import typer
from rich.console import Console
from rich.table import Table

from orbit_rbac.commands import DATABASE_URL_OPTION, open_store
from orbit_rbac.core.errors import RbacError
from orbit_rbac.rbac.organizations import OrganizationStore


console = Console()


def list_roles(
    organization_slug: str = typer.Argument(..., help="Organization slug"),
    include_deleted: bool = typer.Option(
        False, "--include-deleted", help="Also show soft-deleted roles"
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """List the roles of an organization with their permission counts."""
    store = open_store(database_url)

    try:
        organization = OrganizationStore(store).get_by_slug(organization_slug)
    except RbacError as e:
        console.print(f"[red]Error:[/red] {e.message}: {organization_slug}")
        raise typer.Exit(1) from e

    roles = store.list_roles(organization.id, include_deleted=include_deleted)
    if not roles:
        console.print(f"[yellow]No roles in {organization.name}.[/yellow]")
        return

    table = Table(title=f"Roles of {organization.name}", show_header=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Department")
    table.add_column("Permissions", justify="right", style="green")
    if include_deleted:
        table.add_column("Status", no_wrap=True)

    for role in roles:
        row = [
            role.name,
            role.department or "",
            str(len(store.role_permission_ids(role.id))),
        ]
        if include_deleted:
            row.append("[red]deleted[/red]" if role.is_deleted else "")
        table.add_row(*row)

    console.print()
    console.print(table)
    console.print()
