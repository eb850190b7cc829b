"""Command: orbit-rbac check - Ask whether a user holds a permission."""

from uuid import UUID

import typer
from rich.console import Console

from orbit_rbac.commands import DATABASE_URL_OPTION, open_store
from orbit_rbac.core.errors import RbacError
from orbit_rbac.rbac.organizations import OrganizationStore
from orbit_rbac.rbac.resolver import AuthorizationResolver


console = Console()


def check(
    user_id: UUID = typer.Argument(..., help="User id"),
    organization_slug: str = typer.Argument(..., help="Organization slug"),
    permission: str = typer.Argument(..., help="Permission id, e.g. users.view"),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Check a permission. Exits 0 when allowed and 1 when denied."""
    store = open_store(database_url)

    try:
        organization = OrganizationStore(store).get_by_slug(organization_slug)
    except RbacError as e:
        console.print(f"[red]Error:[/red] {e.message}: {organization_slug}")
        raise typer.Exit(2) from e

    if AuthorizationResolver(store).authorize(user_id, organization.id, permission):
        console.print(f"[green]allowed[/green] {permission}")
        return

    console.print(f"[red]denied[/red] {permission}")
    raise typer.Exit(1)
