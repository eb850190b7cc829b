"""Command: orbit-rbac seed - Seed the catalog, organization and system roles."""

from uuid import UUID

import typer
from rich.console import Console

from orbit_rbac.commands import DATABASE_URL_OPTION, open_store
from orbit_rbac.core.errors import RbacError
from orbit_rbac.rbac.seeding import bootstrap


console = Console()


def seed(
    owner: UUID | None = typer.Option(
        None, "--owner", "-o", help="User id to make owner and super administrator"
    ),
    name: str | None = typer.Option(
        None, "--name", "-n", help="Organization name to seed"
    ),
    slug: str | None = typer.Option(
        None, "--slug", "-s", help="Organization slug to seed"
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Seed the permission catalog, an organization and its system roles.

    Safe to run repeatedly: existing data is left untouched.
    """
    store = open_store(database_url)

    try:
        report = bootstrap(
            store,
            organization_name=name,
            organization_slug=slug,
            owner_id=owner,
        )
    except RbacError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    organization = report.organization
    console.print(
        f"[green]✓[/green] Organization: {organization.name} "
        f"([cyan]{organization.slug}[/cyan], {organization.id})"
    )

    if report.permissions_created:
        console.print(
            f"[green]✓[/green] Registered "
            f"{len(report.permissions_created)} permissions"
        )
    else:
        console.print("[dim]Permission catalog already seeded[/dim]")

    if report.roles_created:
        console.print(
            f"[green]✓[/green] Created roles: {', '.join(report.roles_created)}"
        )
    else:
        console.print("[dim]System roles already present[/dim]")

    if report.owner_id is not None:
        console.print(f"[green]✓[/green] Owner: {report.owner_id}")
