"""Operator CLI for the authorization engine."""

import typer
from rich.console import Console

from orbit_rbac import __version__
from orbit_rbac.commands import check, permissions, roles, seed


console = Console()

app = typer.Typer(
    name="orbit-rbac",
    help="Seed and inspect organizations, roles and permissions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="seed")(seed.seed)
app.command(name="permissions")(permissions.list_permissions)
app.command(name="roles")(roles.list_roles)
app.command(name="check")(check.check)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """Orbit RBAC - multi-tenant role-based access control."""
    if version:
        console.print(f"[bold cyan]orbit-rbac[/bold cyan] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
