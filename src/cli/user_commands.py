"""User administration CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.app.api.utils.app_startup import configure_logging
from src.app.core.errors import ApiError
from src.app.core.models import PageParams
from src.app.core.services import UserManagementService, get_db_service

console = Console()

users_app = typer.Typer(help="Manage store user accounts")


@users_app.command("list")
def list_users(
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    limit: int = typer.Option(20, "--limit", "-l", help="Users per page"),
) -> None:
    """List registered users."""
    configure_logging(console=False)
    params = PageParams.of(page, limit)
    with get_db_service().session_scope() as session:
        users, total = UserManagementService(session).list_users(params)

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Email", style="blue")
    table.add_column("Name", style="magenta")
    table.add_column("Role", style="yellow")
    table.add_column("Created", style="white")
    for user in users:
        table.add_row(
            user.id, user.email, user.name or "", user.role.value, user.created_at.isoformat()
        )

    console.print(table)
    console.print(f"\n[green]Showing {len(users)} of {total} users[/green]")


@users_app.command("promote")
def promote(email: str = typer.Argument(..., help="Email of the user to make an admin")) -> None:
    """Grant the ADMIN role to an existing user."""
    configure_logging(console=False)
    try:
        with get_db_service().session_scope() as session:
            user = UserManagementService(session).promote(email)
    except ApiError as e:
        console.print(f"[red]❌ {e.message}: {email}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]✅ {user.email} is now {user.role.value}[/green]")
