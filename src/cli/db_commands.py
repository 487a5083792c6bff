"""Database schema CLI commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm

from src.app.api.utils.app_startup import configure_logging
from src.app.core.services.database.db_manage import DbManageService
from src.app.runtime.context import get_config

console = Console()

db_app = typer.Typer(help="Manage the database schema")


@db_app.command("init")
def init() -> None:
    """Create every table that does not exist yet."""
    configure_logging(console=False)
    DbManageService().create_all()
    console.print(f"[green]✅ Database initialized at {get_config().database.url}[/green]")


@db_app.command("drop")
def drop(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Drop every table. Destroys all data."""
    if get_config().app.environment == "production":
        console.print("[red]❌ Refusing to drop tables in production[/red]")
        raise typer.Exit(code=1)
    if not force and not Confirm.ask("Drop all tables and data?"):
        console.print("[yellow]Cancelled[/yellow]")
        return
    configure_logging(console=False)
    DbManageService().drop_all()
    console.print("[green]✅ All tables dropped[/green]")
