"""Scheduled-maintenance CLI commands: report and notification cleanup."""

import typer
from rich.console import Console

from src.app.api.utils.app_startup import configure_logging
from src.app.core.errors import ApiError
from src.app.core.services import get_db_service
from src.app.core.services.notification import NotificationService
from src.app.core.services.report import run_cleanup

console = Console()

reports_app = typer.Typer(help="Analytical report maintenance")
notifications_app = typer.Typer(help="Notification maintenance")


@reports_app.command("cleanup")
def cleanup_reports() -> None:
    """Delete analytical reports whose expiry date has passed."""
    configure_logging(console=False)
    removed = run_cleanup(get_db_service())
    console.print(f"[green]✅ Removed {removed} expired report(s)[/green]")


@notifications_app.command("cleanup")
def cleanup_notifications(
    days: int | None = typer.Option(
        None, "--days", "-d", help="Retention in days (defaults to the configured value)"
    ),
) -> None:
    """Permanently remove notifications deleted more than DAYS ago."""
    configure_logging(console=False)
    try:
        with get_db_service().session_scope() as session:
            purged = NotificationService(session).cleanup(days)
    except ApiError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]✅ Purged {purged} notification(s)[/green]")
