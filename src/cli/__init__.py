"""Main CLI application module."""

import typer

from .db_commands import db_app
from .maintenance_commands import notifications_app, reports_app
from .user_commands import users_app

# Create the main CLI application
app = typer.Typer(
    help="Storefront API CLI - database and maintenance tasks",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(db_app, name="db")
app.add_typer(reports_app, name="reports")
app.add_typer(notifications_app, name="notifications")
app.add_typer(users_app, name="users")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
