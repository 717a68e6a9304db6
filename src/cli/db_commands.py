"""Database CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.muslimhunt.runtime.init_db import init_db, seed_db

console = Console()

db_app = typer.Typer(help="Create and seed the database")


@db_app.command("init")
def init() -> None:
    """Create every table that does not exist yet."""
    try:
        init_db()
    except Exception as e:
        console.print(f"[red]Failed to initialize the database: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]Database tables created[/green]")


@db_app.command("seed")
def seed() -> None:
    """Load starter forum categories, story categories and products."""
    try:
        report = seed_db()
    except Exception as e:
        console.print(f"[red]Failed to seed the database: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Seeded rows")
    table.add_column("Kind", style="cyan")
    table.add_column("Added", style="green", justify="right")
    table.add_row("Forum categories", str(report.forum_categories))
    table.add_row("Story categories", str(report.story_categories))
    table.add_row("Products", str(report.products))
    table.add_row("Launch guide pages", str(report.launch_pages))
    table.add_row("Glossary terms", str(report.definitions))
    console.print(table)
