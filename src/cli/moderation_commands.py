"""Moderation CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.muslimhunt.core.services import DbSessionService
from src.muslimhunt.core.services.moderation_service import ModerationService
from src.muslimhunt.core.timeago import format_time_ago

console = Console()

moderation_app = typer.Typer(help="Review submissions waiting for approval")


@moderation_app.command("pending")
def pending(
    query: str = typer.Option("", "--query", "-q", help="Filter threads by title, author or category"),
) -> None:
    """Show unapproved products and threads, oldest first."""
    with DbSessionService().session_scope() as db:
        queue = ModerationService(db).pending(query or None)

    if not queue.products and not queue.threads:
        console.print("[green]Nothing waiting for review[/green]")
        return

    products = Table(title=f"Pending products ({len(queue.products)})")
    products.add_column("ID", style="cyan")
    products.add_column("Name", style="green")
    products.add_column("Category", style="blue")
    products.add_column("Submitted", style="magenta")
    for product in queue.products:
        products.add_row(
            product.id, product.name, product.category, format_time_ago(product.created_at)
        )
    console.print(products)

    threads = Table(title=f"Pending threads ({len(queue.threads)})")
    threads.add_column("ID", style="cyan")
    threads.add_column("Title", style="green")
    threads.add_column("Author", style="blue")
    threads.add_column("Category", style="yellow")
    threads.add_column("Submitted", style="magenta")
    for item in queue.threads:
        threads.add_row(
            item.thread.id,
            item.thread.title,
            item.author.username if item.author else "-",
            item.category.name if item.category else "-",
            format_time_ago(item.thread.created_at),
        )
    console.print(threads)
