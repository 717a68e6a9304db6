"""Member management CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.muslimhunt.core.services import DbSessionService
from src.muslimhunt.entities.core.profile import ProfileRepository

console = Console()

users_app = typer.Typer(help="Manage members")


@users_app.command("list")
def list_users(
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum number of members to show"),
) -> None:
    """List members with their follower counts."""
    with DbSessionService().session_scope() as db:
        profiles = ProfileRepository(db).list_all()[:limit]

    if not profiles:
        console.print("[yellow]No members found[/yellow]")
        return

    table = Table(title="Members")
    table.add_column("ID", style="cyan")
    table.add_column("Username", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Followers", style="magenta", justify="right")
    table.add_column("Admin", style="yellow")
    for profile in profiles:
        table.add_row(
            profile.id,
            profile.username,
            profile.email or "",
            str(profile.followers_count),
            "yes" if profile.is_admin else "",
        )
    console.print(table)


@users_app.command("make-admin")
def make_admin(
    email: str = typer.Argument(..., help="Email of the member to promote"),
    revoke: bool = typer.Option(False, "--revoke", help="Remove admin rights instead"),
) -> None:
    """Grant (or revoke) moderation rights."""
    with DbSessionService().session_scope() as db:
        repository = ProfileRepository(db)
        profile = repository.get_by_email(email)
        if profile is None:
            console.print(f"[red]No member with email '{email}'[/red]")
            raise typer.Exit(code=1)
        repository.set_admin(profile.id, not revoke)

    action = "revoked from" if revoke else "granted to"
    console.print(f"[green]Admin rights {action} {email}[/green]")
