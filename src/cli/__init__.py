"""``muslimhunt`` command line: run the API and look after its data."""

import typer
from rich.console import Console

from .db_commands import db_app
from .moderation_commands import moderation_app
from .user_commands import users_app

console = Console()

app = typer.Typer(
    help="Muslim Hunt administration",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(db_app, name="db")
app.add_typer(users_app, name="users")
app.add_typer(moderation_app, name="moderation")


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind address [default: app.host from config]"),
    port: int | None = typer.Option(None, help="Port [default: app.port from config]"),
    reload: bool = typer.Option(False, help="Restart when source files change"),
    log_level: str = typer.Option("info", help="uvicorn log level"),
) -> None:
    """Serve the HTTP and websocket API."""
    import uvicorn

    from src.muslimhunt.runtime.context import get_config

    config = get_config().app
    host = host or config.host
    port = port or config.port
    console.print(f"[bold green]Muslim Hunt[/bold green] on [blue]http://{host}:{port}[/blue] ({config.environment})")
    uvicorn.run(
        "src.muslimhunt.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        access_log=False,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
