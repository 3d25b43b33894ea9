"""Dashboard command for launching the web interface."""

import click
from rich.console import Console

console = Console()


@click.command("dashboard")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--init-db", is_flag=True, help="Create database tables before starting")
def dashboard_cmd(host: str, port: int, reload: bool, init_db: bool):
    """Launch the web dashboard."""
    from dashboard.app import run_server

    if init_db:
        from db import ensure_all_tables
        ensure_all_tables()
        console.print("[green]Database tables ready[/green]")

    console.print("\n[bold]Starting Foreclosure Case Manager...[/bold]")
    console.print(f"Open [link=http://{host}:{port}]http://{host}:{port}[/link] in your browser\n")

    run_server(host=host, port=port, reload=reload)
