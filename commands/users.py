"""User management commands."""

import click
from rich.console import Console
from rich.table import Table

console = Console()

ROLE_CHOICES = ("admin", "manager", "staff")


@click.group()
def users():
    """Manage dashboard users."""
    pass


@users.command("add")
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="User password")
@click.option("--email", default=None, help="User email address")
@click.option("--role", type=click.Choice(ROLE_CHOICES), default="staff", help="User role")
def users_add(username: str, password: str, email: str, role: str):
    """Create a dashboard user (or reset an existing one)."""
    from dashboard.auth import create_user

    if create_user(username, password, email, role):
        console.print(f"[green]User '{username}' saved (role: {role})[/green]")
    else:
        console.print(f"[red]Failed to save user '{username}'.[/red]")
        raise SystemExit(1)


@users.command("list")
def users_list():
    """List all dashboard users."""
    from dashboard.auth import list_users

    users_data = list_users()

    if not users_data:
        console.print("[yellow]No users found. Create one with: users add <username>[/yellow]")
        return

    table = Table(title="Dashboard Users")
    table.add_column("Username")
    table.add_column("Email")
    table.add_column("Role")
    table.add_column("Active")
    table.add_column("Last Login")

    for user in users_data:
        status = "[green]Yes[/green]" if user["is_active"] else "[red]No[/red]"
        last_login = str(user["last_login"])[:19] if user["last_login"] else "Never"
        table.add_row(user["username"], user["email"] or "-", user["role"], status, last_login)

    console.print(table)
