"""
Template Management Commands

Commands for initializing, listing, and displaying document templates.
"""
import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from substitution import find_placeholders
from templates import TemplateManager, create_default_templates


console = Console()


@click.group()
def templates():
    """Manage document templates."""
    pass


@templates.command("init")
def templates_init():
    """Create the default templates that are missing."""
    console.print("Creating default templates...")
    manager = create_default_templates()
    console.print("[green]Default templates ready![/green]")

    for t in manager.list_templates():
        console.print(f"  - {t.name} (id {t.id})")


@templates.command("list")
def templates_list():
    """List all templates."""
    manager = TemplateManager()
    items = manager.list_templates()

    if not items:
        console.print("[yellow]No templates found. Run 'templates init' to create defaults.[/yellow]")
        return

    table = Table(title="Document Templates")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Placeholders", justify="right")

    for t in items:
        table.add_row(str(t.id), t.name, t.description[:40], str(len(find_placeholders(t.content))))

    console.print(table)


@templates.command("show")
@click.argument("name")
def templates_show(name: str):
    """Show template content."""
    manager = TemplateManager()
    template = manager.get_template(name)

    if not template:
        console.print(f"[red]Template '{name}' not found[/red]")
        raise SystemExit(1)

    console.print(Panel(
        f"Description: {template.description}\n"
        f"Placeholders: {', '.join(find_placeholders(template.content)) or '-'}",
        title=f"Template: {name}",
    ))
    console.print(template.content, markup=False, highlight=False)
