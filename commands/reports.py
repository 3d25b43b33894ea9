"""CSV report export commands."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from reports import REPORT_KINDS, build_report, to_csv

console = Console()


@click.group()
def reports():
    """Tabular reports."""
    pass


@reports.command("export")
@click.argument("kind", type=click.Choice(REPORT_KINDS))
@click.option("--days", default=30, help="Look-ahead window for the deadlines report")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write CSV to this file")
def reports_export(kind: str, days: int, output: Optional[str]):
    """Export a report as CSV (to stdout unless --output is given)."""
    headers, rows = build_report(kind, days=days)
    csv_text = to_csv(headers, rows)

    if output:
        Path(output).write_text(csv_text)
        console.print(f"[green]Wrote {len(rows)} row(s) to {output}[/green]")
    else:
        click.echo(csv_text, nl=False)
