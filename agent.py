#!/usr/bin/env python3
"""
Foreclosure Case Manager

Main CLI interface. Provides commands for:
- Document templates
- Document generation (preview, PDF, Word)
- CSV reports
- Dashboard users
- The web dashboard
"""
import logging
import sys

import click
import psycopg2
from rich.console import Console
from rich.logging import RichHandler

from commands.dashboard import dashboard_cmd
from commands.documents import documents
from commands.reports import reports
from commands.templates_cmd import templates
from commands.users import users
from documents import DocumentError


console = Console()


# ============================================================================
# CLI Group
# ============================================================================

@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """
    Foreclosure Case Manager

    Merge case data into document templates, export PDFs and Word files,
    and download reports for your firm's foreclosure files.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


cli.add_command(templates)
cli.add_command(documents)
cli.add_command(reports)
cli.add_command(users)
cli.add_command(dashboard_cmd)


# ============================================================================
# Main Entry Point
# ============================================================================

def main():
    """Main entry point."""
    try:
        cli(standalone_mode=True)
    except (DocumentError, psycopg2.Error, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
