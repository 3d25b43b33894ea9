"""
Document Commands

Generate documents from a case, either loaded from the database by id or
read from a JSON export (camelCase fields, as the API returns them).
"""
import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from documents import DocumentGenerator, RenderError
from models import Case, DocumentType
from variables import resolve


console = Console()

DOCUMENT_TYPES = [t.value for t in DocumentType]


def load_case(case_ref: str) -> Case:
    """A case from a JSON file path, else from the database by id."""
    path = Path(case_ref)
    if path.suffix == ".json" and path.exists():
        with open(path, "r") as f:
            return Case.from_dict(json.load(f))

    from db.cases import get_case

    case = get_case(case_ref)
    if case is None:
        raise click.ClickException(f"Case '{case_ref}' not found")
    return case


def _content(generator: DocumentGenerator, template: Optional[str], content_file: Optional[str]) -> str:
    if content_file:
        return Path(content_file).read_text()
    return generator.initial_content(template)


@click.group()
def documents():
    """Generate case documents."""
    pass


@documents.command("variables")
@click.argument("case_ref")
def documents_variables(case_ref: str):
    """Show every placeholder and its value for a case."""
    case = load_case(case_ref)
    mapping = resolve(case)

    table = Table(title=f"Variables for {case.file_number}")
    table.add_column("Placeholder", style="cyan")
    table.add_column("Value")
    for token, value in sorted(mapping.items()):
        table.add_row(token, value)

    console.print(table)


@documents.command("preview")
@click.argument("case_ref")
@click.option("--template", "-t", help="Template name")
@click.option("--content", "content_file", type=click.Path(exists=True, dir_okay=False),
              help="HTML file to use instead of a template")
def documents_preview(case_ref: str, template: Optional[str], content_file: Optional[str]):
    """Print the merged HTML for a case."""
    generator = DocumentGenerator()
    case = load_case(case_ref)
    console.print(generator.preview(_content(generator, template, content_file), case),
                  markup=False, highlight=False)


@documents.command("pdf")
@click.argument("case_ref")
@click.option("--template", "-t", help="Template name (defaults to the document type)")
@click.option("--content", "content_file", type=click.Path(exists=True, dir_okay=False),
              help="HTML file to use instead of a template")
@click.option("--type", "document_type", type=click.Choice(DOCUMENT_TYPES), default=DocumentType.OTHER.value,
              help="Document type")
@click.option("--title", default=None, help="Document title")
@click.option("--docx", "as_docx", is_flag=True, help="Write a Word document instead")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file")
def documents_pdf(case_ref: str, template: Optional[str], content_file: Optional[str], document_type: str,
                  title: Optional[str], as_docx: bool, output: Optional[str]):
    """Render a case document to PDF (or Word)."""
    generator = DocumentGenerator()
    case = load_case(case_ref)
    doc_type = DocumentType(document_type)
    title = title or generator.default_title(doc_type, case)
    content = _content(generator, template or doc_type.value, content_file)

    try:
        if as_docx:
            body = generator.render_docx(content, case, doc_type, title=title)
        else:
            body = generator.render_pdf(content, case, doc_type, title=title)
    except RenderError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    extension = "docx" if as_docx else "pdf"
    target = Path(output or generator.download_filename(title, case, doc_type, extension=extension))
    target.write_bytes(body)
    console.print(f"[green]Wrote {target} ({len(body):,} bytes)[/green]")
