"""
Document Generation

Runs the template pipeline for a case:

    resolve variables -> substitute -> (flatten -> paginate -> draw)

Preview and print views stop after substitution and show the merged HTML as
is. PDF and Word exports flatten the HTML first. Drafts are saved through
db.documents and can only move forward from Draft to Finalized here.
"""
import logging
import re
from datetime import date
from typing import Optional

from jinja2 import Environment

import config
from formatters import DEFAULT_FORMATTER, Formatter
from html_flatten import flatten
from models import Case, Document, DocumentStatus, DocumentType
from pdf_renderer import PageConfig, render_case_summary
from pdf_renderer import render_pdf as draw_pdf
from substitution import substitute, unresolved_placeholders
from templates import TemplateManager
from variables import resolve

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """Base class for document generation errors."""


class RenderError(DocumentError):
    """A document could not be rendered to PDF or Word."""


class DocumentStatusError(DocumentError):
    """A status change the document lifecycle does not allow."""


PRINT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
<style>
  @page { size: letter; margin: 1in; }
  body { font-family: {{ font }}; font-size: 12pt; line-height: 1.5; color: #000; }
  h1 { font-size: 24pt; } h2 { font-size: 20pt; } h3 { font-size: 16pt; }
</style>
</head>
<body onload="window.print()">
{{ content | safe }}
</body>
</html>
"""

_jinja = Environment(autoescape=True)


def _document_type_label(document_type) -> str:
    if isinstance(document_type, DocumentType):
        return document_type.value
    return str(document_type or DocumentType.OTHER.value)


class DocumentGenerator:
    """
    Generates documents for cases from editor content or stored templates.

    Usage:
        generator = DocumentGenerator()
        content = generator.initial_content("Demand Letter")
        pdf_bytes = generator.render_pdf(content, case, DocumentType.DEMAND_LETTER)
    """

    def __init__(
        self,
        templates: Optional[TemplateManager] = None,
        formatter: Optional[Formatter] = None,
        page_config: Optional[PageConfig] = None,
    ):
        self._templates = templates
        self.formatter = formatter or DEFAULT_FORMATTER
        self.page_config = page_config or PageConfig()

    @property
    def templates(self) -> TemplateManager:
        if self._templates is None:
            self._templates = TemplateManager()
        return self._templates

    # ── Editor content ───────────────────────────────────────

    def initial_content(self, template_name: Optional[str] = None) -> str:
        """Starting editor content: the named template, or a placeholder paragraph."""
        if template_name:
            template = self.templates.get_template(template_name)
            if template is not None:
                return template.content
            logger.warning("Template %r not found; using default content", template_name)
        return config.DEFAULT_DOCUMENT_CONTENT

    def default_title(self, document_type, case: Optional[Case] = None,
                      today: Optional[date] = None) -> str:
        """Title as '<type> - <file number> - YYYY-MM-DD'."""
        today = today or date.today()
        file_number = case.file_number if case else ""
        return f"{_document_type_label(document_type)} - {file_number} - {today.isoformat()}"

    def merge(self, content: str, case: Optional[Case], today: Optional[date] = None) -> str:
        """Substitute resolved case variables into content."""
        mapping = resolve(case, formatter=self.formatter, today=today)
        merged = substitute(content, mapping)
        missing = unresolved_placeholders(merged, mapping)
        if missing:
            logger.debug("Unresolved placeholders left in document: %s", ", ".join(missing))
        return merged

    # ── Views ────────────────────────────────────────────────

    def preview(self, content: str, case: Optional[Case], today: Optional[date] = None) -> str:
        """Merged HTML for the in-app preview."""
        return self.merge(content, case, today=today)

    def print_view(self, content: str, case: Optional[Case], title: str = "",
                   font: str = "'Times New Roman', serif", today: Optional[date] = None) -> str:
        """A standalone HTML page of the merged content that opens the print dialog."""
        merged = self.merge(content, case, today=today)
        return _jinja.from_string(PRINT_TEMPLATE).render(title=title, font=font, content=merged)

    # ── Exports ──────────────────────────────────────────────

    def render_pdf(self, content: str, case: Case, document_type=DocumentType.OTHER,
                   title: str = "", today: Optional[date] = None) -> bytes:
        """
        Merge, flatten and paginate content into PDF bytes.

        Content that is empty once flattened produces the fixed case summary
        instead.

        Raises:
            RenderError: if layout or drawing fails
        """
        label = _document_type_label(document_type)
        try:
            flat = flatten(self.merge(content, case, today=today))
            if not flat.text:
                logger.info("No document content for case %s; rendering case summary", case.file_number)
                return render_case_summary(case, label, self.page_config)
            return draw_pdf(flat.text, flat.spans, self.page_config, title=title)
        except Exception as e:
            raise RenderError(f"Could not render {label} PDF for case {case.file_number}: {e}") from e

    def render_docx(self, content: str, case: Case, document_type=DocumentType.OTHER,
                    title: str = "", today: Optional[date] = None) -> bytes:
        """Merge and flatten content into a .docx."""
        from docx_export import render_docx

        label = _document_type_label(document_type)
        try:
            flat = flatten(self.merge(content, case, today=today))
            return render_docx(flat.text, flat.spans, title=title)
        except Exception as e:
            raise RenderError(f"Could not render {label} Word document for case {case.file_number}: {e}") from e

    @staticmethod
    def download_filename(title: Optional[str], case: Case, document_type=DocumentType.OTHER,
                          extension: str = "pdf") -> str:
        """Title with spaces as underscores, else Case_<file number>_<type>."""
        if title and title.strip():
            base = re.sub(r"\s+", "_", title.strip())
        else:
            base = f"Case_{case.file_number}_{_document_type_label(document_type)}"
        # Keep header-safe characters only
        base = re.sub(r"[^\w\-.]", "_", base)
        return f"{base}.{extension}"

    # ── Lifecycle ────────────────────────────────────────────

    def save_draft(self, case: Case, title: str, document_type, content: str,
                   today: Optional[date] = None) -> Document:
        """Persist merged content as a new Draft document."""
        from db.documents import create_document

        document = Document(
            id=None,
            case_id=case.id,
            title=title or self.default_title(document_type, case, today),
            type=document_type if isinstance(document_type, DocumentType) else DocumentType(document_type),
            status=DocumentStatus.DRAFT,
            content=self.merge(content, case, today=today),
        )
        return create_document(document)

    def finalize(self, document: Document) -> Document:
        """
        Draft -> Finalized. Finalizing anything else is an error.

        Raises:
            DocumentStatusError: if the document is not a Draft
        """
        from db.documents import update_document_status

        if document.status != DocumentStatus.DRAFT:
            raise DocumentStatusError(
                f"Only Draft documents can be finalized (document {document.id} is {document.status.value})"
            )
        if not update_document_status(document.id, DocumentStatus.FINALIZED):
            raise DocumentError(f"Document {document.id} not found")
        document.status = DocumentStatus.FINALIZED
        logger.info("Finalized document %s", document.id)
        return document
