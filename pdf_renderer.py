"""
Paginated PDF Rendering

Lays flattened document text out on fixed-size pages and draws it with the
reportlab canvas. Layout (paginate) is separate from drawing (draw_pages) so
page breaks can be checked without producing PDF bytes.

Coordinates inside the layout are measured from the top margin downwards;
they are converted to reportlab's bottom-left origin only when drawing.
"""
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from reportlab.lib import colors
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

import config
from html_flatten import FormatSpan
from models import Case

logger = logging.getLogger(__name__)

# Built-in PDF font families: (regular, bold, italic, bold italic)
FONT_FAMILIES = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}

_SIZE_RE = re.compile(r"\s*(\d+)")
_EPSILON = 1e-6


@dataclass
class PageConfig:
    """Page geometry and default typography, in points."""
    width: float = config.PAGE_WIDTH
    height: float = config.PAGE_HEIGHT
    margin_left: float = config.PAGE_MARGIN
    margin_right: float = config.PAGE_MARGIN
    margin_top: float = config.PAGE_MARGIN
    margin_bottom: float = config.PAGE_MARGIN
    line_height: float = config.LINE_HEIGHT
    blank_line_height: float = config.BLANK_LINE_HEIGHT
    font: str = config.DEFAULT_FONT
    font_size: int = config.DEFAULT_FONT_SIZE

    @property
    def usable_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def usable_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom


@dataclass
class LineStyle:
    family: str = "Helvetica"
    bold: bool = False
    italic: bool = False
    underline: bool = False
    size: int = 12
    color: str = "black"
    align: str = "left"

    @property
    def font_name(self) -> str:
        regular, bold, italic, bold_italic = FONT_FAMILIES.get(self.family, FONT_FAMILIES["Helvetica"])
        if self.bold and self.italic:
            return bold_italic
        if self.bold:
            return bold
        if self.italic:
            return italic
        return regular


@dataclass
class PlacedLine:
    """A physical line: text, style, vertical position and offset into the source text."""
    text: str
    style: LineStyle
    y: float
    offset: int


@dataclass
class Page:
    lines: List[PlacedLine] = field(default_factory=list)


# =========================================================================
# Formatting lookup
# =========================================================================

def find_span(spans: Sequence[FormatSpan], offset: int) -> Optional[FormatSpan]:
    """First span (in list order) whose range contains offset."""
    for span in spans:
        if span.contains(offset):
            return span
    return None


def font_family(font: Optional[str], default: str = "Helvetica") -> str:
    """Map a CSS font-family list onto one of the built-in PDF families."""
    if not font:
        return default
    name = font.lower()
    if "courier" in name or "mono" in name:
        return "Courier"
    if "times" in name or "georgia" in name or ("serif" in name and "sans-serif" not in name):
        return "Times"
    if any(sans in name for sans in ("arial", "helvetica", "calibri", "verdana", "tahoma", "trebuchet", "sans")):
        return "Helvetica"
    return default


def parse_size(size: Optional[str]) -> Optional[int]:
    """Leading integer of a CSS size ("14pt" -> 14); None when unparseable."""
    if size is None:
        return None
    match = _SIZE_RE.match(str(size))
    if not match:
        return None
    value = int(match.group(1))
    return value if value > 0 else None


def style_for(span: Optional[FormatSpan], previous: LineStyle, page: PageConfig) -> LineStyle:
    """
    Style for a physical line.

    Without a span everything resets to the page defaults. With a span, an
    unparseable size keeps the previous line's size and a missing colour
    resets to black.
    """
    default_family = font_family(page.font)
    if span is None:
        return LineStyle(family=default_family, size=page.font_size)

    size = parse_size(span.size)
    align = (span.align or "left").lower()
    return LineStyle(
        family=font_family(span.font, default_family),
        bold=bool(span.bold),
        italic=bool(span.italic),
        underline=bool(span.underline),
        size=size if size is not None else previous.size,
        color=span.color or "black",
        align=align if align in ("left", "center", "right") else "left",
    )


# =========================================================================
# Wrapping and layout
# =========================================================================

def wrap_line(text: str, font_name: str, size: float, max_width: float) -> List[Tuple[str, int]]:
    """
    Greedy word wrap of one logical line.

    Returns (physical line, characters consumed) pairs. A physical line that
    breaks at a space consumes that space as well, so the consumed counts add
    up to len(text) and source offsets stay exact. Words wider than the line
    are split mid-word.
    """
    pieces = []
    start = 0
    while start < len(text):
        if stringWidth(text[start:], font_name, size) <= max_width:
            pieces.append((text[start:], len(text) - start))
            break

        # text[start:end] is the longest prefix that fits
        end = start
        while end < len(text) and stringWidth(text[start:end + 1], font_name, size) <= max_width:
            end += 1

        break_at = text.rfind(" ", start + 1, end + 1)
        if break_at > start:
            pieces.append((text[start:break_at], break_at - start + 1))
            start = break_at + 1
        else:
            end = max(end, start + 1)
            pieces.append((text[start:end], end - start))
            start = end
    return pieces


class _Layout:
    def __init__(self, page: PageConfig):
        self.config = page
        self.pages: List[Page] = [Page()]
        self.used = 0.0

    def advance(self, amount: float):
        self.used += amount

    def place(self, text: str, style: LineStyle, offset: int):
        if self.used + self.config.line_height > self.config.usable_height + _EPSILON:
            self.pages.append(Page())
            self.used = 0.0
        self.pages[-1].lines.append(PlacedLine(text=text, style=style, y=self.used, offset=offset))
        self.used += self.config.line_height


def paginate(text: str, spans: Sequence[FormatSpan], page: Optional[PageConfig] = None) -> List[Page]:
    """
    Lay text out onto pages.

    Each logical line (split on newline) is wrapped to the usable width for
    the font and size in effect at its first character; each physical line
    then takes its formatting from the first span containing its offset.
    Blank logical lines only move the cursor down. A new page starts when the
    next line would overflow the usable height.
    """
    page = page or PageConfig()
    layout = _Layout(page)
    style = style_for(None, LineStyle(), page)
    offset = 0

    for logical in text.split("\n"):
        if not logical.strip():
            layout.advance(page.blank_line_height)
            offset += len(logical) + 1
            continue

        wrap_style = style_for(find_span(spans, offset), style, page)
        for physical, consumed in wrap_line(logical, wrap_style.font_name, wrap_style.size, page.usable_width):
            style = style_for(find_span(spans, offset), style, page)
            layout.place(physical, style, offset)
            offset += consumed
        offset += 1  # the newline

    return layout.pages


# =========================================================================
# Drawing
# =========================================================================

def _to_color(value: str):
    try:
        return colors.toColor(value)
    except (ValueError, TypeError):
        return colors.black


def _line_x(line: PlacedLine, width: float, page: PageConfig) -> float:
    if line.style.align == "center":
        return page.margin_left + (page.usable_width - width) / 2
    if line.style.align == "right":
        return page.width - page.margin_right - width
    return page.margin_left


def draw_pages(pages: Sequence[Page], page: Optional[PageConfig] = None, title: str = "") -> bytes:
    """Draw laid-out pages with reportlab and return the PDF bytes."""
    page = page or PageConfig()
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(page.width, page.height))
    if title:
        pdf.setTitle(title)

    for number, laid_out in enumerate(pages):
        if number:
            pdf.showPage()
        for line in laid_out.lines:
            style = line.style
            pdf.setFont(style.font_name, style.size)
            pdf.setFillColor(_to_color(style.color))
            width = stringWidth(line.text, style.font_name, style.size)
            x = _line_x(line, width, page)
            baseline = page.height - page.margin_top - line.y - page.line_height * 0.8
            pdf.drawString(x, baseline, line.text)
            if style.underline:
                pdf.setStrokeColor(_to_color(style.color))
                pdf.setLineWidth(0.5)
                pdf.line(x, baseline - 1.5, x + width, baseline - 1.5)

    pdf.save()
    return buffer.getvalue()


def render_pdf(text: str, spans: Sequence[FormatSpan], page: Optional[PageConfig] = None,
               title: str = "") -> bytes:
    """Paginate and draw flattened content."""
    page = page or PageConfig()
    pages = paginate(text, spans, page)
    logger.debug("Rendered %d characters onto %d page(s)", len(text), len(pages))
    return draw_pages(pages, page, title=title)


# =========================================================================
# Fixed-layout case summary
# =========================================================================

def case_summary_lines(case: Case, document_type: str) -> List[Tuple[str, int]]:
    """(text, font size) rows for the summary layout, notes excluded."""
    rows = [(f"Document Type: {document_type}", 18)]
    rows.append((f"Case File Number: {case.file_number}", 12))
    if case.property is not None:
        rows.append((f"Property Address: {case.property.street}, {case.property.city}", 12))
    for party in case.parties:
        rows.append((f"{party.type}: {party.name}", 12))
    if case.mortgage is not None:
        mortgage = case.mortgage
        rows.append((f"Mortgage Registration Number: {mortgage.registration_number}", 12))
        if mortgage.principal is not None:
            rows.append((f"Principal Amount: {mortgage.principal:,.2f}", 12))
        if mortgage.current_balance is not None:
            rows.append((f"Current Balance: {mortgage.current_balance:,.2f}", 12))
    rows.append((f"Status: {case.status.value}", 12))
    rows.append((f"Generated: {date.today():%B} {date.today().day}, {date.today().year}", 10))
    return rows


def render_case_summary(case: Case, document_type: str, page: Optional[PageConfig] = None) -> bytes:
    """
    Fixed-layout summary of a case's key fields.

    Used when there is no template content. Rows are placed sequentially at
    the left margin; only the notes block can run onto further pages.
    """
    page = page or PageConfig()
    layout = _Layout(page)
    base = LineStyle(family=font_family(page.font), size=page.font_size)

    for text, size in case_summary_lines(case, document_type):
        layout.place(text, LineStyle(family=base.family, size=size, bold=size > 12), 0)

    if case.notes:
        layout.advance(page.blank_line_height)
        layout.place("Notes:", LineStyle(family=base.family, size=page.font_size, bold=True), 0)
        for note_line in case.notes.split("\n"):
            if not note_line.strip():
                layout.advance(page.blank_line_height)
                continue
            for physical, _ in wrap_line(note_line, base.font_name, base.size, page.usable_width):
                layout.place(physical, base, 0)

    return draw_pages(layout.pages, page, title=f"{document_type} - {case.file_number}")
