"""
Word Export

Writes flattened document content to a .docx file, one paragraph per logical
line, with runs split at span boundaries so inline formatting carries over.
"""
import io
from typing import List, Optional, Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor
from reportlab.lib import colors

from html_flatten import FormatSpan
from pdf_renderer import find_span, parse_size

ALIGNMENT = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


def _boundaries(spans: Sequence[FormatSpan], start: int, end: int) -> List[int]:
    """Offsets in [start, end] where formatting may change."""
    points = {start, end}
    for span in spans:
        for point in (span.start, span.end):
            if start < point < end:
                points.add(point)
    return sorted(points)


def _rgb(value: str) -> Optional[RGBColor]:
    try:
        color = colors.toColor(value)
    except (ValueError, TypeError):
        return None
    red, green, blue = (int(round(channel * 255)) for channel in color.rgb())
    return RGBColor(red, green, blue)


def _first_font(font: str) -> str:
    """First family of a CSS font-family list, unquoted."""
    return font.split(",")[0].strip().strip("'\"")


def render_docx(text: str, spans: Sequence[FormatSpan], title: str = "") -> bytes:
    """Build a .docx from flattened text and spans and return its bytes."""
    doc = Document()
    if title:
        doc.core_properties.title = title

    offset = 0
    for line in text.split("\n"):
        paragraph = doc.add_paragraph()
        line_start, line_end = offset, offset + len(line)

        lead = find_span(spans, line_start)
        if lead is not None and lead.align in ALIGNMENT:
            paragraph.alignment = ALIGNMENT[lead.align]

        points = _boundaries(spans, line_start, line_end)
        for seg_start, seg_end in zip(points, points[1:]):
            run = paragraph.add_run(text[seg_start:seg_end])
            span = find_span(spans, seg_start)
            if span is None:
                continue
            run.bold = span.bold or None
            run.italic = span.italic or None
            run.underline = span.underline or None
            if span.font:
                run.font.name = _first_font(span.font)
            size = parse_size(span.size)
            if size is not None:
                run.font.size = Pt(size)
            if span.color:
                rgb = _rgb(span.color)
                if rgb is not None:
                    run.font.color.rgb = rgb

        offset = line_end + 1

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
