"""
Tests for page layout and PDF drawing.
"""
import pytest
from reportlab.pdfbase.pdfmetrics import stringWidth

from html_flatten import FormatSpan, flatten
from pdf_renderer import (
    LineStyle, PageConfig, case_summary_lines, find_span, font_family, paginate,
    parse_size, render_case_summary, render_pdf, style_for, wrap_line,
)


@pytest.fixture
def small_page():
    """160pt of usable height at 16pt per line: ten lines per page."""
    return PageConfig(
        width=612, height=200,
        margin_left=72, margin_right=72, margin_top=20, margin_bottom=20,
        line_height=16, blank_line_height=8,
    )


class TestPagination:
    """Page breaks from usable height and line height."""

    def test_one_line_over_capacity_starts_second_page(self, small_page):
        text = "\n".join(f"line {i}" for i in range(11))
        pages = paginate(text, [], small_page)
        assert len(pages) == 2
        assert len(pages[0].lines) == 10
        assert [line.text for line in pages[1].lines] == ["line 10"]

    def test_exact_capacity_fits_one_page(self, small_page):
        text = "\n".join(f"line {i}" for i in range(10))
        assert len(paginate(text, [], small_page)) == 1

    def test_blank_lines_advance_by_blank_increment(self, small_page):
        lines = paginate("a\n\nb", [], small_page)[0].lines
        assert [line.y for line in lines] == [0, 24]

    def test_offsets_track_source_text(self, small_page):
        text = "First paragraph " * 20 + "\n\nSecond line"
        for page in paginate(text, [], small_page):
            for line in page.lines:
                assert text[line.offset:line.offset + len(line.text)] == line.text

    def test_span_styles_each_physical_line(self):
        result = flatten("<h1>Title</h1><p>Body</p>")
        lines = paginate(result.text, result.spans)[0].lines
        assert lines[0].style.bold
        assert lines[0].style.size == 24
        assert lines[0].style.font_name == "Helvetica-Bold"
        assert not lines[1].style.bold
        assert lines[1].style.size == 12

    def test_empty_text_gives_one_empty_page(self):
        pages = paginate("", [])
        assert len(pages) == 1
        assert pages[0].lines == []


class TestWrapLine:
    def test_lines_fit_and_consume_everything(self):
        text = "The quick brown fox jumps over the lazy dog " * 5
        pieces = wrap_line(text, "Helvetica", 12, 100)
        assert len(pieces) > 1
        assert sum(consumed for _, consumed in pieces) == len(text)
        for piece, _ in pieces:
            assert stringWidth(piece, "Helvetica", 12) <= 100

    def test_overlong_word_split(self):
        word = "x" * 200
        pieces = wrap_line(word, "Helvetica", 12, 50)
        assert "".join(piece for piece, _ in pieces) == word
        assert all(piece for piece, _ in pieces)

    def test_short_line_unchanged(self):
        assert wrap_line("short", "Helvetica", 12, 500) == [("short", 5)]


class TestStyle:
    def test_no_span_resets_to_defaults(self):
        style = style_for(None, LineStyle(bold=True, size=24), PageConfig())
        assert not style.bold
        assert style.size == 12

    def test_bold_italic_times(self):
        span = FormatSpan(0, 1, bold=True, italic=True, font="'Times New Roman', serif")
        assert style_for(span, LineStyle(), PageConfig()).font_name == "Times-BoldItalic"

    def test_invalid_size_keeps_previous(self):
        span = FormatSpan(0, 1, size="big")
        assert style_for(span, LineStyle(size=18), PageConfig()).size == 18

    def test_color_defaults_to_black_and_justify_to_left(self):
        style = style_for(FormatSpan(0, 1, align="justify"), LineStyle(), PageConfig())
        assert style.color == "black"
        assert style.align == "left"

    def test_parse_size(self):
        assert parse_size("14pt") == 14
        assert parse_size("abc") is None
        assert parse_size("0") is None
        assert parse_size(None) is None

    @pytest.mark.parametrize("font, family", [
        ("Courier New", "Courier"),
        ("Georgia, serif", "Times"),
        ("Arial, sans-serif", "Helvetica"),
        (None, "Helvetica"),
        ("Comic Sans MS", "Helvetica"),
    ])
    def test_font_family(self, font, family):
        assert font_family(font) == family

    def test_find_span_first_in_list_order(self):
        first = FormatSpan(0, 10, bold=True)
        second = FormatSpan(0, 10, italic=True)
        assert find_span([first, second], 5) is first
        assert find_span([first], 10) is None


class TestDrawing:
    def test_render_pdf_bytes(self):
        result = flatten('<p style="text-align: center"><u>Centered</u></p><p><font color="red">Red</font></p>')
        pdf = render_pdf(result.text, result.spans, title="Test")
        assert pdf.startswith(b"%PDF")

    def test_multi_page_pdf(self, small_page):
        text = "\n".join(f"line {i}" for i in range(25))
        assert render_pdf(text, [], small_page).startswith(b"%PDF")

    def test_case_summary(self, sample_case):
        rows = [text for text, _ in case_summary_lines(sample_case, "Demand Letter")]
        assert rows[0] == "Document Type: Demand Letter"
        assert "Case File Number: F-2024-001" in rows
        assert "Lender: First Bank" in rows
        assert "Current Balance: 750,000.00" in rows
        assert render_case_summary(sample_case, "Demand Letter").startswith(b"%PDF")

    def test_case_summary_notes_paginate(self, sample_case, small_page):
        sample_case.notes = "\n".join(f"note {i}" for i in range(40))
        assert render_case_summary(sample_case, "Petition", small_page).startswith(b"%PDF")
