"""
Rich Content Flattening

Turns the HTML fragment produced by the document editor into plain text plus
formatting spans (offset ranges over the text). The PDF and Word exporters
lay out the text and use the spans to restyle each line.

Parsing is inert: markup is tokenized with the standard library HTML parser,
nothing is fetched and script/style bodies are dropped.
"""
import logging
import re
from dataclasses import dataclass, field, fields, replace
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

BULLET = "• "

# Forced sizes for headings; h1 largest.
HEADING_SIZES = {"h1": "24pt", "h2": "20pt", "h3": "16pt"}

# <font size="N"> (1-7) to point sizes, matching the editor's size menu buckets.
FONT_TAG_SIZES = {
    "1": "8pt", "2": "10pt", "3": "12pt", "4": "14pt",
    "5": "18pt", "6": "24pt", "7": "36pt",
}

VOID_TAGS = {"br", "img", "hr", "input", "meta", "link", "wbr", "col", "area", "source"}
SKIP_TAGS = {"script", "style", "head", "title", "template", "noscript"}
ALIGNMENTS = {"left", "center", "right", "justify"}


@dataclass(frozen=True)
class TextFormat:
    """Inline formatting in effect for a run of text."""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    font: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    align: Optional[str] = None

    @property
    def is_plain(self) -> bool:
        return self == PLAIN

    def merge(self, other: "TextFormat") -> "TextFormat":
        """Child formatting on top of this one: flags accumulate, set values override."""
        return TextFormat(
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            underline=self.underline or other.underline,
            font=other.font or self.font,
            size=other.size or self.size,
            color=other.color or self.color,
            align=other.align or self.align,
        )


PLAIN = TextFormat()


@dataclass
class FormatSpan:
    """Formatting applied to text[start:end]."""
    start: int
    end: int
    bold: bool = False
    italic: bool = False
    underline: bool = False
    font: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    align: Optional[str] = None

    @classmethod
    def from_format(cls, start: int, end: int, fmt: TextFormat) -> "FormatSpan":
        values = {f.name: getattr(fmt, f.name) for f in fields(TextFormat)}
        return cls(start=start, end=end, **values)

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def to_dict(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class FlattenedContent:
    text: str = ""
    spans: List[FormatSpan] = field(default_factory=list)


def parse_style(style: str) -> Dict[str, str]:
    """Split an inline style attribute into lowercase property -> value."""
    declarations = {}
    for part in (style or "").split(";"):
        if ":" not in part:
            continue
        name, _, value = part.partition(":")
        declarations[name.strip().lower()] = value.strip()
    return declarations


def _is_bold_weight(weight: str) -> bool:
    weight = weight.lower()
    if weight in ("bold", "bolder"):
        return True
    return weight.isdigit() and int(weight) >= 600


def format_for_tag(tag: str, attrs: List[Tuple[str, Optional[str]]]) -> TextFormat:
    """Formatting contributed by a single element (not including ancestors)."""
    attributes = {name.lower(): value or "" for name, value in attrs}
    values = {}

    if tag in ("b", "strong"):
        values["bold"] = True
    elif tag in ("i", "em"):
        values["italic"] = True
    elif tag in ("u", "ins"):
        values["underline"] = True
    elif tag in HEADING_SIZES:
        values["bold"] = True
        values["size"] = HEADING_SIZES[tag]
    elif tag == "font":
        if attributes.get("face"):
            values["font"] = attributes["face"]
        if attributes.get("size") in FONT_TAG_SIZES:
            values["size"] = FONT_TAG_SIZES[attributes["size"]]
        if attributes.get("color"):
            values["color"] = attributes["color"]

    align = attributes.get("align", "").lower()
    if align in ALIGNMENTS:
        values["align"] = align

    style = parse_style(attributes.get("style", ""))
    if _is_bold_weight(style.get("font-weight", "")):
        values["bold"] = True
    if style.get("font-style", "").lower() in ("italic", "oblique"):
        values["italic"] = True
    if "underline" in style.get("text-decoration", "").lower():
        values["underline"] = True
    if style.get("font-family"):
        values["font"] = style["font-family"]
    if style.get("font-size"):
        values["size"] = style["font-size"]
    if style.get("color"):
        values["color"] = style["color"]
    if style.get("text-align", "").lower() in ALIGNMENTS:
        values["align"] = style["text-align"].lower()

    return TextFormat(**values)


class _Flattener(HTMLParser):
    """Depth-first walk over the token stream, tracking inherited formatting."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []
        self.length = 0
        self.spans: List[FormatSpan] = []
        # (tag, formatting in effect inside that element)
        self.stack: List[Tuple[str, TextFormat]] = []
        self.skip_depth = 0

    # ── output ───────────────────────────────────────────────

    def _write(self, text: str, fmt: TextFormat = PLAIN):
        if not text:
            return
        start = self.length
        self.parts.append(text)
        self.length += len(text)
        if not fmt.is_plain:
            self.spans.append(FormatSpan.from_format(start, self.length, fmt))

    @property
    def current_format(self) -> TextFormat:
        return self.stack[-1][1] if self.stack else PLAIN

    # ── parser callbacks ─────────────────────────────────────

    def handle_starttag(self, tag, attrs):
        if tag in SKIP_TAGS:
            self.skip_depth += 1
            self.stack.append((tag, self.current_format))
            return
        if self.skip_depth:
            if tag not in VOID_TAGS:
                self.stack.append((tag, self.current_format))
            return

        if tag == "br":
            self._write("\n")
            return
        if tag in VOID_TAGS:
            return

        fmt = self.current_format.merge(format_for_tag(tag, attrs))
        if tag == "p":
            if self.length:
                self._write("\n\n")
        elif tag == "div":
            if self.length:
                self._write("\n")
        elif tag in HEADING_SIZES:
            if self.length:
                self._write("\n\n")
        elif tag == "li":
            # The bullet starts the line, so it carries the item's format.
            self._write(BULLET, fmt)

        self.stack.append((tag, fmt))

    def handle_startendtag(self, tag, attrs):
        self.handle_starttag(tag, attrs)
        if tag not in VOID_TAGS:
            self.handle_endtag(tag)

    def handle_endtag(self, tag):
        if tag in VOID_TAGS:
            return
        # Stray end tags with no open element are ignored.
        if not any(open_tag == tag for open_tag, _ in self.stack):
            logger.debug("Ignoring unmatched </%s>", tag)
            return
        while self.stack:
            open_tag, _ = self.stack.pop()
            if open_tag in SKIP_TAGS:
                self.skip_depth -= 1
            elif not self.skip_depth:
                self._close_block(open_tag)
            if open_tag == tag:
                break

    def handle_data(self, data):
        if self.skip_depth:
            return
        self._write(data, self.current_format)

    def _close_block(self, tag: str):
        if tag in HEADING_SIZES or tag == "li":
            self._write("\n")
        elif tag in ("ul", "ol"):
            self._write("\n")

    def finish(self) -> FlattenedContent:
        self.close()
        # Close whatever the markup left open, innermost first.
        while self.stack:
            open_tag, _ = self.stack.pop()
            if open_tag in SKIP_TAGS:
                self.skip_depth -= 1
            elif not self.skip_depth:
                self._close_block(open_tag)
        return _trim("".join(self.parts), self.spans)


def _trim(text: str, spans: List[FormatSpan]) -> FlattenedContent:
    """Strip surrounding whitespace and shift/clip spans to match."""
    lead = len(text) - len(text.lstrip())
    trimmed = text.strip()
    size = len(trimmed)

    kept = []
    for span in spans:
        start = max(span.start - lead, 0)
        end = min(span.end - lead, size)
        if start < end:
            kept.append(replace(span, start=start, end=end))
    return FlattenedContent(text=trimmed, spans=kept)


_TAG_RE = re.compile(r"<[^>]*>")


def flatten(html: Optional[str]) -> FlattenedContent:
    """
    Flatten an HTML fragment to text and formatting spans.

    Block elements become line breaks (p: blank line before, div: newline
    before, br: newline, h1-h3: blank line before/newline after, li: bullet
    prefix/newline after, ul/ol: newline after). Inline formatting is
    inherited and merged down the tree. Never raises: markup the parser
    cannot handle is reduced to its text content.
    """
    if not html:
        return FlattenedContent()

    parser = _Flattener()
    try:
        parser.feed(html)
        return parser.finish()
    except Exception:
        logger.warning("Could not parse document markup; falling back to plain text", exc_info=True)
        return FlattenedContent(text=_TAG_RE.sub("", html).strip())
