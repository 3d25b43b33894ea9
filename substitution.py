"""
Template Substitution

Merges a resolved token mapping into template text. Tokens are matched as
exact substrings (braces included); user text is never interpreted as a
regular expression.
"""
import re
from typing import Dict, List, Mapping, Optional

# {dot.path} placeholders, e.g. {property.address} or {date}
PLACEHOLDER_PATTERN = re.compile(r'\{[a-z_][a-z0-9_]*(?:\.[a-z0-9_]+)*\}')


def build_pattern(mapping: Mapping[str, str]) -> Optional["re.Pattern"]:
    """Alternation of every escaped key, longest first so overlapping keys match greedily."""
    keys = [key for key in mapping if key]
    if not keys:
        return None
    keys.sort(key=len, reverse=True)
    return re.compile("|".join(re.escape(key) for key in keys))


def substitute(template: Optional[str], mapping: Mapping[str, str]) -> str:
    """
    Replace every occurrence of every mapping key in template.

    All keys are matched in a single left-to-right pass over the original
    text, so a value inserted for one key is never scanned for another.
    Unknown tokens stay verbatim.

    Args:
        template: Template text (HTML or plain)
        mapping: token -> replacement, e.g. {"{case.status}": "New"}

    Returns:
        The merged text
    """
    if not template:
        return template or ""

    pattern = build_pattern(mapping)
    if pattern is None:
        return template

    def replacement(match):
        value = mapping[match.group(0)]
        return "" if value is None else str(value)

    # A function replacement inserts values literally (no backreference expansion).
    return pattern.sub(replacement, template)


def find_placeholders(template: Optional[str]) -> List[str]:
    """All distinct placeholders in template, in order of first appearance."""
    seen: Dict[str, None] = {}
    for match in PLACEHOLDER_PATTERN.finditer(template or ""):
        seen.setdefault(match.group(0), None)
    return list(seen)


def unresolved_placeholders(template: Optional[str], mapping: Mapping[str, str]) -> List[str]:
    """Placeholders in template that the mapping does not cover."""
    return [token for token in find_placeholders(template) if token not in mapping]
