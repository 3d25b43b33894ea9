"""
Tests for template substitution.
"""
from substitution import build_pattern, find_placeholders, substitute, unresolved_placeholders


class TestSubstitute:
    """Tests for substitute()."""

    def test_replaces_every_occurrence(self):
        mapping = {"{case.status}": "New"}
        assert substitute("{case.status} / {case.status}", mapping) == "New / New"

    def test_unknown_tokens_are_preserved(self):
        assert substitute("Hello {unknown.token}", {"{case.status}": "New"}) == "Hello {unknown.token}"

    def test_idempotent_once_resolved(self):
        mapping = {"{case.status}": "New", "{mortgage.balance}": "750,000"}
        once = substitute("Status {case.status}, balance {mortgage.balance}", mapping)
        assert substitute(once, mapping) == once

    def test_regex_metacharacters_in_text_are_literal(self):
        template = "Cost (approx.) $5.00 [*] {case.status} ^end$ \\d+"
        result = substitute(template, {"{case.status}": "N/A"})
        assert result == "Cost (approx.) $5.00 [*] N/A ^end$ \\d+"

    def test_replacement_values_are_not_expanded(self):
        """Backreference-looking values are inserted literally."""
        result = substitute("{a}", {"{a}": r"\1 $1 \g<0>"})
        assert result == r"\1 $1 \g<0>"

    def test_inserted_values_are_not_rescanned(self):
        mapping = {"{a}": "{b}", "{b}": "B"}
        assert substitute("{a} {b}", mapping) == "{b} B"

    def test_none_value_becomes_empty(self):
        assert substitute("[{x}]", {"{x}": None}) == "[]"

    def test_empty_template_and_mapping(self):
        assert substitute("", {"{a}": "b"}) == ""
        assert substitute(None, {"{a}": "b"}) == ""
        assert substitute("{a}", {}) == "{a}"

    def test_longest_key_wins(self):
        assert substitute("{a}{a}", {"{a}": "1", "{a}{a}": "2"}) == "2"


class TestPlaceholders:
    def test_find_placeholders_in_order_without_duplicates(self):
        text = "<p>{date} {borrower.name}</p><p>{date} {mortgage.per_diem}</p>"
        assert find_placeholders(text) == ["{date}", "{borrower.name}", "{mortgage.per_diem}"]

    def test_ignores_non_placeholder_braces(self):
        assert find_placeholders("body { color: red; } {Bad.Case}") == []

    def test_unresolved(self):
        assert unresolved_placeholders("{date} {x.y}", {"{date}": "today"}) == ["{x.y}"]


def test_build_pattern_without_keys():
    assert build_pattern({}) is None
    assert build_pattern({"": "x"}) is None
