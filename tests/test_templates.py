"""
Tests for the document template store.
"""
import pytest
from reportlab.pdfbase.pdfmetrics import stringWidth

from html_flatten import flatten
from pdf_renderer import PageConfig, paginate
from templates import DEFAULT_TEMPLATES, create_default_templates
from substitution import find_placeholders, substitute
from variables import VARIABLES, resolve


class TestTemplateManager:
    """Tests for TemplateManager CRUD."""

    def test_starts_empty(self, template_manager):
        assert template_manager.list_templates() == []
        assert template_manager.metadata_file.exists()

    def test_save_and_get(self, template_manager):
        saved = template_manager.save_template("Notice", "<p>{date}</p>", "A notice")
        assert saved.id == 1
        loaded = template_manager.get_template("Notice")
        assert loaded.content == "<p>{date}</p>"
        assert loaded.description == "A notice"
        assert template_manager.get_template_by_id(1).name == "Notice"

    def test_save_existing_updates_in_place(self, template_manager):
        template_manager.save_template("Notice", "v1")
        template_manager.save_template("Other", "x")
        updated = template_manager.save_template("Notice", "v2", "changed")
        assert updated.id == 1
        assert template_manager.get_template("Notice").content == "v2"
        assert [t.name for t in template_manager.list_templates()] == ["Notice", "Other"]

    def test_next_id_follows_highest_remaining(self, template_manager):
        template_manager.save_template("A", "a")
        template_manager.save_template("B", "b")
        assert template_manager.delete_template("B")
        assert template_manager.save_template("C", "c").id == 2

    def test_delete_missing(self, template_manager):
        assert template_manager.delete_template("Nope") is False
        assert template_manager.get_template("Nope") is None

    def test_delete_removes_file(self, template_manager):
        template_manager.save_template("Gone", "x")
        template_manager.delete_template("Gone")
        assert list(template_manager.templates_dir.glob("*.html")) == []

    def test_name_required(self, template_manager):
        with pytest.raises(ValueError):
            template_manager.save_template("  ", "x")

    def test_template_for_document_type(self, template_manager):
        template_manager.save_template("Petition", "<h1>PETITION</h1>")
        assert template_manager.template_for_document_type("Petition").content == "<h1>PETITION</h1>"


class TestDefaultTemplates:
    def test_creates_defaults_once(self, template_manager):
        create_default_templates(template_manager)
        create_default_templates(template_manager)
        names = [t.name for t in template_manager.list_templates()]
        assert names == [t["name"] for t in DEFAULT_TEMPLATES]

    def test_defaults_keep_user_edits(self, template_manager):
        template_manager.save_template("Demand Letter", "custom")
        create_default_templates(template_manager)
        assert template_manager.get_template("Demand Letter").content == "custom"

    def test_default_placeholders_are_known_variables(self):
        known = {v["token"] for v in VARIABLES}
        for template in DEFAULT_TEMPLATES:
            unknown = [t for t in find_placeholders(template["content"]) if t not in known]
            assert unknown == [], f"{template['name']}: {unknown}"

    def test_default_bodies_have_no_source_line_breaks(self):
        for template in DEFAULT_TEMPLATES:
            assert "\n" not in template["content"], template["name"]

    @pytest.mark.parametrize("name", [t["name"] for t in DEFAULT_TEMPLATES])
    def test_default_paragraphs_wrap_to_full_lines(self, name, sample_case, today):
        content = next(t["content"] for t in DEFAULT_TEMPLATES if t["name"] == name)
        flat = flatten(substitute(content, resolve(sample_case, today=today)))
        page = PageConfig()
        lines = [line for p in paginate(flat.text, flat.spans, page) for line in p.lines]

        for current, following in zip(lines, lines[1:]):
            # A line that wrapped mid-paragraph should use most of the width
            if "\n" in flat.text[current.offset:following.offset]:
                continue
            width = stringWidth(current.text, current.style.font_name, current.style.size)
            assert width > page.usable_width * 0.6, f"{name}: short line {current.text!r}"
