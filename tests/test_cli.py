"""
Tests for the click CLI.
"""
import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from agent import cli
from documents import DocumentGenerator
from templates import create_default_templates


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def case_file(tmp_path, sample_case_data):
    path = tmp_path / "case.json"
    path.write_text(json.dumps(sample_case_data))
    return path


@pytest.fixture
def content_file(tmp_path):
    path = tmp_path / "letter.html"
    path.write_text("<p>Dear {borrower.name},</p><p>Balance: {mortgage.balance}</p>")
    return path


class TestTemplateCommands:
    def test_init_then_list(self, runner, template_manager):
        with patch("commands.templates_cmd.create_default_templates",
                   lambda: create_default_templates(template_manager)), \
             patch("commands.templates_cmd.TemplateManager", return_value=template_manager):
            result = runner.invoke(cli, ["templates", "init"])
            assert result.exit_code == 0, result.output
            assert "Demand Letter" in result.output

            result = runner.invoke(cli, ["templates", "list"])
            assert result.exit_code == 0
            assert "Order Nisi" in result.output

    def test_show_missing_template(self, runner, template_manager):
        with patch("commands.templates_cmd.TemplateManager", return_value=template_manager):
            result = runner.invoke(cli, ["templates", "show", "Nope"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestDocumentCommands:
    def test_variables(self, runner, case_file):
        result = runner.invoke(cli, ["documents", "variables", str(case_file)])
        assert result.exit_code == 0, result.output
        assert "{lender.name}" in result.output
        assert "First Bank" in result.output

    def test_preview(self, runner, case_file, content_file):
        result = runner.invoke(cli, ["documents", "preview", str(case_file), "--content", str(content_file)])
        assert result.exit_code == 0, result.output
        assert "Dear Jane Smith," in result.output
        assert "Balance: 750,000" in result.output

    def test_pdf_to_file(self, runner, case_file, content_file, tmp_path):
        out = tmp_path / "letter.pdf"
        result = runner.invoke(cli, [
            "documents", "pdf", str(case_file), "--content", str(content_file),
            "--type", "Demand Letter", "-o", str(out),
        ])
        assert result.exit_code == 0, result.output
        assert out.read_bytes().startswith(b"%PDF")

    def test_pdf_uses_template_for_document_type(self, runner, case_file, tmp_path, template_manager):
        template_manager.save_template("Petition", "<h1>PETITION</h1><p>{lender.name}</p>")
        out = tmp_path / "petition.docx"
        with patch("commands.documents.DocumentGenerator",
                   return_value=DocumentGenerator(templates=template_manager)):
            result = runner.invoke(cli, [
                "documents", "pdf", str(case_file), "--type", "Petition", "--docx", "-o", str(out),
            ])
        assert result.exit_code == 0, result.output
        assert out.read_bytes()[:2] == b"PK"

    def test_unknown_case_id(self, runner):
        with patch("db.cases.get_case", return_value=None):
            result = runner.invoke(cli, ["documents", "variables", "no-such-case"])
        assert result.exit_code != 0
        assert "not found" in result.output


class TestOtherCommands:
    def test_reports_export_to_stdout(self, runner):
        with patch("commands.reports.build_report", return_value=(["Status", "Cases"], [["New", 2]])):
            result = runner.invoke(cli, ["reports", "export", "status"])
        assert result.exit_code == 0
        assert result.output == '"Status","Cases"\n"New",2\n'

    def test_users_add(self, runner):
        with patch("dashboard.auth.create_user", return_value=True) as create:
            result = runner.invoke(cli, ["users", "add", "pat", "--password", "pw", "--role", "manager"])
        assert result.exit_code == 0, result.output
        create.assert_called_once_with("pat", "pw", None, "manager")

    def test_users_add_rejects_unknown_role(self, runner):
        result = runner.invoke(cli, ["users", "add", "pat", "--password", "pw", "--role", "owner"])
        assert result.exit_code == 2
