"""
Tests for document generation and the Draft -> Finalized lifecycle.
"""
import io
from datetime import date
from unittest.mock import patch

import pytest
from docx import Document as DocxDocument

from documents import DocumentError, DocumentGenerator, DocumentStatusError, RenderError
from models import Document, DocumentStatus, DocumentType


@pytest.fixture
def generator(template_manager):
    return DocumentGenerator(templates=template_manager)


class TestContent:
    def test_initial_content_from_template(self, generator, template_manager):
        template_manager.save_template("Demand Letter", "<p>Dear {borrower.name}</p>")
        assert generator.initial_content("Demand Letter") == "<p>Dear {borrower.name}</p>"

    def test_initial_content_default(self, generator):
        assert generator.initial_content() == "<p>Enter your document content here...</p>"
        assert generator.initial_content("Missing") == "<p>Enter your document content here...</p>"

    def test_default_title(self, generator, sample_case, today):
        title = generator.default_title(DocumentType.PETITION, sample_case, today)
        assert title == "Petition - F-2024-001 - 2024-03-05"

    def test_preview_merges_without_flattening(self, generator, sample_case):
        html = generator.preview("<p>Dear <b>{borrower.name}</b>, {unknown.token}</p>", sample_case)
        assert html == "<p>Dear <b>Jane Smith</b>, {unknown.token}</p>"

    def test_print_view_is_full_page(self, generator, sample_case):
        page = generator.print_view("<p>{lender.name}</p>", sample_case, title="Demand <1>")
        assert page.startswith("<!DOCTYPE html>")
        assert "<p>First Bank</p>" in page
        assert "<title>Demand &lt;1&gt;</title>" in page
        assert "window.print()" in page


class TestExports:
    def test_render_pdf(self, generator, sample_case):
        pdf = generator.render_pdf("<p>Balance: {mortgage.balance}</p>", sample_case, DocumentType.DEMAND_LETTER)
        assert pdf.startswith(b"%PDF")

    def test_empty_content_falls_back_to_case_summary(self, generator, sample_case):
        with patch("documents.render_case_summary", return_value=b"%PDF-summary") as summary:
            assert generator.render_pdf("<p> </p>", sample_case, DocumentType.PETITION) == b"%PDF-summary"
        summary.assert_called_once_with(sample_case, "Petition", generator.page_config)

    def test_render_failure_raises_render_error(self, generator, sample_case):
        with patch("documents.draw_pdf", side_effect=RuntimeError("boom")):
            with pytest.raises(RenderError, match="boom"):
                generator.render_pdf("<p>x</p>", sample_case)

    def test_render_docx(self, generator, sample_case):
        data = generator.render_docx("<p>{borrower.name}</p>", sample_case, title="Letter")
        doc = DocxDocument(io.BytesIO(data))
        assert doc.paragraphs[0].text == "Jane Smith"

    def test_download_filename(self, sample_case):
        assert DocumentGenerator.download_filename("Demand Letter - F-1", sample_case) == "Demand_Letter_-_F-1.pdf"
        assert DocumentGenerator.download_filename("", sample_case, DocumentType.ORDER_NISI) == \
            "Case_F-2024-001_Order_Nisi.pdf"
        assert DocumentGenerator.download_filename(None, sample_case, extension="docx") == "Case_F-2024-001_Other.docx"


class TestLifecycle:
    def test_save_draft_persists_merged_content(self, generator, sample_case, today):
        with patch("db.documents.create_document", side_effect=lambda doc: doc) as create:
            saved = generator.save_draft(sample_case, "", DocumentType.DEMAND_LETTER, "<p>{lender.name}</p>", today=today)
        create.assert_called_once()
        assert saved.status == DocumentStatus.DRAFT
        assert saved.content == "<p>First Bank</p>"
        assert saved.case_id == sample_case.id
        assert saved.title == "Demand Letter - F-2024-001 - 2024-03-05"

    def test_finalize_draft(self, generator):
        document = Document(id="d-1", case_id="c-1", title="T", status=DocumentStatus.DRAFT)
        with patch("db.documents.update_document_status", return_value=True) as update:
            result = generator.finalize(document)
        update.assert_called_once_with("d-1", DocumentStatus.FINALIZED)
        assert result.status == DocumentStatus.FINALIZED

    @pytest.mark.parametrize("status", [DocumentStatus.FINALIZED, DocumentStatus.FILED, DocumentStatus.SERVED])
    def test_finalize_rejects_non_draft(self, generator, status):
        document = Document(id="d-1", case_id="c-1", title="T", status=status)
        with patch("db.documents.update_document_status") as update:
            with pytest.raises(DocumentStatusError):
                generator.finalize(document)
        update.assert_not_called()
        assert document.status == status

    def test_finalize_missing_document(self, generator):
        document = Document(id="d-404", case_id="c-1", title="T")
        with patch("db.documents.update_document_status", return_value=False):
            with pytest.raises(DocumentError):
                generator.finalize(document)

    def test_status_error_is_document_error(self):
        assert issubclass(DocumentStatusError, DocumentError)
        assert issubclass(RenderError, DocumentError)
