from typing import Any

import pytest

from app.database.repositories.documents_repository import DocumentsRepository
from app.extraction.models import AggregatedDocument, ErrorCause, PageError
from app.processor.exceptions import DocumentNotFoundError


@pytest.mark.integration
class TestFindById:
    def test_returns_document(self, seed_document: int, seed_template: int) -> None:
        document = DocumentsRepository().find_by_id(seed_document)

        assert document.id == seed_document
        assert document.user_email == "ana@example.com"
        assert document.original_key == "original/integration.pdf"
        assert document.is_pdf
        assert document.template_id == seed_template
        assert document.company_name == "ACME Corp"
        assert document.send_copy is True

    def test_missing_document(self, integration_pool: None) -> None:
        with pytest.raises(DocumentNotFoundError):
            DocumentsRepository().find_by_id(-1)


@pytest.mark.integration
class TestUpdateExtractionResult:
    def test_persists_sections_counters_and_errors(
        self, seed_document: int, read_row: Any
    ) -> None:
        result = AggregatedDocument(
            title="Invoice",
            main_data="Body one\n\nBody two",
            contact_info="a@x.com | 555-0100",
            pages_attempted=3,
            pages_succeeded=2,
            errors=[PageError(page_index=1, cause=ErrorCause.TIMEOUT)],
        )

        DocumentsRepository().update_extraction_result(seed_document, result)

        row = read_row(
            """
            SELECT title, main_data, contact_info, pages_attempted,
                   pages_succeeded, pages_failed, extraction_errors
            FROM documents WHERE id = %s
            """,
            (seed_document,),
        )
        assert row["title"] == "Invoice"
        assert row["main_data"] == "Body one\n\nBody two"
        assert row["contact_info"] == "a@x.com | 555-0100"
        assert (row["pages_attempted"], row["pages_succeeded"], row["pages_failed"]) == (3, 2, 1)
        assert row["extraction_errors"] == [{"page_index": 1, "cause": "timeout"}]

    def test_missing_document(self, integration_pool: None) -> None:
        with pytest.raises(DocumentNotFoundError):
            DocumentsRepository().update_extraction_result(-1, AggregatedDocument())


@pytest.mark.integration
class TestUpdateProcessedResult:
    def test_persists_key_and_fields(self, seed_document: int, read_row: Any) -> None:
        DocumentsRepository().update_processed_result(
            seed_document,
            processed_key="client/ana@example.com/pdf_processed/f.pdf",
            extracted_fields={"invoice": "INV-1", "total": None},
        )

        row = read_row(
            "SELECT processed_key, extracted_fields, processed_at FROM documents WHERE id = %s",
            (seed_document,),
        )
        assert row["processed_key"] == "client/ana@example.com/pdf_processed/f.pdf"
        assert row["extracted_fields"] == {"invoice": "INV-1", "total": None}
        assert row["processed_at"] is not None

    def test_missing_document(self, integration_pool: None) -> None:
        with pytest.raises(DocumentNotFoundError):
            DocumentsRepository().update_processed_result(-1, "k", {})
