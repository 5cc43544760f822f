from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.extraction.models import AggregatedDocument
from app.processor.exceptions import DocumentNotFoundError
from app.processor.models import Document
from app.templates.models import ExtractedFieldSet


class DocumentsRepository:
    """Database operations for the documents table."""

    def find_by_id(self, document_id: int) -> Document:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, user_email, original_key, mime_type,
                           template_id, company_name, send_copy
                    FROM documents
                    WHERE id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return Document(
            id=row["id"],
            user_id=row["user_id"],
            user_email=row["user_email"],
            original_key=row["original_key"],
            mime_type=row["mime_type"],
            template_id=row["template_id"],
            company_name=row["company_name"],
            send_copy=bool(row["send_copy"]),
        )

    def update_extraction_result(self, document_id: int, result: AggregatedDocument) -> None:
        """Persist the aggregated extraction and its page counters.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        errors = [
            {"page_index": error.page_index, "cause": error.cause.value}
            for error in result.errors
        ]
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET title = %s,
                        main_data = %s,
                        contact_info = %s,
                        pages_attempted = %s,
                        pages_succeeded = %s,
                        pages_failed = %s,
                        extraction_errors = %s
                    WHERE id = %s
                    """,
                    (
                        result.title,
                        result.main_data,
                        result.contact_info,
                        result.pages_attempted,
                        result.pages_succeeded,
                        result.pages_failed,
                        Jsonb(errors),
                        document_id,
                    ),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()

    def update_processed_result(
        self,
        document_id: int,
        processed_key: str,
        extracted_fields: ExtractedFieldSet,
    ) -> None:
        """Persist the processed artifact key and template field values.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET processed_key = %s,
                        extracted_fields = %s,
                        processed_at = NOW()
                    WHERE id = %s
                    """,
                    (processed_key, Jsonb(extracted_fields), document_id),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
