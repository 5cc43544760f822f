from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import JobRecord

_JOB_COLUMNS = """
    id, document_id, status, attempts, error_message,
    locked_at, created_at, updated_at
"""


def _to_record(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        document_id=row["document_id"],
        status=row["status"],
        attempts=row["attempts"],
        error_message=row.get("error_message"),
        locked_at=row.get("locked_at"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class JobRepository:
    """Queue operations for the document_jobs table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Claim the oldest pending job with SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_JOB_COLUMNS}
                FROM document_jobs
                WHERE status = 'pending'
                  AND attempts < %s
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()

        if row is None:
            conn.commit()
            return None

        conn.execute(
            """
            UPDATE document_jobs
            SET status = 'claimed', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()

        record = _to_record(row)
        record.status = "claimed"
        return record

    def mark_processing(self, job_id: int) -> None:
        self._set_status(job_id, "processing")

    def mark_done(self, job_id: int) -> None:
        self._set_status(job_id, "done")

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as failed with the error that stopped it."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET status = 'failed', error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def schedule_retry(self, job_id: int, error: str) -> None:
        """Count the failed attempt and put the job back in the queue."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET attempts = attempts + 1, status = 'pending', error_message = %s,
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def find_by_id(self, job_id: int) -> JobRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_JOB_COLUMNS} FROM document_jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()
        return _to_record(row) if row is not None else None

    def _set_status(self, job_id: int, status: str) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (status, job_id),
            )
            conn.commit()
