import json
import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest
from psycopg.rows import dict_row

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool
from app.database.models import JobRecord

_REQUIRED_TABLES = ("documents", "document_jobs", "template_rule_sets")

# Child rows go first so foreign keys never block cleanup.
_CLEANUP_ORDER = ("document_jobs", "documents", "template_rule_sets")


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docflow_test")
    return Settings(extraction_provider="example")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            with conn.cursor() as cur:
                for table in _REQUIRED_TABLES:
                    cur.execute("SELECT to_regclass(%s)", (table,))
                    row = cur.fetchone()
                    if row is None or row[0] is None:
                        raise RuntimeError(f"table {table} does not exist")
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to a migrated database")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[tuple[str, int]], None, None]:
    cleanup: list[tuple[str, int]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table in _CLEANUP_ORDER:
                for row_table, row_id in cleanup:
                    if row_table == table:
                        cur.execute(f"DELETE FROM {table} WHERE id = %s", (row_id,))
        conn.commit()


@pytest.fixture
def seed_template(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, int]],
) -> int:
    definition = {
        "metadataRules": {"invoice": r"Invoice No:\s*(\S+)"},
        "pageRules": {"footerText": "on"},
    }
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO template_rule_sets (name, json_definition, is_active)
            VALUES (%s, %s, TRUE)
            RETURNING id
            """,
            ("Invoices", json.dumps(definition)),
        )
        row = cur.fetchone()
        assert row is not None
        template_id = row[0]
    db_conn.commit()
    integration_cleanup.append(("template_rule_sets", template_id))
    return template_id


@pytest.fixture
def seed_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, int]],
    seed_template: int,
) -> int:
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO documents
            (user_id, user_email, original_key, mime_type, template_id,
             company_name, send_copy)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (
                1,
                "ana@example.com",
                "original/integration.pdf",
                "application/pdf",
                seed_template,
                "ACME Corp",
                True,
            ),
        )
        row = cur.fetchone()
        assert row is not None
        document_id = row[0]
    db_conn.commit()
    integration_cleanup.append(("documents", document_id))
    return document_id


@pytest.fixture
def seed_job(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, int]],
    seed_document: int,
) -> JobRecord:
    with db_conn.cursor(row_factory=dict_row) as cur:
        cur.execute(
            """
            INSERT INTO document_jobs (document_id, status, attempts)
            VALUES (%s, 'pending', 0)
            RETURNING id
            """,
            (seed_document,),
        )
        row = cur.fetchone()
        assert row is not None
        job_id = row["id"]
    db_conn.commit()
    integration_cleanup.append(("document_jobs", job_id))
    return JobRecord(id=job_id, document_id=seed_document, status="pending", attempts=0)


def fetch_row(sql: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
    with get_connection() as conn:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(sql, params)
            return cur.fetchone()


@pytest.fixture
def read_row() -> Any:
    """Fetch one row as a dict on a fresh pooled connection."""
    return fetch_row
