"""
Documents — PostgreSQL

Generated case documents: saved HTML content plus type and status.
"""
import logging
from typing import List, Optional

from db.connection import get_connection
from models import Document, DocumentStatus

logger = logging.getLogger(__name__)


DOCUMENTS_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    case_id UUID NOT NULL REFERENCES cases(id) ON DELETE CASCADE,
    title TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'Other',
    status TEXT NOT NULL DEFAULT 'Draft',
    content TEXT,
    url TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_documents_case ON documents(case_id);
"""

DOCUMENT_COLUMNS = """
    id::text AS id, case_id::text AS case_id, title, type, status, content, url, created_at
"""


def ensure_documents_tables():
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(DOCUMENTS_SCHEMA)
    logger.info("Documents tables ensured")


def create_document(document: Document) -> Document:
    """Insert a document and return it with its id and timestamp filled in."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            f"""
            INSERT INTO documents (case_id, title, type, status, content, url)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {DOCUMENT_COLUMNS}
            """,
            (
                document.case_id,
                document.title,
                document.type.value,
                document.status.value,
                document.content,
                document.url,
            ),
        )
        saved = Document.from_dict(dict(cur.fetchone()))
    logger.info("Saved document %s (%s) for case %s", saved.id, saved.type.value, saved.case_id)
    return saved


def get_document(document_id: str) -> Optional[Document]:
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(f"SELECT {DOCUMENT_COLUMNS} FROM documents WHERE id = %s", (document_id,))
        row = cur.fetchone()
        return Document.from_dict(dict(row)) if row else None


def list_documents(case_id: Optional[str] = None) -> List[Document]:
    """Documents, oldest first, optionally for one case."""
    with get_connection() as conn:
        cur = conn.cursor()
        if case_id:
            cur.execute(
                f"SELECT {DOCUMENT_COLUMNS} FROM documents WHERE case_id = %s ORDER BY created_at",
                (case_id,),
            )
        else:
            cur.execute(f"SELECT {DOCUMENT_COLUMNS} FROM documents ORDER BY created_at")
        return [Document.from_dict(dict(r)) for r in cur.fetchall()]


def update_document_status(document_id: str, status: DocumentStatus) -> bool:
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE documents SET status = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = %s
            """,
            (status.value, document_id),
        )
        return cur.rowcount > 0


def update_document_content(document_id: str, content: str, title: Optional[str] = None) -> bool:
    """Replace a document's saved content (and optionally its title)."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE documents
            SET content = %s, title = COALESCE(%s, title), updated_at = CURRENT_TIMESTAMP
            WHERE id = %s
            """,
            (content, title, document_id),
        )
        return cur.rowcount > 0
