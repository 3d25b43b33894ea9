"""
db/ — PostgreSQL data access for cases, parties, deadlines and documents.

Usage:
    from db.connection import get_connection
    from db.cases import get_case, list_cases, update_case_status
    from db.parties import add_party_to_case, update_party, detach_party
    from db.deadlines import add_deadline, toggle_deadline, list_deadlines
    from db.documents import create_document, get_document, update_document_status

Connection pool is initialized on first use from the DATABASE_URL env var.
"""
from db.connection import get_connection, get_pool, close_pool


def ensure_all_tables():
    """Create all tables. Call once at application startup."""
    from db.cases import ensure_cases_tables
    from db.parties import ensure_parties_tables
    from db.deadlines import ensure_deadlines_tables
    from db.documents import ensure_documents_tables

    # Order matters: later tables reference cases.
    ensure_cases_tables()
    ensure_parties_tables()
    ensure_deadlines_tables()
    ensure_documents_tables()


__all__ = [
    "get_connection",
    "get_pool",
    "close_pool",
    "ensure_all_tables",
]
