"""
Cases — PostgreSQL

Cases with their property and mortgage (one each), plus the aggregate
loader that pulls parties, deadlines and documents in alongside.
"""
import logging
from typing import Dict, List, Optional

from db.connection import get_connection
from models import (
    Case, CaseStatus, CourtInfo, Deadline, Document, Mortgage, Party, Property,
    _enum_value, parse_date,
)

logger = logging.getLogger(__name__)


CASES_SCHEMA = """
CREATE TABLE IF NOT EXISTS properties (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    street TEXT NOT NULL DEFAULT '',
    city TEXT NOT NULL DEFAULT '',
    province TEXT NOT NULL DEFAULT '',
    postal_code TEXT NOT NULL DEFAULT '',
    pid TEXT,
    legal_description TEXT,
    property_type TEXT DEFAULT 'Residential',
    estimated_value NUMERIC(14, 2)
);

CREATE TABLE IF NOT EXISTS mortgages (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    registration_number TEXT NOT NULL,
    principal NUMERIC(14, 2),
    interest_rate NUMERIC(7, 4),
    start_date DATE,
    current_balance NUMERIC(14, 2),
    per_diem_interest NUMERIC(12, 4),
    arrears NUMERIC(14, 2),
    payment_amount NUMERIC(14, 2),
    payment_frequency TEXT
);

CREATE TABLE IF NOT EXISTS cases (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    file_number TEXT NOT NULL UNIQUE,
    status TEXT NOT NULL DEFAULT 'New',
    property_id UUID REFERENCES properties(id),
    mortgage_id UUID REFERENCES mortgages(id),
    court_file_number TEXT,
    court_registry TEXT,
    hearing_date DATE,
    judge_name TEXT,
    notes TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_cases_status ON cases(status);
"""

# One row per case with its property and mortgage columns prefixed.
CASE_SELECT = """
    SELECT c.id::text AS id, c.file_number, c.status,
           c.court_file_number, c.court_registry, c.hearing_date, c.judge_name,
           c.notes, c.created_at, c.updated_at,
           p.id::text AS property_id, p.street, p.city, p.province, p.postal_code,
           p.pid, p.legal_description, p.property_type, p.estimated_value,
           m.id::text AS mortgage_id, m.registration_number, m.principal,
           m.interest_rate, m.start_date, m.current_balance, m.per_diem_interest,
           m.arrears, m.payment_amount, m.payment_frequency
    FROM cases c
    LEFT JOIN properties p ON p.id = c.property_id
    LEFT JOIN mortgages m ON m.id = c.mortgage_id
"""


def ensure_cases_tables():
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(CASES_SCHEMA)
    logger.info("Cases tables ensured")


# ── Row mapping ───────────────────────────────────────────────

def case_from_rows(
    case_row: Dict,
    party_rows: List[Dict] = (),
    deadline_rows: List[Dict] = (),
    document_rows: List[Dict] = (),
) -> Case:
    """Assemble a Case aggregate from a CASE_SELECT row and its child rows."""
    row = dict(case_row)

    prop = None
    if row.get("property_id"):
        prop = Property.from_dict({**row, "id": row["property_id"]})

    mortgage = None
    if row.get("mortgage_id"):
        mortgage = Mortgage.from_dict({**row, "id": row["mortgage_id"]})

    court = None
    if any(row.get(key) for key in ("court_file_number", "court_registry", "hearing_date", "judge_name")):
        # Joined rows also carry the case's own file_number; read court_* only.
        court = CourtInfo(
            file_number=row.get("court_file_number"),
            registry=row.get("court_registry"),
            hearing_date=parse_date(row.get("hearing_date")),
            judge_name=row.get("judge_name"),
        )

    return Case(
        id=str(row["id"]),
        file_number=row.get("file_number") or "",
        status=_enum_value(CaseStatus, row.get("status"), CaseStatus.NEW),
        property=prop,
        mortgage=mortgage,
        parties=[Party.from_dict(dict(r)) for r in party_rows],
        deadlines=[Deadline.from_dict(dict(r)) for r in deadline_rows],
        documents=[Document.from_dict(dict(r)) for r in document_rows],
        court=court,
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


# ── Queries ───────────────────────────────────────────────────

def get_case(case_id: str) -> Optional[Case]:
    """Load a case with its property, mortgage, parties, deadlines and documents."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(CASE_SELECT + " WHERE c.id = %s", (case_id,))
        case_row = cur.fetchone()
        if not case_row:
            return None

        cur.execute(
            """
            SELECT p.id::text AS id, p.name, p.type, p.email, p.phone, p.address
            FROM case_parties cp
            JOIN parties p ON p.id = cp.party_id
            WHERE cp.case_id = %s
            ORDER BY cp.added_at, p.name
            """,
            (case_id,),
        )
        party_rows = cur.fetchall()

        cur.execute(
            """
            SELECT id::text AS id, case_id::text AS case_id, title, date,
                   description, type, complete
            FROM deadlines
            WHERE case_id = %s
            ORDER BY date NULLS LAST, title
            """,
            (case_id,),
        )
        deadline_rows = cur.fetchall()

        cur.execute(
            """
            SELECT id::text AS id, case_id::text AS case_id, title, type, status,
                   content, url, created_at
            FROM documents
            WHERE case_id = %s
            ORDER BY created_at
            """,
            (case_id,),
        )
        document_rows = cur.fetchall()

    return case_from_rows(case_row, party_rows, deadline_rows, document_rows)


def get_case_by_file_number(file_number: str) -> Optional[Case]:
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute("SELECT id::text AS id FROM cases WHERE file_number = %s", (file_number,))
        row = cur.fetchone()
    return get_case(row["id"]) if row else None


def list_cases(status: Optional[CaseStatus] = None) -> List[Dict]:
    """
    Case rows (no children) for listings and reports.

    Args:
        status: Only cases in this status

    Returns:
        List of dicts with case, property and mortgage columns
    """
    query = CASE_SELECT
    params: tuple = ()
    if status is not None:
        query += " WHERE c.status = %s"
        params = (status.value,)
    query += " ORDER BY c.updated_at DESC"

    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(query, params)
        return [dict(r) for r in cur.fetchall()]


def status_counts() -> Dict[str, int]:
    """Number of cases per status label."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute("SELECT status, COUNT(*) AS count FROM cases GROUP BY status")
        return {row["status"]: row["count"] for row in cur.fetchall()}


def update_case_status(case_id: str, status: CaseStatus) -> bool:
    """Set a case's status. Returns False when the case does not exist."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE cases SET status = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = %s
            """,
            (status.value, case_id),
        )
        updated = cur.rowcount > 0
    if updated:
        logger.info("Case %s moved to %s", case_id, status.value)
    return updated
