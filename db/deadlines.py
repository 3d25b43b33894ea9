"""
Deadlines — PostgreSQL

Dated tasks attached to a case (statutory, court, internal, client).
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from db.connection import get_connection
from models import Deadline

logger = logging.getLogger(__name__)


DEADLINES_SCHEMA = """
CREATE TABLE IF NOT EXISTS deadlines (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    case_id UUID NOT NULL REFERENCES cases(id) ON DELETE CASCADE,
    title TEXT NOT NULL,
    date DATE,
    description TEXT DEFAULT '',
    type TEXT NOT NULL DEFAULT 'Internal',
    complete BOOLEAN DEFAULT FALSE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_deadlines_case ON deadlines(case_id);
CREATE INDEX IF NOT EXISTS idx_deadlines_date ON deadlines(date) WHERE NOT complete;
"""

DEADLINE_COLUMNS = """
    id::text AS id, case_id::text AS case_id, title, date, description, type, complete
"""


def ensure_deadlines_tables():
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(DEADLINES_SCHEMA)
    logger.info("Deadlines tables ensured")


def add_deadline(deadline: Deadline) -> Deadline:
    """Insert a deadline; the returned copy carries the new id."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            f"""
            INSERT INTO deadlines (case_id, title, date, description, type, complete)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {DEADLINE_COLUMNS}
            """,
            (
                deadline.case_id,
                deadline.title,
                deadline.date,
                deadline.description,
                deadline.type.value,
                deadline.complete,
            ),
        )
        return Deadline.from_dict(dict(cur.fetchone()))


def toggle_deadline(deadline_id: str) -> Optional[bool]:
    """Flip a deadline's complete flag. Returns the new value, or None if not found."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            "UPDATE deadlines SET complete = NOT complete WHERE id = %s RETURNING complete",
            (deadline_id,),
        )
        row = cur.fetchone()
        return row["complete"] if row else None


def list_deadlines(case_id: Optional[str] = None, include_complete: bool = True) -> List[Deadline]:
    """Deadlines ordered by date (undated last), optionally for one case."""
    conditions = []
    params = []
    if case_id:
        conditions.append("case_id = %s")
        params.append(case_id)
    if not include_complete:
        conditions.append("NOT complete")

    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            f"SELECT {DEADLINE_COLUMNS} FROM deadlines {where} ORDER BY date NULLS LAST, title",
            params,
        )
        return [Deadline.from_dict(dict(r)) for r in cur.fetchall()]


def upcoming_deadlines(days: int = 14, today: Optional[date] = None) -> List[dict]:
    """
    Open deadlines due within the next `days` days, with the case file number.

    Overdue deadlines are included.
    """
    today = today or date.today()
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT d.id::text AS id, d.case_id::text AS case_id, c.file_number,
                   d.title, d.date, d.type, d.complete
            FROM deadlines d
            JOIN cases c ON c.id = d.case_id
            WHERE NOT d.complete AND d.date IS NOT NULL AND d.date <= %s
            ORDER BY d.date, c.file_number
            """,
            (today + timedelta(days=days),),
        )
        return [dict(r) for r in cur.fetchall()]
