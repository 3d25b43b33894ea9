"""
Parties — PostgreSQL

Parties exist independently of cases and are linked through case_parties,
so one lender can appear on many files.
"""
import logging
from typing import List, Optional

from db.connection import get_connection
from models import Party

logger = logging.getLogger(__name__)


PARTIES_SCHEMA = """
CREATE TABLE IF NOT EXISTS parties (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    email TEXT,
    phone TEXT,
    address TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS case_parties (
    case_id UUID NOT NULL REFERENCES cases(id) ON DELETE CASCADE,
    party_id UUID NOT NULL REFERENCES parties(id) ON DELETE CASCADE,
    added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (case_id, party_id)
);

CREATE INDEX IF NOT EXISTS idx_parties_type ON parties(type);
"""


def ensure_parties_tables():
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(PARTIES_SCHEMA)
    logger.info("Parties tables ensured")


def create_party(party: Party) -> str:
    """Insert a party and return its new id."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO parties (name, type, email, phone, address)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id::text AS id
            """,
            (party.name, party.type, party.email, party.phone, party.address),
        )
        return cur.fetchone()["id"]


def attach_party(case_id: str, party_id: str):
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO case_parties (case_id, party_id)
            VALUES (%s, %s)
            ON CONFLICT (case_id, party_id) DO NOTHING
            """,
            (case_id, party_id),
        )


def add_party_to_case(case_id: str, party: Party) -> Party:
    """
    Create a party and link it to a case.

    These are two separate writes. If the link fails, the party row stays
    behind unattached and the error is re-raised.
    """
    party_id = create_party(party)
    try:
        attach_party(case_id, party_id)
    except Exception:
        logger.error("Party %s created but could not be attached to case %s", party_id, case_id)
        raise
    party.id = party_id
    return party


def get_party(party_id: str) -> Optional[Party]:
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            "SELECT id::text AS id, name, type, email, phone, address FROM parties WHERE id = %s",
            (party_id,),
        )
        row = cur.fetchone()
        return Party.from_dict(dict(row)) if row else None


def list_parties(case_id: str) -> List[Party]:
    with get_connection() as conn:
        cur = conn.cursor()
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
        return [Party.from_dict(dict(r)) for r in cur.fetchall()]


def update_party(party: Party) -> bool:
    """Overwrite a party's name, type and contact details."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE parties SET name = %s, type = %s, email = %s, phone = %s, address = %s
            WHERE id = %s
            """,
            (party.name, party.type, party.email, party.phone, party.address, party.id),
        )
        return cur.rowcount > 0


def detach_party(case_id: str, party_id: str) -> bool:
    """Unlink a party from a case. The party itself is kept."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            "DELETE FROM case_parties WHERE case_id = %s AND party_id = %s",
            (case_id, party_id),
        )
        return cur.rowcount > 0
