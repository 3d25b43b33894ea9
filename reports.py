"""
Tabular Reports

CSV exports for the reports screen: case status summary, deadlines and
financials. Every report is a (headers, rows) pair; to_csv() serializes one.
"""
import csv
import io
import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from formatters import DEFAULT_FORMATTER, Formatter
from models import CaseStatus

logger = logging.getLogger(__name__)

Report = Tuple[List[str], List[List]]


def to_csv(headers: Sequence[str], rows: Sequence[Sequence]) -> str:
    """
    Serialize a report: header row first, comma separated.

    String cells are always double-quoted (embedded quotes doubled); numbers
    are written bare. None becomes an empty quoted cell.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(list(headers))
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue()


def _money(value) -> Optional[float]:
    return None if value is None else round(float(value), 2)


# ── Report builders (pure, over rows from db/) ────────────────

def case_status_report(counts: Dict[str, int]) -> Report:
    """Cases per status, in lifecycle order, with unknown labels last."""
    headers = ["Status", "Cases"]
    rows = [[status.value, counts.get(status.value, 0)] for status in CaseStatus]
    known = {status.value for status in CaseStatus}
    rows.extend([label, count] for label, count in sorted(counts.items()) if label not in known)
    return headers, rows


def deadlines_report(rows: Sequence[Dict], today: Optional[date] = None,
                     formatter: Formatter = DEFAULT_FORMATTER) -> Report:
    """Open deadlines with days remaining (negative when overdue)."""
    today = today or date.today()
    headers = ["File Number", "Deadline", "Type", "Due", "Days Remaining"]
    out = []
    for row in rows:
        due = row.get("date")
        out.append([
            row.get("file_number") or "",
            row.get("title") or "",
            row.get("type") or "",
            formatter.long_date(due),
            (due - today).days if due else None,
        ])
    return headers, out


def financials_report(rows: Sequence[Dict]) -> Report:
    """Mortgage figures per case from list_cases() rows."""
    headers = ["File Number", "Status", "Property", "Principal", "Balance", "Arrears", "Per Diem"]
    out = []
    for row in rows:
        street = row.get("street") or ""
        city = row.get("city") or ""
        out.append([
            row.get("file_number") or "",
            row.get("status") or "",
            ", ".join(part for part in (street, city) if part),
            _money(row.get("principal")),
            _money(row.get("current_balance")),
            _money(row.get("arrears")),
            _money(row.get("per_diem_interest")),
        ])
    return headers, out


# ── Database-backed entry point ───────────────────────────────

REPORT_KINDS = ("status", "deadlines", "financials")


def build_report(kind: str, days: int = 30) -> Report:
    """
    Load rows from the database and build the named report.

    Args:
        kind: One of REPORT_KINDS
        days: Look-ahead window for the deadlines report

    Raises:
        ValueError: for an unknown report kind
    """
    if kind == "status":
        from db.cases import status_counts
        return case_status_report(status_counts())
    if kind == "deadlines":
        from db.deadlines import upcoming_deadlines
        return deadlines_report(upcoming_deadlines(days=days))
    if kind == "financials":
        from db.cases import list_cases
        return financials_report(list_cases())
    raise ValueError(f"Unknown report: {kind!r} (expected one of {', '.join(REPORT_KINDS)})")
