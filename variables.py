"""
Template Variable Resolution

Builds the flat token -> display string mapping that templates are merged
with. Resolution is pure: it reads a Case snapshot and never mutates it or
touches the database.
"""
from datetime import date
from typing import Dict, List, Optional, Sequence

from formatters import DEFAULT_FORMATTER, Formatter
from models import Case, Mortgage, Party


# Insertable placeholders offered by the document editor, in menu order.
VARIABLES: List[Dict[str, str]] = [
    {"token": "{date}", "label": "Today's date", "group": "General"},
    {"token": "{case.file_number}", "label": "Case file number", "group": "Case"},
    {"token": "{case.status}", "label": "Case status", "group": "Case"},
    {"token": "{case.created_at}", "label": "Case opened", "group": "Case"},
    {"token": "{property.address}", "label": "Property address", "group": "Property"},
    {"token": "{property.pid}", "label": "Property PID", "group": "Property"},
    {"token": "{property.legal_description}", "label": "Legal description", "group": "Property"},
    {"token": "{mortgage.number}", "label": "Registration number", "group": "Mortgage"},
    {"token": "{mortgage.balance}", "label": "Current balance", "group": "Mortgage"},
    {"token": "{mortgage.principal}", "label": "Principal", "group": "Mortgage"},
    {"token": "{mortgage.per_diem}", "label": "Per diem interest", "group": "Mortgage"},
    {"token": "{mortgage.interest_rate}", "label": "Interest rate", "group": "Mortgage"},
    {"token": "{mortgage.arrears}", "label": "Arrears", "group": "Mortgage"},
    {"token": "{mortgage.accrued_interest}", "label": "Accrued interest", "group": "Mortgage"},
    {"token": "{lender.name}", "label": "Lender name", "group": "Parties"},
    {"token": "{borrower.name}", "label": "Borrower name", "group": "Parties"},
    {"token": "{borrower.email}", "label": "Borrower email", "group": "Parties"},
    {"token": "{borrower.phone}", "label": "Borrower phone", "group": "Parties"},
    {"token": "{court.file_number}", "label": "Court file number", "group": "Court"},
    {"token": "{court.registry}", "label": "Court registry", "group": "Court"},
    {"token": "{court.hearing_date}", "label": "Hearing date", "group": "Court"},
    {"token": "{court.judge_name}", "label": "Judge", "group": "Court"},
]

# Canonical role -> substrings that identify it in a free-form party type.
PARTY_ALIASES = {
    "lender": ("lender", "mortgagee"),
    "borrower": ("borrower", "mortgagor"),
}

PARTY_FIELDS = ("name", "email", "phone", "address")


def accrued_interest(mortgage: Mortgage, today: Optional[date] = None) -> Optional[float]:
    """Interest accrued since the mortgage start date.

    days_since_start * per_diem. Payments and principal reductions since the
    start date are not taken into account, so this is an approximation.
    """
    if mortgage.start_date is None or mortgage.per_diem_interest is None:
        return None
    today = today or date.today()
    days = (today - mortgage.start_date).days
    return days * mortgage.per_diem_interest


def _party_tokens(prefix: str, party: Party, fmt: Formatter) -> Dict[str, str]:
    return {
        f"{{{prefix}.name}}": fmt.text(party.name),
        f"{{{prefix}.email}}": fmt.text(party.email),
        f"{{{prefix}.phone}}": fmt.text(party.phone),
        f"{{{prefix}.address}}": fmt.text(party.address),
    }


def find_party(parties: Sequence[Party], keywords: Sequence[str]) -> Optional[Party]:
    """First party whose type contains any keyword, case-insensitively."""
    for party in parties:
        party_type = (party.type or "").lower()
        if any(keyword in party_type for keyword in keywords):
            return party
    return None


def resolve(
    case: Optional[Case],
    formatter: Optional[Formatter] = None,
    today: Optional[date] = None,
) -> Dict[str, str]:
    """
    Build the placeholder mapping for a case.

    Args:
        case: Case snapshot to read from
        formatter: Formatting rules (defaults to the configured formatter)
        today: Date used for {date} and accrued interest (defaults to today)

    Returns:
        Dict of token (braces included) -> formatted string. Missing source
        values resolve to "N/A".
    """
    fmt = formatter or DEFAULT_FORMATTER
    today = today or date.today()

    mapping = {"{date}": fmt.long_date(today)}
    if case is None:
        return mapping

    prop = case.property
    mapping.update({
        "{property.address}": prop.address_line if prop else fmt.missing,
        "{property.pid}": fmt.text(prop.pid if prop else None),
        "{property.legal_description}": fmt.text(prop.legal_description if prop else None),
        "{property.type}": fmt.text(prop.property_type if prop else None),
    })

    mortgage = case.mortgage
    if mortgage is not None:
        mapping.update({
            "{mortgage.number}": fmt.text(mortgage.registration_number),
            "{mortgage.balance}": fmt.currency(mortgage.current_balance),
            "{mortgage.principal}": fmt.currency(mortgage.principal),
            "{mortgage.per_diem}": fmt.fixed(mortgage.per_diem_interest, 2),
            "{mortgage.interest_rate}": fmt.percentage(mortgage.interest_rate),
            "{mortgage.arrears}": fmt.currency(mortgage.arrears),
            "{mortgage.start_date}": fmt.long_date(mortgage.start_date),
            "{mortgage.payment_amount}": fmt.currency(mortgage.payment_amount),
            "{mortgage.payment_frequency}": fmt.text(mortgage.payment_frequency),
            "{mortgage.accrued_interest}": fmt.currency(accrued_interest(mortgage, today)),
        })
    else:
        for token in ("number", "balance", "principal", "per_diem", "interest_rate", "arrears",
                      "start_date", "payment_amount", "payment_frequency", "accrued_interest"):
            mapping[f"{{mortgage.{token}}}"] = fmt.missing

    court = case.court
    mapping.update({
        "{court.file_number}": fmt.text(court.file_number if court else None),
        "{court.registry}": fmt.text(court.registry if court else None),
        "{court.hearing_date}": fmt.long_date(court.hearing_date if court else None),
        "{court.judge_name}": fmt.text(court.judge_name if court else None),
        "{case.file_number}": fmt.text(case.file_number),
        "{case.status}": fmt.text(case.status.value if case.status else None),
        "{case.created_at}": fmt.long_date(case.created_at),
        "{case.updated_at}": fmt.long_date(case.updated_at),
        "{case.notes}": fmt.text(case.notes),
    })

    # One token set per party type; a later party of the same type wins.
    for party in case.parties:
        if not party or not party.type:
            continue
        mapping.update(_party_tokens(party.type.lower(), party, fmt))

    for role, keywords in PARTY_ALIASES.items():
        if f"{{{role}.name}}" in mapping:
            continue
        party = find_party(case.parties, keywords)
        if party is not None:
            mapping.update(_party_tokens(role, party, fmt))

    return mapping
