"""
Tests for template variable resolution.

Run with: pytest tests/test_variables.py -v
"""
from datetime import date

import pytest

from formatters import Formatter
from models import Case, CaseStatus, Mortgage, Party
from substitution import substitute
from variables import VARIABLES, accrued_interest, find_party, resolve


def _case(**overrides) -> Case:
    values = dict(
        id="c-1",
        file_number="F-1",
        status=CaseStatus.NEW,
        property=None,
        mortgage=None,
    )
    values.update(overrides)
    return Case(**values)


class TestResolve:
    """Tests for resolve()."""

    def test_end_to_end_balance_and_per_diem(self):
        """Balance groups thousands, per diem keeps two decimals."""
        case = _case(mortgage=Mortgage(
            id="m-1", registration_number="M123", current_balance=750000, per_diem_interest=76.71,
        ))
        mapping = resolve(case, formatter=Formatter(currency_symbol=""))
        result = substitute("Balance: {mortgage.balance}, Per Diem: {mortgage.per_diem}", mapping)
        assert result == "Balance: 750,000, Per Diem: 76.71"

    def test_missing_arrears_is_na(self):
        case = _case(mortgage=Mortgage(id="m-1", registration_number="M123", current_balance=1000))
        assert resolve(case)["{mortgage.arrears}"] == "N/A"

    def test_no_mortgage_makes_every_mortgage_token_na(self):
        mapping = resolve(_case())
        mortgage_tokens = [key for key in mapping if key.startswith("{mortgage.")]
        assert mortgage_tokens
        assert all(mapping[key] == "N/A" for key in mortgage_tokens)

    def test_no_case_resolves_only_date(self, today):
        assert resolve(None, today=today) == {"{date}": "March 5, 2024"}

    def test_date_token_is_long_form(self, sample_case, today):
        assert resolve(sample_case, today=today)["{date}"] == "March 5, 2024"

    def test_property_address_line(self, sample_case):
        assert resolve(sample_case)["{property.address}"] == "123 Main St, Vancouver, BC V5K 0A1"

    def test_missing_property_is_na(self):
        assert resolve(_case())["{property.address}"] == "N/A"

    def test_court_and_case_tokens(self, sample_case):
        mapping = resolve(sample_case)
        assert mapping["{court.file_number}"] == "H-240001"
        assert mapping["{court.hearing_date}"] == "April 15, 2024"
        assert mapping["{case.file_number}"] == "F-2024-001"
        assert mapping["{case.status}"] == "Demand Letter Sent"

    def test_interest_rate_is_percentage(self, sample_case):
        assert resolve(sample_case)["{mortgage.interest_rate}"] == "3.5%"

    def test_resolution_does_not_mutate_case(self, sample_case):
        before = repr(sample_case)
        resolve(sample_case)
        assert repr(sample_case) == before

    def test_every_catalogue_token_resolves(self, sample_case):
        mapping = resolve(sample_case)
        missing = [v["token"] for v in VARIABLES if v["token"] not in mapping]
        assert missing == []


class TestPartyTokens:
    """Party tokens by type, and the lender/borrower aliases."""

    def test_exact_types(self, sample_case):
        mapping = resolve(sample_case)
        assert mapping["{lender.name}"] == "First Bank"
        assert mapping["{borrower.name}"] == "Jane Smith"
        assert mapping["{borrower.email}"] == "jane@example.com"
        assert mapping["{borrower.phone}"] == "N/A"

    def test_alias_fallback_for_nonstandard_labels(self):
        case = _case(parties=[
            Party(id="1", name="Acme Mortgagee Corp", type="Mortgagee"),
            Party(id="2", name="John Doe", type="Mortgagor"),
        ])
        mapping = resolve(case)
        assert mapping["{lender.name}"] == "Acme Mortgagee Corp"
        assert mapping["{borrower.name}"] == "John Doe"
        assert mapping["{mortgagee.name}"] == "Acme Mortgagee Corp"

    def test_alias_is_first_match(self):
        case = _case(parties=[
            Party(id="1", name="Second Lender Inc", type="Secondary Lender"),
            Party(id="2", name="Third Lender Inc", type="Tertiary Lender"),
        ])
        assert resolve(case)["{lender.name}"] == "Second Lender Inc"

    def test_exact_type_beats_alias(self):
        case = _case(parties=[
            Party(id="1", name="Acme Mortgagee Corp", type="Mortgagee"),
            Party(id="2", name="First Bank", type="Lender"),
        ])
        assert resolve(case)["{lender.name}"] == "First Bank"

    def test_last_party_of_a_type_wins(self):
        case = _case(parties=[
            Party(id="1", name="Jane Smith", type="Borrower"),
            Party(id="2", name="John Smith", type="Borrower"),
        ])
        assert resolve(case)["{borrower.name}"] == "John Smith"

    def test_no_matching_party_leaves_token_unbound(self):
        mapping = resolve(_case(parties=[Party(id="1", name="Pat", type="Lawyer")]))
        assert "{lender.name}" not in mapping
        assert mapping["{lawyer.name}"] == "Pat"


class TestAccruedInterest:
    def test_days_times_per_diem(self):
        mortgage = Mortgage(id="m", registration_number="M", start_date=date(2024, 1, 1), per_diem_interest=10.0)
        assert accrued_interest(mortgage, today=date(2024, 1, 31)) == pytest.approx(300.0)

    def test_missing_inputs(self):
        assert accrued_interest(Mortgage(id="m", registration_number="M", per_diem_interest=10.0)) is None


def test_find_party_is_case_insensitive():
    parties = [Party(id="1", name="X", type="MORTGAGEE")]
    assert find_party(parties, ("mortgagee",)).name == "X"
