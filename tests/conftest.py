"""
Shared pytest fixtures for Foreclosure Case Manager tests.

Provides:
- Mock connection context manager
- Mock cursor with database methods
- Sample case payloads and Case aggregates
- A template store in a temporary directory
"""
import sys
from contextlib import contextmanager, ExitStack
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from models import Case  # noqa: E402
from templates import TemplateManager  # noqa: E402

# Modules that import get_connection by name
CONNECTION_USERS = [
    "db.connection.get_connection",
    "db.cases.get_connection",
    "db.parties.get_connection",
    "db.deadlines.get_connection",
    "db.documents.get_connection",
    "dashboard.auth.get_connection",
]


@pytest.fixture
def mock_cursor():
    """
    Fixture providing a mock cursor with database methods.

    Supports:
    - execute(sql, params)
    - fetchone()
    - fetchall()
    """
    cursor = MagicMock()
    cursor.fetchone = MagicMock(return_value=None)
    cursor.fetchall = MagicMock(return_value=[])
    cursor.execute = MagicMock(return_value=None)
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_connection(mock_cursor):
    """
    Fixture providing a mock PostgreSQL connection.

    Returns a mock connection that:
    - Creates a mock cursor via cursor() method
    - Supports commit() and rollback() calls
    """
    conn = MagicMock()
    conn.cursor = MagicMock(return_value=mock_cursor)
    conn.commit = MagicMock()
    conn.rollback = MagicMock()
    conn.autocommit = False
    return conn


@pytest.fixture
def mock_get_connection(mock_connection):
    """
    Patch get_connection everywhere it is imported so it yields mock_connection.
    """
    @contextmanager
    def get_connection_mock(autocommit=False):
        mock_connection.autocommit = autocommit
        yield mock_connection

    with ExitStack() as stack:
        for target in CONNECTION_USERS:
            stack.enter_context(patch(target, side_effect=get_connection_mock))
        yield get_connection_mock


@pytest.fixture
def assert_sql_contains():
    """
    Helper fixture for asserting SQL content in mocked execute calls.

    Usage:
        cursor.execute("SELECT * FROM foo WHERE id = %s", (1,))
        assert_sql_contains(cursor, "SELECT", "FROM foo")
    """
    def _assert(cursor, *keywords):
        """Assert that all keywords appear in any execute call."""
        assert cursor.execute.called, "execute() was not called"
        for call in cursor.execute.call_args_list:
            sql = call[0][0]  # First positional arg is SQL
            if all(kw in sql for kw in keywords):
                return True
        raise AssertionError(
            f"SQL containing all of {keywords} not found in execute calls: "
            f"{[str(c) for c in cursor.execute.call_args_list]}"
        )
    return _assert


@pytest.fixture
def today():
    return date(2024, 3, 5)


@pytest.fixture
def sample_case_data():
    """A camelCase case payload as the API returns it."""
    return {
        "id": "7d1f6a0e-0000-4000-8000-000000000001",
        "fileNumber": "F-2024-001",
        "status": "Demand Letter Sent",
        "property": {
            "id": "prop-1",
            "address": {
                "street": "123 Main St",
                "city": "Vancouver",
                "province": "BC",
                "postalCode": "V5K 0A1",
            },
            "pid": "012-345-678",
            "propertyType": "Residential",
        },
        "mortgage": {
            "id": "mort-1",
            "registrationNumber": "CA1234567",
            "principal": 800000,
            "interestRate": 3.5,
            "startDate": "2024-01-01",
            "currentBalance": 750000,
            "perDiemInterest": 76.7123,
            "arrears": 12500.5,
        },
        "parties": [
            {"id": "p-1", "name": "First Bank", "type": "Lender",
             "contactInfo": {"email": "legal@firstbank.example", "phone": "604-555-0100"}},
            {"id": "p-2", "name": "Jane Smith", "type": "Borrower",
             "contactInfo": {"email": "jane@example.com", "address": "123 Main St"}},
        ],
        "court": {
            "fileNumber": "H-240001",
            "registry": "Vancouver",
            "hearingDate": "2024-04-15",
            "judgeName": "Justice Lee",
        },
        "notes": "Borrower requested a payout statement.",
        "createdAt": "2024-01-10T09:30:00",
        "updatedAt": "2024-02-01T14:00:00",
    }


@pytest.fixture
def sample_case(sample_case_data) -> Case:
    return Case.from_dict(sample_case_data)


@pytest.fixture
def template_manager(tmp_path) -> TemplateManager:
    """A template store rooted in a temporary directory."""
    return TemplateManager(templates_dir=tmp_path / "templates")
