"""Unit tests for invoice date parsing and statement formatting."""

from datetime import date, datetime, timedelta, timezone

import pytest

from invoicing.shared.dates import format_statement_date, parse_invoice_date


def test_parse_iso_date() -> None:
    """Test parsing YYYY-MM-DD strings."""
    assert parse_invoice_date("2024-01-15") == datetime(2024, 1, 15)


def test_parse_iso_datetime_with_offset() -> None:
    """Aware timestamps are normalised to naive UTC."""
    assert parse_invoice_date("2024-01-15T02:00:00+02:00") == datetime(2024, 1, 15, 0, 0)
    assert parse_invoice_date("2024-03-01T10:30:00Z") == datetime(2024, 3, 1, 10, 30)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("01/31/2024", datetime(2024, 1, 31)),
        ("January 15, 2024", datetime(2024, 1, 15)),
        ("Jan 15, 2024", datetime(2024, 1, 15)),
        ("15 Jan 2024", datetime(2024, 1, 15)),
    ],
)
def test_parse_other_formats(text: str, expected: datetime) -> None:
    """Test the non-ISO formats."""
    assert parse_invoice_date(text) == expected


def test_parse_date_objects() -> None:
    """Test date and datetime inputs."""
    assert parse_invoice_date(date(2024, 2, 1)) == datetime(2024, 2, 1)
    aware = datetime(2024, 2, 1, 12, 0, tzinfo=timezone(timedelta(hours=4)))
    assert parse_invoice_date(aware) == datetime(2024, 2, 1, 8, 0)


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", 12345])
def test_parse_missing_or_invalid(value: object) -> None:
    """Missing or unparsable dates yield None."""
    assert parse_invoice_date(value) is None


def test_format_statement_date() -> None:
    """Test the D-Mon-YY statement format."""
    assert format_statement_date("2022-12-21") == "21-Dec-22"
    assert format_statement_date("2024-01-05") == "5-Jan-24"


def test_format_statement_date_missing() -> None:
    """Missing dates are shown as a dash."""
    assert format_statement_date(None) == "-"
    assert format_statement_date("soon") == "-"
