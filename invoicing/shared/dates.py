"""Invoice date parsing and statement date display."""

from datetime import UTC, date, datetime
from typing import Any

# Formats accepted besides ISO 8601
DATE_FORMATS = [
    "%m/%d/%Y",  # 01/15/2024
    "%d/%m/%Y",  # 15/01/2024
    "%B %d, %Y",  # January 15, 2024
    "%b %d, %Y",  # Jan 15, 2024
    "%d %B %Y",  # 15 January 2024
    "%d %b %Y",  # 15 Jan 2024
]


def parse_invoice_date(value: Any) -> datetime | None:
    """Parse an invoice date into a naive UTC datetime.

    Args:
        value: date, datetime or date string as stored on the invoice

    Returns:
        Parsed datetime, or None if the value is missing or unparsable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return _naive_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def format_statement_date(value: Any) -> str:
    """Format an invoice date for a statement row, e.g. '5-Jan-24'.

    Returns '-' when the date is missing or unparsable.
    """
    parsed = parse_invoice_date(value)
    if parsed is None:
        return "-"
    return f"{parsed.day}-{parsed.strftime('%b')}-{parsed.strftime('%y')}"
