"""Multi-invoice statement aggregation.

Invoices are stable-sorted by date (undated first), every line item becomes a
row in original order, and the statement total is the sum of row totals.
Running the aggregation again on the same invoices gives the same rows in the
same order and the same total.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal, localcontext

from invoicing.invoice.columns import ColumnVisibilityResolver
from invoicing.invoice.schema import Invoice
from invoicing.shared.config import Settings
from invoicing.shared.dates import format_statement_date, parse_invoice_date
from invoicing.shared.numeric import (
    MONEY_PRECISION,
    ZERO,
    format_money,
    quantize_money,
    to_decimal,
)
from invoicing.statement.schema import (
    BankDetail,
    DateRange,
    PassengerRow,
    Statement,
    StatementRow,
)

logger = logging.getLogger(__name__)


def _date_sort_key(invoice: Invoice) -> tuple[int, datetime]:
    parsed = parse_invoice_date(invoice.invoice_date)
    if parsed is None:
        return (0, datetime.min)
    return (1, parsed)


def sort_invoices(invoices: Sequence[Invoice]) -> list[Invoice]:
    """Sort invoices by date, oldest first; equal dates keep input order."""
    return sorted(invoices, key=_date_sort_key)


def flatten_rows(invoices: Sequence[Invoice]) -> list[PassengerRow]:
    """One row per line item, invoice by invoice, items in their original order."""
    return [
        PassengerRow(invoice=invoice, item=item, item_index=index)
        for invoice in invoices
        for index, item in enumerate(invoice.items)
    ]


def sum_rows(rows: Sequence[PassengerRow]) -> Decimal:
    """Sum row totals; missing or malformed totals count as zero."""
    total = ZERO
    with localcontext(prec=MONEY_PRECISION):
        for row in rows:
            total += to_decimal(row.item.total)
    return quantize_money(total)


def statement_row(row: PassengerRow) -> StatementRow:
    """Display values of a statement row.

    The route falls back to the service type, then the airline, then '-'.
    """
    item = row.item
    return StatementRow(
        date=format_statement_date(row.invoice.invoice_date),
        invoice_number=row.invoice.invoice_number or "-",
        passenger_name=item.passenger_name or "-",
        route=item.description or item.service_type or item.name or "-",
        amount=format_money(item.total),
    )


class StatementAggregator:
    """Builds statements from already-validated invoices.

    Callers must reject an empty invoice list before calling ``aggregate``.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize aggregator.

        Args:
            settings: Application settings (currency fallback, default title)
        """
        self.settings = settings

    def aggregate(
        self,
        invoices: Sequence[Invoice],
        billed_to_name: str | None = None,
        date_range: DateRange | None = None,
        bank_details: Sequence[BankDetail] | None = None,
        title: str | None = None,
    ) -> Statement:
        """Sort, flatten and total a non-empty list of invoices.

        Args:
            invoices: Invoices to include
            billed_to_name: Name for the 'Billed To' block
            date_range: Period covered by the statement
            bank_details: Payment profiles to print
            title: Statement heading, defaults to the configured title

        Returns:
            Statement with rows, total and currency
        """
        rows = flatten_rows(sort_invoices(invoices))
        total = sum_rows(rows)
        currency = invoices[0].currency or self.settings.default_currency

        logger.debug(f"Aggregated {len(invoices)} invoices into {len(rows)} rows")

        return Statement(
            title=title or self.settings.statement_title,
            rows=rows,
            statement_total=format_money(total),
            currency=currency,
            invoice_count=len(invoices),
            billed_to_name=billed_to_name,
            date_range=date_range,
            bank_details=list(bank_details or []),
        )

    def shape_rows(
        self,
        statement: Statement,
        resolver: ColumnVisibilityResolver | None = None,
    ) -> list[dict[str, str]]:
        """Display rows of a statement with hidden columns removed.

        Date and invoice number are always shown. Name, route and amount follow
        the passenger name, route and amount toggles of the resolver.
        """
        resolver = resolver or ColumnVisibilityResolver()
        optional = [
            column
            for column in ("passenger_name", "route", "amount")
            if resolver.is_visible(column)
        ]
        fields = ["date", "invoice_number", *optional]

        shaped = []
        for row in statement.rows:
            values = statement_row(row).model_dump()
            shaped.append({field: values[field] for field in fields})
        return shaped
