"""Statement data models.

A statement is derived from a set of issued invoices and never written back
into them: rows hold references to the source invoices and line items.
"""

from pydantic import BaseModel, Field

from invoicing.invoice.schema import DocumentModel, Invoice, LineItem


class BankDetail(DocumentModel):
    """Saved payment profile printed on a statement for remittance."""

    name: str | None = Field(None, description="Label of the saved profile")
    bank_name: str
    account_name: str
    account_number: str
    iban: str | None = None
    swift_code: str | None = None


class DateRange(BaseModel):
    """Period covered by a statement, as display strings."""

    start: str | None = None
    end: str | None = None


class PassengerRow(BaseModel):
    """One flattened statement row: a line item of an included invoice."""

    invoice: Invoice
    item: LineItem
    item_index: int


class StatementRow(BaseModel):
    """Display values of a statement row."""

    date: str
    invoice_number: str
    passenger_name: str
    route: str
    amount: str


class Statement(BaseModel):
    """Client-facing statement built from several invoices.

    Attributes:
        title: Heading of the statement
        rows: Passenger rows in statement order
        statement_total: Sum of row totals (two-decimal string)
        currency: Currency of the first invoice, or the configured fallback
        invoice_count: Number of invoices included
        billed_to_name: Name shown in the 'Billed To' block
        date_range: Period covered, if given
        bank_details: Payment profiles printed on the statement
    """

    title: str
    rows: list[PassengerRow]
    statement_total: str
    currency: str
    invoice_count: int
    billed_to_name: str | None = None
    date_range: DateRange | None = None
    bank_details: list[BankDetail] = Field(default_factory=list)


class StatementRequest(BaseModel):
    """Input for statement generation."""

    invoices: list[Invoice]
    title: str | None = None
    billed_to_name: str | None = None
    date_range: DateRange | None = None
    bank_details: list[BankDetail] = Field(default_factory=list)


class StatementResult(BaseModel):
    """Result of statement generation.

    Attributes:
        statement: Built statement or None if generation was rejected
        success: Whether a statement was produced
        error: Error message if generation was rejected
    """

    statement: Statement | None
    success: bool
    error: str | None = None
