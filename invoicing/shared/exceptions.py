"""Exceptions raised by the invoicing core."""


class EmptyInvoiceSetError(ValueError):
    """Statement requested for an empty invoice list."""

    def __init__(self, message: str = "No invoices provided") -> None:
        super().__init__(message)
