"""Statement generation entry points.

``build_statement`` rejects an empty invoice list before aggregation starts;
``StatementService`` wraps it in a StatementResult for callers that prefer a
result object to an exception.
"""

import logging

from invoicing.shared import metrics
from invoicing.shared.config import Settings
from invoicing.shared.exceptions import EmptyInvoiceSetError
from invoicing.statement.aggregator import StatementAggregator
from invoicing.statement.schema import Statement, StatementRequest, StatementResult

logger = logging.getLogger(__name__)


def build_statement(request: StatementRequest, settings: Settings) -> Statement:
    """Build a statement for the requested invoices.

    Args:
        request: Invoices plus optional billed-to name, date range and bank details
        settings: Application settings

    Returns:
        Built statement

    Raises:
        EmptyInvoiceSetError: If the request contains no invoices
    """
    if not request.invoices:
        raise EmptyInvoiceSetError()

    aggregator = StatementAggregator(settings)
    return aggregator.aggregate(
        request.invoices,
        billed_to_name=request.billed_to_name,
        date_range=request.date_range,
        bank_details=request.bank_details,
        title=request.title,
    )


class StatementService:
    """Generates statements and records generation metrics."""

    def __init__(self, settings: Settings) -> None:
        """Initialize statement service.

        Args:
            settings: Application settings
        """
        self.settings = settings

    def generate(self, request: StatementRequest) -> StatementResult:
        """Generate a statement, reporting an empty request as a failed result.

        Args:
            request: Statement request

        Returns:
            StatementResult with the statement, or success=False and an error
        """
        try:
            statement = build_statement(request, self.settings)
        except EmptyInvoiceSetError as e:
            logger.warning(f"Statement request rejected: {e}")
            self._record("rejected")
            return StatementResult(statement=None, success=False, error=str(e))

        logger.info(
            f"Generated statement with {statement.invoice_count} invoices, "
            f"{len(statement.rows)} rows, total {statement.statement_total} {statement.currency}"
        )
        self._record("success", rows=len(statement.rows))
        return StatementResult(statement=statement, success=True)

    def _record(self, status: str, rows: int | None = None) -> None:
        if not self.settings.metrics_enabled:
            return
        metrics.statements_generated_total.labels(status=status).inc()
        if rows is not None:
            metrics.statement_rows.observe(rows)
