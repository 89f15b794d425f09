"""Preview a statement built from a JSON file of saved invoices.

The file holds a list of invoice documents as stored by the application
(either flat or with fields nested under ``details``).

Usage:
    python scripts/preview_statement.py invoices.json --billed-to "Acme Travel"
"""

import json
import logging
from pathlib import Path

from invoicing.invoice.editor import InvoiceEditor
from invoicing.invoice.schema import Invoice
from invoicing.shared.config import Settings, get_settings
from invoicing.statement.aggregator import StatementAggregator
from invoicing.statement.schema import StatementRequest
from invoicing.statement.service import StatementService

logger = logging.getLogger(__name__)


def load_invoices(path: Path, recalculate: bool = False) -> list[Invoice]:
    """Load invoice documents from a JSON file.

    Args:
        path: JSON file containing a list of invoice documents
        recalculate: Refresh line and invoice totals before returning

    Returns:
        Parsed invoices in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file does not contain a JSON list
    """
    if not path.exists():
        raise FileNotFoundError(f"Invoice file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of invoices in {path}")

    invoices = [Invoice.model_validate(document) for document in data]
    if recalculate:
        for invoice in invoices:
            InvoiceEditor(invoice)
    logger.info(f"Loaded {len(invoices)} invoices from {path}")
    return invoices


def render_preview(request: StatementRequest, settings: Settings) -> str:
    """Render a plain-text preview of the statement, or the rejection reason."""
    result = StatementService(settings).generate(request)
    if not result.success or result.statement is None:
        return f"Statement not generated: {result.error}"

    statement = result.statement
    lines = [statement.title, f"Billed To: {statement.billed_to_name or '-'}", ""]
    for row in StatementAggregator(settings).shape_rows(statement):
        lines.append(" | ".join(row.values()))
    lines.append("")
    lines.append(f"TOTAL {statement.statement_total} {statement.currency}")
    return "\n".join(lines)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Preview a statement for saved invoices")
    parser.add_argument("invoices", type=Path, help="JSON file with a list of invoices")
    parser.add_argument("--billed-to", default=None, help="Name for the 'Billed To' block")
    parser.add_argument("--title", default=None, help="Statement heading")
    parser.add_argument(
        "--recalculate",
        action="store_true",
        help="Recompute line and invoice totals before building the statement",
    )

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")

    request = StatementRequest(
        invoices=load_invoices(args.invoices, recalculate=args.recalculate),
        billed_to_name=args.billed_to,
        title=args.title,
    )
    print(render_preview(request, settings))
