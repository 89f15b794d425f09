"""Event-driven editing of an invoice with synchronous recompute.

Each input change runs the dependency chain for the affected line, in order:
extra VATs, line VAT, line total, then the invoice subtotal, total and total in
words. Writes equal to the stored value are skipped, so re-running the chain
on unchanged inputs is a no-op.
"""

import logging
from typing import Any, Literal

from invoicing.invoice.line_items import LineItemCalculator
from invoicing.invoice.schema import ChargeSetting, ExtraDeliverable, Invoice, LineItem
from invoicing.invoice.totals import InvoiceTotalsAggregator
from invoicing.shared import metrics
from invoicing.shared.config import Settings, get_settings

logger = logging.getLogger(__name__)

ChargeKind = Literal["discount", "tax", "shipping"]

LINE_FIELDS = ("extra_vat", "line_vat", "line_total")
INVOICE_FIELDS = ("sub_total", "total_amount", "total_in_words")
EXTRA_TEXT_FIELDS = {"name", "row_name", "service_type"}
ITEM_TEXT_FIELDS = {"passenger_name", "name", "description", "service_type"}


class InvoiceEditor:
    """Applies user edits to an invoice and keeps derived fields current.

    Attributes:
        invoice: Invoice being edited (mutated in place)
        settings: Application settings
    """

    def __init__(self, invoice: Invoice | None = None, settings: Settings | None = None) -> None:
        """Initialize editor and bring every derived field up to date.

        Args:
            invoice: Invoice to edit; a new one with a single blank line if omitted
            settings: Application settings
        """
        self.settings = settings or get_settings()
        self.invoice = invoice if invoice is not None else Invoice()
        if not self.invoice.items:
            self.invoice.items.append(LineItem())

        self._line_calculators = [LineItemCalculator() for _ in self.invoice.items]
        self._totals = InvoiceTotalsAggregator()
        self.recalculate_all()

    # Recompute

    def recalculate_all(self) -> list[str]:
        """Recompute every line and the invoice totals.

        Returns:
            Names of derived fields written (duplicates collapsed)
        """
        written: list[str] = []
        for index in range(len(self.invoice.items)):
            for field in self._recalculate_line(index):
                if field not in written:
                    written.append(field)
        return written + self._recalculate_totals()

    def _recalculate_line(self, index: int) -> list[str]:
        written = self._line_calculators[index].recalculate(self.invoice.items[index])
        self._record(LINE_FIELDS, written)
        if written:
            logger.debug(f"Line {index} recomputed: {', '.join(written)}")
        return written

    def _recalculate_totals(self) -> list[str]:
        written = self._totals.recalculate(self.invoice)
        self._record(INVOICE_FIELDS, written)
        return written

    def _on_line_changed(self, index: int) -> list[str]:
        return self._recalculate_line(index) + self._recalculate_totals()

    def _record(self, fields: tuple[str, ...], written: list[str]) -> None:
        if not self.settings.metrics_enabled:
            return
        for field in fields:
            if field in written:
                metrics.recompute_writes_total.labels(field=field).inc()
            else:
                metrics.recompute_skips_total.labels(field=field).inc()

    # Line inputs

    def set_rate(self, index: int, value: Any) -> list[str]:
        """Change a line's rate. Clearing it leaves VAT and total as they were."""
        self.invoice.items[index].rate = _raw(value)
        return self._on_line_changed(index)

    def set_vat_percentage(self, index: int, value: Any) -> list[str]:
        self.invoice.items[index].vat_percentage = _raw(value)
        return self._on_line_changed(index)

    def set_item_detail(self, index: int, field: str, value: str | None) -> None:
        """Change a descriptive field (passenger name, airline, route, service type)."""
        if field not in ITEM_TEXT_FIELDS:
            raise ValueError(f"Unknown item field: '{field}'")
        setattr(self.invoice.items[index], field, value)

    # Extra deliverables

    def add_extra(self, index: int) -> list[str]:
        """Append a blank extra deliverable to a line."""
        self.invoice.items[index].extra_deliverables.append(ExtraDeliverable.blank())
        return self._on_line_changed(index)

    def remove_extra(self, index: int, extra_index: int) -> list[str]:
        del self.invoice.items[index].extra_deliverables[extra_index]
        return self._on_line_changed(index)

    def set_extra_amount(self, index: int, extra_index: int, value: Any) -> list[str]:
        self._extra(index, extra_index).amount = _raw(value)
        return self._on_line_changed(index)

    def set_extra_vat_percentage(self, index: int, extra_index: int, value: Any) -> list[str]:
        self._extra(index, extra_index).vat_percentage = _raw(value)
        return self._on_line_changed(index)

    def set_extra_field(
        self, index: int, extra_index: int, field: str, value: str | None
    ) -> list[str]:
        """Change an extra's name, row name or service type."""
        if field not in EXTRA_TEXT_FIELDS:
            raise ValueError(f"Unknown extra deliverable field: '{field}'")
        setattr(self._extra(index, extra_index), field, value)
        return self._on_line_changed(index)

    def set_extra_show_vat(self, index: int, extra_index: int, show: bool) -> list[str]:
        """Toggle whether an extra's VAT appears in the displayed VAT row."""
        self._extra(index, extra_index).show_vat = show
        return self._on_line_changed(index)

    def set_extra_column_visibility(
        self, index: int, extra_index: int, column: str, visible: bool
    ) -> list[str]:
        """Show or hide one column of an extra deliverable."""
        show_columns = self._extra(index, extra_index).show_columns
        if column not in type(show_columns).model_fields:
            raise ValueError(f"Unknown extra deliverable column: '{column}'")
        setattr(show_columns, column, visible)
        return self._on_line_changed(index)

    def _extra(self, index: int, extra_index: int) -> ExtraDeliverable:
        return self.invoice.items[index].extra_deliverables[extra_index]

    # Line lifecycle

    def add_item(self) -> int:
        """Append a blank line and return its index."""
        self.invoice.items.append(LineItem())
        self._line_calculators.append(LineItemCalculator())
        index = len(self.invoice.items) - 1
        self._on_line_changed(index)
        return index

    def remove_item(self, index: int) -> bool:
        """Delete a line unless it is the only one left.

        Returns:
            True if the line was removed
        """
        if len(self.invoice.items) <= 1:
            logger.warning("Refusing to remove the only line item of the invoice")
            return False

        del self.invoice.items[index]
        del self._line_calculators[index]
        self._recalculate_totals()
        return True

    def move_item_up(self, index: int) -> bool:
        if index <= 0 or index >= len(self.invoice.items):
            return False
        self._swap(index, index - 1)
        return True

    def move_item_down(self, index: int) -> bool:
        if index < 0 or index >= len(self.invoice.items) - 1:
            return False
        self._swap(index, index + 1)
        return True

    def _swap(self, first: int, second: int) -> None:
        items = self.invoice.items
        items[first], items[second] = items[second], items[first]
        calculators = self._line_calculators
        calculators[first], calculators[second] = calculators[second], calculators[first]

    # Invoice-level inputs

    def set_charge(
        self, kind: ChargeKind, amount: Any, amount_type: str = "amount"
    ) -> list[str]:
        """Change the discount, tax or shipping setting."""
        if kind not in ("discount", "tax", "shipping"):
            raise ValueError(f"Unknown charge: '{kind}'")
        setting = ChargeSetting(amount=_raw(amount), amount_type=amount_type)
        setattr(self.invoice, f"{kind}_details", setting)
        return self._recalculate_totals()

    def set_currency(self, currency: str | None) -> list[str]:
        self.invoice.currency = currency
        return self._recalculate_totals()


def _raw(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return str(value)
