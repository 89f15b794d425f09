"""Column visibility and row shaping for invoice line items.

Visibility is display-only: nothing here feeds back into line or invoice
arithmetic.
"""

from collections.abc import Mapping

from invoicing.invoice.schema import (
    ColumnNames,
    ExtraDeliverable,
    ExtraDeliverableColumnNames,
    Invoice,
    LineItem,
)
from invoicing.shared.numeric import ZERO, format_money, is_present, to_decimal

# Logical item columns in display order
LINE_COLUMNS = ("passenger_name", "route", "airlines", "service_type", "amount")


class ColumnVisibilityResolver:
    """Resolves which item columns are shown and shapes rows to match.

    Attributes:
        toggles: Visibility per column in LINE_COLUMNS (missing means visible)
        column_names: Display names for item columns
        extra_column_names: Display names for extra deliverable columns
        show_vat: Whether the merged VAT row is displayed under each line
    """

    def __init__(
        self,
        toggles: Mapping[str, bool] | None = None,
        column_names: ColumnNames | None = None,
        extra_column_names: ExtraDeliverableColumnNames | None = None,
        show_vat: bool = False,
    ) -> None:
        toggles = toggles or {}
        self.toggles = {column: toggles.get(column, True) is not False for column in LINE_COLUMNS}
        self.column_names = column_names or ColumnNames()
        self.extra_column_names = extra_column_names or ExtraDeliverableColumnNames()
        self.show_vat = show_vat

    @classmethod
    def for_invoice(cls, invoice: Invoice) -> "ColumnVisibilityResolver":
        """Build a resolver from an invoice's own toggles and column names."""
        return cls(
            toggles={
                "passenger_name": invoice.show_passenger_name,
                "route": invoice.show_route,
                "airlines": invoice.show_airlines,
                "service_type": invoice.show_service_type,
                "amount": invoice.show_amount,
            },
            column_names=invoice.column_names,
            extra_column_names=invoice.extra_deliverable_column_names,
            show_vat=invoice.show_vat,
        )

    def is_visible(self, column: str) -> bool:
        return self.toggles.get(column, False)

    def visible_columns(self) -> list[str]:
        """Visible columns in display order."""
        return [column for column in LINE_COLUMNS if self.toggles[column]]

    def visible_count(self) -> int:
        """Number of visible columns, used by renderers for cell spanning."""
        return len(self.visible_columns())

    def headers(self) -> list[str]:
        """Display names of the visible columns."""
        return [getattr(self.column_names, column) for column in self.visible_columns()]

    def shape_line(self, item: LineItem, index: int = 0) -> dict[str, str]:
        """Visible fields of a line item row.

        Args:
            item: Line item to shape
            index: Position of the line, used for the passenger placeholder

        Returns:
            Mapping of visible column to display value, in display order
        """
        values = {
            "passenger_name": item.passenger_name or f"Passenger {index + 1}",
            "route": item.description or "",
            "airlines": item.name or "",
            "service_type": item.service_type or "-",
            "amount": format_money(item.rate),
        }
        return {column: values[column] for column in self.visible_columns()}

    def shape_extra(self, extra: ExtraDeliverable) -> dict[str, str] | None:
        """Visible fields of an extra deliverable row.

        The extra's own column toggles blank out individual cells; the
        invoice toggles decide which cells exist.

        Returns:
            Mapping of visible column to display value, or None when the extra
            carries no data at all (an amount of zero still counts as data)
        """
        if not _has_data(extra):
            return None

        show = extra.show_columns
        values = {
            "passenger_name": extra.row_name or "",
            "route": (extra.name or "") if show.name else "",
            "airlines": "",
            "service_type": (extra.service_type or "-") if show.service_type else "-",
            "amount": format_money(extra.amount) if show.amount and extra.amount is not None else "",
        }
        return {column: values[column] for column in self.visible_columns()}

    def extra_headers(self, extra: ExtraDeliverable) -> list[str]:
        """Display names of the columns an extra deliverable shows in the editor."""
        show = extra.show_columns
        return [
            getattr(self.extra_column_names, column)
            for column in ("name", "service_type", "amount", "vat_percentage", "vat")
            if getattr(show, column)
        ]

    def display_vat(self, item: LineItem) -> str | None:
        """VAT figure shown under a line: line VAT plus VAT of extras with show_vat on.

        This is a presentation value. The line total always includes every
        extra's VAT regardless of show_vat.

        Returns:
            Two-decimal string, or None when the VAT row is hidden or zero
        """
        if not self.show_vat:
            return None

        merged = max(to_decimal(item.vat_amount), ZERO)
        for extra in item.extra_deliverables:
            vat = to_decimal(extra.vat)
            if extra.show_vat and vat > ZERO:
                merged += vat

        if merged <= ZERO:
            return None
        return format_money(merged)


def _has_data(extra: ExtraDeliverable) -> bool:
    return (
        extra.amount is not None
        or is_present(extra.name)
        or is_present(extra.row_name)
        or is_present(extra.service_type)
        or extra.vat_percentage is not None
    )
