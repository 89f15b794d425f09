"""VAT and total calculation for a single invoice line.

Total = rate + VAT + sum of extra amounts + sum of extra VATs. Every extra's
VAT is included regardless of its ``show_vat`` flag, which only affects how the
line is displayed.
"""

import logging
from collections.abc import Sequence
from decimal import localcontext
from typing import Any

from pydantic import BaseModel

from invoicing.invoice.extras import ExtraDeliverableCalculator
from invoicing.invoice.schema import ExtraDeliverable, LineItem
from invoicing.shared.numeric import (
    MONEY_PRECISION,
    ZERO,
    format_money,
    is_present,
    percentage_of,
    quantize_money,
    to_decimal,
)

logger = logging.getLogger(__name__)


class LineTotals(BaseModel):
    """Derived values of a line item.

    Attributes:
        vat_amount: VAT on the rate (two-decimal string)
        total: Line total including extras and their VAT (two-decimal string)
        quantity: Always 1, one line per passenger
    """

    vat_amount: str
    total: str
    quantity: int = 1


def calculate_line_vat(rate: Any, vat_percentage: Any) -> str:
    """Compute VAT on a line's rate.

    Returns:
        round(rate x vat_percentage / 100, 2) when both are present, the
        percentage is non-negative and the rate is positive; otherwise "0.00"
    """
    if not (is_present(rate) and is_present(vat_percentage)):
        return format_money(ZERO)

    rate_value = to_decimal(rate)
    percentage_value = to_decimal(vat_percentage)
    if percentage_value >= ZERO and rate_value > ZERO:
        return format_money(percentage_of(rate_value, percentage_value))
    return format_money(ZERO)


def calculate_line_total(rate: Any, vat_amount: Any, extras: Sequence[ExtraDeliverable]) -> str:
    """Sum rate, VAT, and the amount and VAT of every extra deliverable."""
    with localcontext(prec=MONEY_PRECISION):
        total = to_decimal(rate) + to_decimal(vat_amount)
        for extra in extras:
            if is_present(extra.amount):
                total += to_decimal(extra.amount)
            if is_present(extra.vat):
                total += to_decimal(extra.vat)
    return format_money(quantize_money(total))


def calculate_line(
    rate: Any, vat_percentage: Any, extras: Sequence[ExtraDeliverable]
) -> LineTotals | None:
    """Compute VAT and total for a line whose extras already carry their VAT.

    Returns:
        LineTotals, or None when the rate is absent (nothing is recomputed and
        previously stored values stay as they are)
    """
    if not is_present(rate):
        return None

    vat_amount = calculate_line_vat(rate, vat_percentage)
    return LineTotals(
        vat_amount=vat_amount,
        total=calculate_line_total(rate, vat_amount, extras),
    )


class LineItemCalculator:
    """Keeps one line item's derived fields in step with its inputs.

    Owns the extras calculator for the line so the extras snapshot travels
    with the line when it is reordered.
    """

    def __init__(self) -> None:
        self.extras = ExtraDeliverableCalculator()

    def recalculate(self, item: LineItem) -> list[str]:
        """Recompute extra VATs, then line VAT, then line total.

        Writes are skipped for values equal to those already stored.

        Args:
            item: Line item to update in place

        Returns:
            Names of the derived fields that were written
        """
        written: list[str] = []
        if self.extras.recalculate(item.extra_deliverables):
            written.append("extra_vat")

        totals = calculate_line(item.rate, item.vat_percentage, item.extra_deliverables)
        if totals is None:
            logger.debug("Rate is empty, keeping stored VAT and total")
            return written

        if totals.vat_amount != item.vat_amount:
            item.vat_amount = totals.vat_amount
            written.append("line_vat")
        if totals.total != item.total:
            item.total = totals.total
            written.append("line_total")
        item.quantity = totals.quantity

        return written
