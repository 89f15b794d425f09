"""VAT calculation for extra deliverables attached to a line item.

An extra's ``vat`` lives in the same collection as its inputs, so recompute is
gated on a snapshot key built from the inputs only (VAT percentage and amount).
Writing a VAT value never changes the key and cannot re-trigger itself.
"""

import logging
from collections.abc import Sequence
from typing import Any

from invoicing.invoice.schema import ExtraDeliverable
from invoicing.shared.numeric import ZERO, format_money, is_present, percentage_of, to_decimal

logger = logging.getLogger(__name__)


def calculate_extra_vat(amount: Any, vat_percentage: Any) -> str:
    """Compute an extra deliverable's VAT amount.

    VAT is only computed when both inputs are present; an amount of exactly
    zero still counts as present.

    Args:
        amount: Extra charge amount as entered
        vat_percentage: VAT percentage as entered

    Returns:
        VAT as a two-decimal string, "0.00" when inputs are missing or negative
    """
    if not (is_present(amount) and is_present(vat_percentage)):
        return format_money(ZERO)

    amount_value = to_decimal(amount)
    percentage_value = to_decimal(vat_percentage)
    if amount_value < ZERO or percentage_value < ZERO:
        return format_money(ZERO)

    return format_money(percentage_of(amount_value, percentage_value))


def extras_snapshot_key(extras: Sequence[ExtraDeliverable]) -> str:
    """Build the change-detection key from the VAT inputs of every extra.

    Two different inputs can only share a key when one of them contains "_",
    which makes it malformed, so both compute zero VAT.
    """
    return "|".join(f"{extra.vat_percentage or ''}_{extra.amount or ''}" for extra in extras)


class ExtraDeliverableCalculator:
    """Recomputes VAT for the extras of one line item.

    Holds the snapshot key of the last inputs it saw. A call with unchanged
    inputs is a no-op, so the calculator can be invoked on every change to the
    extras collection, including changes caused by its own writes.
    """

    def __init__(self) -> None:
        self._previous_key: str | None = None

    def recalculate(self, extras: Sequence[ExtraDeliverable]) -> list[int]:
        """Update ``vat`` on each extra whose inputs produce a new value.

        Args:
            extras: Extras of a single line item, in display order

        Returns:
            Indices of extras whose ``vat`` was written
        """
        key = extras_snapshot_key(extras)
        if key == self._previous_key:
            return []
        self._previous_key = key

        written: list[int] = []
        for index, extra in enumerate(extras):
            vat = calculate_extra_vat(extra.amount, extra.vat_percentage)
            if vat != extra.vat:
                extra.vat = vat
                written.append(index)

        if written:
            logger.debug(f"Extra deliverable VAT updated for indices {written}")
        return written

    def reset(self) -> None:
        """Forget the last snapshot so the next call always recomputes."""
        self._previous_key = None
