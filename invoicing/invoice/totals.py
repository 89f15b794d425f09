"""Invoice subtotal and grand total.

The subtotal is the sum of line totals. Adjustments cascade in a fixed order,
discount then tax then shipping, each either a flat amount or a percentage of
the running value at that step.
"""

import logging
from collections.abc import Sequence
from decimal import Decimal, localcontext

from pydantic import BaseModel

from invoicing.invoice.schema import ChargeSetting, Invoice, LineItem
from invoicing.invoice.words import amount_in_words
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


class InvoiceTotals(BaseModel):
    """Derived invoice-level amounts, all two-decimal strings.

    Attributes:
        sub_total: Sum of line totals
        discount: Amount subtracted by the discount step
        tax: Amount added by the tax step
        shipping: Amount added by the shipping/service-fee step
        total: Grand total after the cascade
        total_in_words: Grand total spelled out with its currency
    """

    sub_total: str
    discount: str
    tax: str
    shipping: str
    total: str
    total_in_words: str


def calculate_sub_total(items: Sequence[LineItem]) -> Decimal:
    """Sum line totals in list order, malformed totals counting as zero."""
    sub_total = ZERO
    with localcontext(prec=MONEY_PRECISION):
        for item in items:
            sub_total += to_decimal(item.total)
    return quantize_money(sub_total)


def charge_adjustment(running: Decimal, setting: ChargeSetting) -> Decimal:
    """Size of one cascade step applied to the running value.

    Returns:
        The flat amount, or the percentage of ``running``; zero when the
        setting has no amount
    """
    if not is_present(setting.amount):
        return ZERO

    value = to_decimal(setting.amount)
    if setting.amount_type == "percentage":
        return percentage_of(running, value)
    return quantize_money(value)


def calculate_invoice_totals(invoice: Invoice) -> InvoiceTotals:
    """Compute subtotal, cascade adjustments and total for an invoice."""
    sub_total = calculate_sub_total(invoice.items)

    with localcontext(prec=MONEY_PRECISION):
        running = sub_total
        discount = charge_adjustment(running, invoice.discount_details)
        running -= discount
        tax = charge_adjustment(running, invoice.tax_details)
        running += tax
        shipping = charge_adjustment(running, invoice.shipping_details)
        running += shipping

    total = quantize_money(running)
    return InvoiceTotals(
        sub_total=format_money(sub_total),
        discount=format_money(discount),
        tax=format_money(tax),
        shipping=format_money(shipping),
        total=format_money(total),
        total_in_words=amount_in_words(total, invoice.currency),
    )


class InvoiceTotalsAggregator:
    """Writes derived totals onto an invoice, skipping unchanged values."""

    def recalculate(self, invoice: Invoice) -> list[str]:
        """Refresh ``sub_total``, ``total_amount`` and ``total_amount_in_words``.

        Args:
            invoice: Invoice to update in place

        Returns:
            Names of the fields that were written
        """
        totals = calculate_invoice_totals(invoice)
        written: list[str] = []

        if totals.sub_total != invoice.sub_total:
            invoice.sub_total = totals.sub_total
            written.append("sub_total")
        if totals.total != invoice.total_amount:
            invoice.total_amount = totals.total
            written.append("total_amount")
        if totals.total_in_words != invoice.total_amount_in_words:
            invoice.total_amount_in_words = totals.total_in_words
            written.append("total_in_words")

        if written:
            logger.debug(f"Invoice totals updated: {', '.join(written)}")
        return written
