"""Unit tests for invoice subtotal and cascade totals."""

from decimal import Decimal

import pytest

from invoicing.invoice.schema import ChargeSetting, Invoice, LineItem
from invoicing.invoice.totals import (
    InvoiceTotalsAggregator,
    calculate_invoice_totals,
    calculate_sub_total,
    charge_adjustment,
)


@pytest.fixture
def invoice() -> Invoice:
    """Invoice with two computed lines totalling 170.00."""
    return Invoice(
        currency="USD",
        items=[
            LineItem(rate="100", vat_percentage="10", vat_amount="10.00", total="110.00"),
            LineItem(rate="60", vat_amount="0.00", total="60.00"),
        ],
    )


def test_sub_total_sums_line_totals(invoice: Invoice) -> None:
    """Test subtotal over all lines."""
    assert calculate_sub_total(invoice.items) == Decimal("170.00")


def test_sub_total_ignores_malformed_totals() -> None:
    """Malformed or blank line totals count as zero."""
    items = [LineItem(total="10.50"), LineItem(total="oops"), LineItem(total="")]
    assert calculate_sub_total(items) == Decimal("10.50")


def test_totals_without_charges(invoice: Invoice) -> None:
    """With no charge settings the total equals the subtotal."""
    totals = calculate_invoice_totals(invoice)

    assert totals.sub_total == "170.00"
    assert totals.discount == "0.00"
    assert totals.tax == "0.00"
    assert totals.shipping == "0.00"
    assert totals.total == "170.00"
    assert totals.total_in_words == "One Hundred Seventy USD"


def test_cascade_order_with_percentages(invoice: Invoice) -> None:
    """Discount, then tax, then shipping, each on the running value."""
    invoice.discount_details = ChargeSetting(amount="10", amount_type="percentage")
    invoice.tax_details = ChargeSetting(amount="5", amount_type="amount")
    invoice.shipping_details = ChargeSetting(amount="2", amount_type="percentage")

    totals = calculate_invoice_totals(invoice)

    assert totals.discount == "17.00"  # 10% of 170
    assert totals.tax == "5.00"
    assert totals.shipping == "3.16"  # 2% of 158
    assert totals.total == "161.16"
    assert totals.total_in_words == "One Hundred Sixty-One and 16/100 USD"


def test_percentage_tax_applies_after_discount(invoice: Invoice) -> None:
    """Tax percentage is taken from the discounted value."""
    invoice.discount_details = ChargeSetting(amount="20")
    invoice.tax_details = ChargeSetting(amount="10", amount_type="percentage")

    totals = calculate_invoice_totals(invoice)

    assert totals.tax == "15.00"
    assert totals.total == "165.00"


def test_blank_charge_is_noop() -> None:
    """A charge without an amount adjusts nothing."""
    assert charge_adjustment(Decimal("100"), ChargeSetting(amount="")) == Decimal("0")
    assert charge_adjustment(Decimal("100"), ChargeSetting()) == Decimal("0")


def test_malformed_charge_coerces_to_zero() -> None:
    """Malformed charge amounts never raise."""
    setting = ChargeSetting(amount="ten", amount_type="percentage")
    assert charge_adjustment(Decimal("100"), setting) == Decimal("0.00")


def test_totals_are_deterministic(invoice: Invoice) -> None:
    """Recomputing on unchanged inputs gives identical output."""
    invoice.discount_details = ChargeSetting(amount="3.333", amount_type="percentage")
    assert calculate_invoice_totals(invoice) == calculate_invoice_totals(invoice)


class TestInvoiceTotalsAggregator:
    """Test write-skip behaviour on the invoice."""

    def test_writes_changed_fields(self, invoice: Invoice) -> None:
        """First run writes all three derived fields."""
        written = InvoiceTotalsAggregator().recalculate(invoice)

        assert written == ["sub_total", "total_amount", "total_in_words"]
        assert invoice.sub_total == "170.00"
        assert invoice.total_amount == "170.00"
        assert invoice.total_amount_in_words == "One Hundred Seventy USD"

    def test_second_run_skips(self, invoice: Invoice) -> None:
        """Unchanged inputs produce no writes."""
        aggregator = InvoiceTotalsAggregator()
        aggregator.recalculate(invoice)

        assert aggregator.recalculate(invoice) == []

    def test_charge_change_only_touches_total(self, invoice: Invoice) -> None:
        """A discount leaves the subtotal alone."""
        aggregator = InvoiceTotalsAggregator()
        aggregator.recalculate(invoice)

        invoice.discount_details = ChargeSetting(amount="70")

        assert aggregator.recalculate(invoice) == ["total_amount", "total_in_words"]
        assert invoice.total_amount == "100.00"
