"""Unit tests for statement generation."""

import logging

import pytest

from invoicing.invoice.schema import Invoice, LineItem
from invoicing.shared.config import Settings
from invoicing.shared.exceptions import EmptyInvoiceSetError
from invoicing.statement.schema import StatementRequest
from invoicing.statement.service import StatementService, build_statement


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, default_currency="USD")


@pytest.fixture
def request_with_invoices() -> StatementRequest:
    return StatementRequest(
        invoices=[
            Invoice(invoice_number="B", invoice_date="2024-02-01", items=[LineItem(total="20.00")]),
            Invoice(invoice_number="A", invoice_date="2024-01-01", items=[LineItem(total="10.00")]),
        ],
        billed_to_name="Acme Travel",
    )


class TestBuildStatement:
    """Tests for build_statement."""

    def test_empty_request_raises(self, settings: Settings) -> None:
        with pytest.raises(EmptyInvoiceSetError, match="No invoices provided"):
            build_statement(StatementRequest(invoices=[]), settings)

    def test_builds_statement(self, settings: Settings, request_with_invoices: StatementRequest) -> None:
        statement = build_statement(request_with_invoices, settings)

        assert statement.statement_total == "30.00"
        assert statement.billed_to_name == "Acme Travel"
        assert [row.invoice.invoice_number for row in statement.rows] == ["A", "B"]


class TestStatementService:
    """Tests for StatementService.generate."""

    def test_empty_request_rejected(self, settings: Settings, caplog: pytest.LogCaptureFixture) -> None:
        """An empty invoice set yields a failed result and no statement."""
        service = StatementService(settings)

        with caplog.at_level(logging.WARNING):
            result = service.generate(StatementRequest(invoices=[]))

        assert result.success is False
        assert result.statement is None
        assert result.error == "No invoices provided"
        assert "rejected" in caplog.text

    def test_success(self, settings: Settings, request_with_invoices: StatementRequest) -> None:
        result = StatementService(settings).generate(request_with_invoices)

        assert result.success is True
        assert result.error is None
        assert result.statement.statement_total == "30.00"
        assert result.statement.currency == "USD"

    def test_metrics_disabled(self, settings: Settings, request_with_invoices: StatementRequest) -> None:
        settings.metrics_enabled = False
        result = StatementService(settings).generate(request_with_invoices)
        assert result.success is True
