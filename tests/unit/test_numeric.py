"""Unit tests for numeric coercion helpers."""

from decimal import Decimal

import pytest

from invoicing.shared.numeric import (
    format_money,
    is_present,
    percentage_of,
    quantize_money,
    to_decimal,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, False),
        ("", False),
        ("   ", False),
        ("0", True),
        (0, True),
        ("abc", True),
    ],
)
def test_is_present(value: object, expected: bool) -> None:
    """Only None and blank strings count as absent."""
    assert is_present(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("100", Decimal("100")),
        ("12.345", Decimal("12.345")),
        (" 7.5 ", Decimal("7.5")),
        ("1e3", Decimal("1000")),
        ("-1e100", Decimal("-1e100")),
        (42, Decimal("42")),
        (Decimal("3.14"), Decimal("3.14")),
    ],
)
def test_to_decimal_parses_numbers(value: object, expected: Decimal) -> None:
    """Test parsing of well-formed numeric input."""
    assert to_decimal(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "abc",
        "12abc",
        "NaN",
        "Infinity",
        "-inf",
        True,
        [1],
        "1,5",
        "1,250.50",
        "1_0",
        "1e101",
        "-1e101",
        1e300,
        "1e999999999",
        Decimal("Infinity"),
    ],
)
def test_to_decimal_coerces_malformed_to_zero(value: object) -> None:
    """Malformed input never raises and becomes zero."""
    assert to_decimal(value) == Decimal("0")


def test_quantize_money_rounds_half_up() -> None:
    """Test half-up rounding to cents."""
    assert quantize_money(Decimal("1.005")) == Decimal("1.01")
    assert quantize_money(Decimal("1.004")) == Decimal("1.00")
    assert quantize_money(Decimal("-1.005")) == Decimal("-1.01")


def test_format_money_fixed_two_places() -> None:
    """Test two-decimal string output."""
    assert format_money("110") == "110.00"
    assert format_money(Decimal("10.5")) == "10.50"
    assert format_money("garbage") == "0.00"
    assert format_money(None) == "0.00"


def test_format_money_never_negative_zero() -> None:
    """Negative zero is rendered as 0.00."""
    assert format_money(Decimal("-0.001")) == "0.00"
    assert format_money("-0") == "0.00"


def test_percentage_of() -> None:
    """Test percentage helper rounding."""
    assert percentage_of(Decimal("100"), Decimal("10")) == Decimal("10.00")
    assert percentage_of(Decimal("33.33"), Decimal("5")) == Decimal("1.67")


def test_quantize_money_large_values() -> None:
    """Rounding values wider than the default context does not raise."""
    assert quantize_money(Decimal("1e40")) == Decimal("1e40")
    assert format_money(Decimal("123456789012345678901234567890.125")) == (
        "123456789012345678901234567890.13"
    )


def test_percentage_of_bounded_inputs() -> None:
    """The largest accepted amount and percentage still round to cents."""
    assert percentage_of(Decimal("1e15"), Decimal("1e15")) == Decimal("1e28")
