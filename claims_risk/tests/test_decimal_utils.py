"""Tests for decimal helpers."""

from decimal import Decimal

import pytest

from claims_risk.decimal_utils import quantize_currency, quantize_factor, safe_divide, to_decimal


class TestToDecimal:
    """Test numeric conversion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, Decimal("0")),
            (1234.56, Decimal("1234.56")),
            (0.1, Decimal("0.1")),
            (5, Decimal("5")),
            ("2.50", Decimal("2.50")),
            (Decimal("7.1"), Decimal("7.1")),
        ],
    )
    def test_conversion(self, value, expected):
        """Common inputs convert without float artifacts."""
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", [True, "abc"])
    def test_rejected(self, value):
        """Booleans and non-numeric strings are rejected."""
        with pytest.raises(ValueError):
            to_decimal(value)


class TestQuantize:
    """Test rounding helpers."""

    def test_factor_half_up(self):
        """Factors round half up to four places."""
        assert quantize_factor(Decimal("1.23455")) == Decimal("1.2346")
        assert str(quantize_factor(Decimal("1"))) == "1.0000"

    def test_factor_places(self):
        """Precision can be raised."""
        assert quantize_factor(Decimal("1.23456789"), places=6) == Decimal("1.234568")

    def test_currency(self):
        """Currency rounds half up to cents."""
        assert quantize_currency(2.675) == Decimal("2.68")
        assert quantize_currency("10") == Decimal("10.00")


class TestSafeDivide:
    """Test division with a zero guard."""

    def test_divide(self):
        """Ordinary division."""
        assert safe_divide(150, 100) == Decimal("1.5")

    def test_zero_denominator(self):
        """Division by zero yields None rather than raising."""
        assert safe_divide(100, 0) is None
        assert safe_divide(100, Decimal("0.00")) is None
