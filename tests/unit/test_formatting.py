"""
Formatting Helper Unit Tests
"""

import re
from datetime import date, datetime
from decimal import Decimal

import pytest

from pharmabill.utils.formatting import (
    format_currency,
    format_date,
    format_datetime,
    generate_bill_no,
    generate_invoice_number,
    validate_email,
    validate_phone,
)


class TestFormatCurrency:
    """Tests for format_currency"""

    @pytest.mark.parametrize("amount, expected", [
        (None, "₹0.00"),
        (0, "₹0.00"),
        (999, "₹999.00"),
        (1000, "₹1,000.00"),
        (123456.789, "₹1,23,456.79"),
        (Decimal("12345678.5"), "₹1,23,45,678.50"),
        (Decimal("-1500"), "-₹1,500.00"),
    ])
    def test_indian_grouping(self, amount, expected):
        assert format_currency(amount) == expected

    def test_custom_symbol(self):
        assert format_currency(Decimal("189"), symbol="Rs. ") == "Rs. 189.00"


class TestDates:
    """Tests for date formatting"""

    def test_format_date(self):
        assert format_date(date(2024, 5, 1)) == "01/05/2024"
        assert format_date(None) == "N/A"

    def test_format_datetime(self):
        assert format_datetime(datetime(2024, 5, 1, 9, 5)) == "01/05/2024 09:05"
        assert format_datetime(None) == "N/A"


class TestIdentifiers:
    """Tests for bill and invoice numbers"""

    def test_bill_no(self):
        assert re.fullmatch(r"BILL-\d{13,}-\d{1,3}", generate_bill_no())

    def test_invoice_number(self):
        assert re.fullmatch(r"INV-\d{6}-\d{3}", generate_invoice_number())


class TestValidators:
    """Tests for contact validators"""

    def test_phone(self):
        assert validate_phone("9876543210") is True
        assert validate_phone("98765") is False
        assert validate_phone("") is False

    def test_email(self):
        assert validate_email("asha@example.com") is True
        assert validate_email("asha@example") is False

    def test_trailing_newline_rejected(self):
        assert validate_phone("9876543210\n") is False
        assert validate_email("asha@example.com\n") is False
