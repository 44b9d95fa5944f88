"""Utilities module initialization"""

from pharmabill.utils.formatting import (
    format_currency,
    format_date,
    format_datetime,
    generate_bill_no,
    generate_invoice_number,
    validate_email,
    validate_phone,
)

__all__ = [
    "format_currency",
    "format_date",
    "format_datetime",
    "generate_bill_no",
    "generate_invoice_number",
    "validate_email",
    "validate_phone",
]
