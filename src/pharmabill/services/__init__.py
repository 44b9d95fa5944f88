"""Services module initialization"""

from pharmabill.services.totals import (
    TotalsCalculator,
    LineAmounts,
    calculate_totals,
    line_amounts,
    round_money,
    validate_bill,
)
from pharmabill.services.amount_words import amount_in_words, integer_words
from pharmabill.services.invoice_builder import InvoiceBuilder
from pharmabill.services.inventory import (
    InventoryService,
    ExpiryStatus,
    StockStatus,
    days_until_expiry,
    expiry_status,
    stock_status,
)
from pharmabill.services.cart import Cart, CartEntry, cart_key
from pharmabill.services.export import CsvExporter, JsonBillExporter, PdfInvoiceRenderer
from pharmabill.services.billing import BillingService, PreparedInvoice

__all__ = [
    "TotalsCalculator",
    "LineAmounts",
    "calculate_totals",
    "line_amounts",
    "round_money",
    "validate_bill",
    "amount_in_words",
    "integer_words",
    "InvoiceBuilder",
    "InventoryService",
    "ExpiryStatus",
    "StockStatus",
    "days_until_expiry",
    "expiry_status",
    "stock_status",
    "Cart",
    "CartEntry",
    "cart_key",
    "CsvExporter",
    "JsonBillExporter",
    "PdfInvoiceRenderer",
    "BillingService",
    "PreparedInvoice",
]
