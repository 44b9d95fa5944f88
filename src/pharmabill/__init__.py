"""
Pharmabill: pharmacy billing library

Invoice totals, amount in words, invoice documents and PDF export,
with a client for the pharmacy medicines/bills API.
"""

from pharmabill.exceptions import (
    PharmabillError,
    ErrorCategory,
    ValidationError,
    InvalidBillError,
    StockError,
    ExportFailedError,
    NetworkError,
    ApiError,
    AuthError,
    ConfigError,
)

# Configuration
from pharmabill.config import (
    PharmabillConfig,
    ConfigLoader,
    ConfigValidator,
    ConfigDefaults,
)

# Models
from pharmabill.models import (
    Bill,
    BillTotals,
    Customer,
    InvoiceDocument,
    LineItem,
    Medicine,
    PaymentMethod,
    StoreProfile,
)

# Services
from pharmabill.services import (
    BillingService,
    Cart,
    InventoryService,
    InvoiceBuilder,
    PdfInvoiceRenderer,
    TotalsCalculator,
    amount_in_words,
    calculate_totals,
)

# HTTP Client
from pharmabill.client import HttpClient, PharmacyApiClient

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "PharmabillError",
    "ErrorCategory",
    "ValidationError",
    "InvalidBillError",
    "StockError",
    "ExportFailedError",
    "NetworkError",
    "ApiError",
    "AuthError",
    "ConfigError",
    # Configuration
    "PharmabillConfig",
    "ConfigLoader",
    "ConfigValidator",
    "ConfigDefaults",
    # Models
    "Bill",
    "BillTotals",
    "Customer",
    "InvoiceDocument",
    "LineItem",
    "Medicine",
    "PaymentMethod",
    "StoreProfile",
    # Services
    "BillingService",
    "Cart",
    "InventoryService",
    "InvoiceBuilder",
    "PdfInvoiceRenderer",
    "TotalsCalculator",
    "amount_in_words",
    "calculate_totals",
    # Client
    "HttpClient",
    "PharmacyApiClient",
]
