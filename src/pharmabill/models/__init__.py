"""Models module initialization"""

from pharmabill.models.store import StoreProfile
from pharmabill.models.bill import (
    Bill,
    Customer,
    LineItem,
    PaymentMethod,
    DEFAULT_HSN_CODE,
)
from pharmabill.models.totals import BillTotals
from pharmabill.models.medicine import Medicine
from pharmabill.models.invoice import (
    InvoiceDocument,
    InvoiceHeader,
    PartyBlock,
    InvoiceLine,
    TotalsBlock,
    InvoiceFooter,
    TERMS_AND_CONDITIONS,
)

__all__ = [
    "StoreProfile",
    "Bill",
    "Customer",
    "LineItem",
    "PaymentMethod",
    "DEFAULT_HSN_CODE",
    "BillTotals",
    "Medicine",
    "InvoiceDocument",
    "InvoiceHeader",
    "PartyBlock",
    "InvoiceLine",
    "TotalsBlock",
    "InvoiceFooter",
    "TERMS_AND_CONDITIONS",
]
