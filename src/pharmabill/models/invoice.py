"""Invoice document models"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from pharmabill.models.types import Amount


TERMS_AND_CONDITIONS = (
    "Goods once sold will not be taken back",
    "Subject to Bengaluru jurisdiction",
    "E. & O.E.",
    "Please check medicines at the time of purchase",
)

_FROZEN = {"frozen": True}


class InvoiceHeader(BaseModel):
    """Store identity block"""

    title: str = "TAX INVOICE"
    subtitle: str = "MEDICAL INVOICE"
    store_name: str
    address: str
    phone_line: str

    model_config = _FROZEN


class PartyBlock(BaseModel):
    """Customer identity and invoice reference"""

    customer_name: str
    customer_address: str
    customer_gstin: str
    customer_mobile: str
    invoice_no: str
    invoice_date: datetime
    store_gstin: str = ""
    payment_method: str = "Cash"

    model_config = _FROZEN


class InvoiceLine(BaseModel):
    """Row of the item table"""

    serial_no: int
    medicine_name: str
    batch_no: str
    hsn_code: str
    quantity: int
    rate: Amount
    mrp: Amount
    discount_percent: Amount
    tax_rate_percent: Amount
    tax_amount: Amount
    amount: Amount = Field(..., description="Line amount including tax")
    description: str

    model_config = _FROZEN


class TotalsBlock(BaseModel):
    """Totals and amount in words"""

    subtotal: Amount
    total_discount: Amount
    tax_rate_percent: Amount
    tax_amount: Amount
    grand_total: Amount
    amount_in_words: str

    model_config = _FROZEN

    @property
    def show_discount(self) -> bool:
        return self.total_discount > 0


class InvoiceFooter(BaseModel):
    """Terms, signature block and generation note"""

    terms: List[str] = Field(default_factory=lambda: list(TERMS_AND_CONDITIONS))
    signatory_for: str
    signatory_label: str = "Authorized Signatory"
    note: str = "This is a computer generated invoice"
    generated_at: datetime

    model_config = _FROZEN


class InvoiceDocument(BaseModel):
    """
    Complete invoice ready for printing or PDF export

    A plain value: renderers read it, nothing writes back to it.
    """

    header: InvoiceHeader
    party: PartyBlock
    lines: List[InvoiceLine]
    blank_rows: int = Field(0, ge=0, description="Empty filler rows after the items")
    totals: TotalsBlock
    footer: InvoiceFooter

    model_config = _FROZEN

    @property
    def bill_no(self) -> str:
        return self.party.invoice_no

    @property
    def pdf_filename(self) -> str:
        return f"invoice-{self.party.invoice_no}.pdf"
