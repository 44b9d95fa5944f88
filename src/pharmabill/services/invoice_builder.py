"""Invoice document assembly"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pharmabill.models.bill import Bill
from pharmabill.models.invoice import (
    InvoiceDocument,
    InvoiceFooter,
    InvoiceHeader,
    InvoiceLine,
    PartyBlock,
    TotalsBlock,
)
from pharmabill.models.store import StoreProfile
from pharmabill.models.totals import BillTotals
from pharmabill.services.amount_words import amount_in_words
from pharmabill.services.totals import TotalsCalculator, round_money


logger = logging.getLogger(__name__)

MRP_MARKUP = Decimal("1.2")


class InvoiceBuilder:
    """
    Builds the invoice document for a bill

    Performs no I/O; the document is handed to a renderer for printing or
    PDF export.

    Example:
        >>> builder = InvoiceBuilder(StoreProfile())
        >>> document = builder.build(bill)
        >>> document.pdf_filename
        'invoice-BILL-1700000000000-42.pdf'
    """

    def __init__(
        self,
        store: Optional[StoreProfile] = None,
        min_rows: int = 5,
        calculator: Optional[TotalsCalculator] = None,
    ) -> None:
        self.store = store or StoreProfile()
        self.min_rows = min_rows
        self._calculator = calculator or TotalsCalculator()

    def build(
        self,
        bill: Bill,
        totals: Optional[BillTotals] = None,
        generated_at: Optional[datetime] = None,
    ) -> InvoiceDocument:
        """
        Assemble the invoice

        Args:
            bill: Bill to render
            totals: Precomputed totals; computed from the bill when omitted
            generated_at: Generation timestamp (default: now)

        Returns:
            Immutable invoice document

        Raises:
            InvalidBillError: If the bill is malformed
        """
        lines = self._calculator.lines(bill)
        if totals is None:
            totals = self._calculator.calculate(bill)

        rows = []
        for index, (item, amounts) in enumerate(zip(bill.items, lines), start=1):
            mrp = item.mrp if item.mrp is not None else item.price * MRP_MARKUP
            rows.append(InvoiceLine(
                serial_no=index,
                medicine_name=item.medicine_name,
                batch_no=item.batch_no,
                hsn_code=item.hsn_code,
                quantity=item.quantity,
                rate=round_money(item.price),
                mrp=round_money(mrp),
                discount_percent=item.discount_percent,
                tax_rate_percent=bill.tax_rate_percent,
                tax_amount=round_money(amounts.tax),
                amount=round_money(amounts.amount),
                description=item.description or f"{item.category} Medicine".strip(),
            ))

        document = InvoiceDocument(
            header=InvoiceHeader(
                store_name=self.store.store_name,
                address=self.store.address,
                phone_line=self.store.phone_line,
            ),
            party=PartyBlock(
                customer_name=bill.customer.name,
                customer_address=bill.customer.address,
                customer_gstin=bill.customer.gstin,
                customer_mobile=bill.customer.mobile,
                invoice_no=bill.bill_no,
                invoice_date=bill.created_at,
                store_gstin=self.store.gst_number,
                payment_method=bill.payment_method.value,
            ),
            lines=rows,
            blank_rows=max(0, self.min_rows - len(rows)),
            totals=TotalsBlock(
                subtotal=totals.subtotal,
                total_discount=totals.total_discount,
                tax_rate_percent=bill.tax_rate_percent,
                tax_amount=totals.tax_amount,
                grand_total=totals.grand_total,
                amount_in_words=amount_in_words(totals.grand_total),
            ),
            footer=InvoiceFooter(
                signatory_for=f"For {self.store.store_name}",
                generated_at=generated_at or datetime.now(),
            ),
        )

        logger.debug(f"Built invoice {bill.bill_no} with {len(rows)} line(s)")
        return document
