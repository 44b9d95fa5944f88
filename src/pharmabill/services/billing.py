"""
Billing workflow
Totals, invoice document, export and remote save for a checked-out bill
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pharmabill.client.api_client import PharmacyApiClient
from pharmabill.config.pharmabill_config import PharmabillConfig
from pharmabill.exceptions import ConfigError
from pharmabill.models.bill import Bill
from pharmabill.models.invoice import InvoiceDocument
from pharmabill.models.totals import BillTotals
from pharmabill.services.cart import Cart
from pharmabill.services.export import JsonBillExporter, PdfInvoiceRenderer
from pharmabill.services.invoice_builder import InvoiceBuilder
from pharmabill.services.totals import TotalsCalculator


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedInvoice:
    """Bill with its totals and rendered document"""
    bill: Bill
    totals: BillTotals
    document: InvoiceDocument


class BillingService:
    """
    Billing service

    Ties the pure pieces (totals, invoice document) to the effectful ones
    (PDF/JSON export, remote save). Failures propagate to the caller;
    nothing is retried or cached here, so any step can be re-run with the
    same bill.

    Example:
        >>> service = BillingService(config, api=PharmacyApiClient(config))
        >>> prepared = service.prepare(bill)
        >>> service.export_pdf(bill)
        >>> service.save(bill)
    """

    def __init__(
        self,
        config: Optional[PharmabillConfig] = None,
        api: Optional[PharmacyApiClient] = None,
        renderer: Optional[PdfInvoiceRenderer] = None,
    ) -> None:
        self.config = config or PharmabillConfig()
        self.api = api
        self.calculator = TotalsCalculator()
        self.builder = InvoiceBuilder(
            store=self.config.store_profile(),
            min_rows=self.config.min_invoice_rows,
            calculator=self.calculator,
        )
        self.renderer = renderer or PdfInvoiceRenderer()
        self._json_exporter = JsonBillExporter()

    def new_cart(self) -> Cart:
        """Empty cart that checks out at the configured default tax rate"""
        return Cart(default_tax_rate=self.config.default_tax_rate)

    def totals(self, bill: Bill) -> BillTotals:
        return self.calculator.calculate(bill)

    def prepare(self, bill: Bill) -> PreparedInvoice:
        """
        Compute totals and build the invoice document

        Raises:
            InvalidBillError: If the bill is malformed
        """
        totals = self.calculator.calculate(bill)
        document = self.builder.build(bill, totals)
        return PreparedInvoice(bill=bill, totals=totals, document=document)

    def render_pdf(self, bill: Bill) -> bytes:
        return self.renderer.render(self.prepare(bill).document)

    def export_pdf(
        self,
        bill: Bill,
        directory: Optional[Union[str, Path]] = None,
    ) -> Path:
        """
        Write ``invoice-<billNo>.pdf``

        Raises:
            InvalidBillError: If the bill is malformed
            ExportFailedError: If the PDF cannot be generated or written
        """
        prepared = self.prepare(bill)
        return self.renderer.export(
            prepared.document, directory or self.config.invoice_output_dir
        )

    def export_json(
        self,
        bill: Bill,
        directory: Optional[Union[str, Path]] = None,
    ) -> Path:
        totals = self.calculator.calculate(bill)
        return self._json_exporter.export(
            bill, totals, directory or self.config.invoice_output_dir
        )

    def save(self, bill: Bill) -> Dict[str, Any]:
        """
        Store the bill through the remote API

        Raises:
            ConfigError: If the service has no API client
            InvalidBillError: If the bill is malformed
            PharmabillError: If the API call fails
        """
        if self.api is None:
            raise ConfigError(
                "BillingService was created without an API client",
                code="CONFIG_NO_API_CLIENT",
            )

        totals = self.calculator.calculate(bill)
        try:
            return self.api.save_bill(bill, totals)
        except Exception:
            logger.error(f"Failed to save bill {bill.bill_no}")
            raise
