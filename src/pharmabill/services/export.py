"""
Invoice and report exporters

PDF via reportlab, JSON for saved bills, CSV for reports. Files are
written to a temporary name and moved into place, so a failed export
leaves nothing behind.
"""

import csv
import io
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from pharmabill.exceptions import ExportFailedError
from pharmabill.models.bill import Bill
from pharmabill.models.invoice import InvoiceDocument
from pharmabill.models.totals import BillTotals
from pharmabill.utils.formatting import format_currency, format_date, format_datetime


logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 15 * mm
ROW_HEIGHT = 6 * mm

# Built-in PDF fonts have no rupee glyph
PDF_CURRENCY = "Rs. "

# (header, x offset from left margin in mm)
TABLE_COLUMNS = [
    ("S.No", 0),
    ("Items", 12),
    ("HSN", 72),
    ("Qty", 88),
    ("Rate", 102),
    ("MRP", 124),
    ("Tax", 146),
    ("Amount", 180),
]


@contextmanager
def atomic_output(path: Path, mode: str = "wb", **open_kwargs: Any) -> Iterator[Any]:
    """Open a temp file beside ``path`` and move it into place on success"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, mode, **open_kwargs) as handle:
            yield handle
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def output_path(directory: Union[str, Path], filename: str) -> Path:
    """
    Join ``filename`` onto ``directory``

    Raises:
        ExportFailedError: If the file would land anywhere but directly
            inside ``directory``
    """
    base = Path(directory)
    path = base / filename
    if path.resolve().parent != base.resolve():
        raise ExportFailedError(
            f"Refusing to write {filename!r} outside {base}", path=str(path)
        )
    return path


def _money(amount: Any) -> str:
    return format_currency(amount, symbol=PDF_CURRENCY)


class PdfInvoiceRenderer:
    """
    Renders an InvoiceDocument onto A4 pages

    Example:
        >>> renderer = PdfInvoiceRenderer()
        >>> path = renderer.export(document, "./invoices")
        >>> path.name
        'invoice-BILL-1700000000000-42.pdf'
    """

    def render(self, document: InvoiceDocument) -> bytes:
        """
        Render the invoice to PDF bytes

        Raises:
            ExportFailedError: If reportlab fails to draw the document
        """
        buffer = io.BytesIO()
        try:
            self._draw(document, buffer)
        except Exception as e:
            raise ExportFailedError(
                f"Failed to generate PDF for invoice {document.bill_no}: {e}",
                cause=e,
            ) from e
        return buffer.getvalue()

    def export(self, document: InvoiceDocument, directory: Union[str, Path]) -> Path:
        """
        Write ``invoice-<billNo>.pdf`` into ``directory``

        Returns:
            Path of the written file

        Raises:
            ExportFailedError: If rendering or writing fails
        """
        path = output_path(directory, document.pdf_filename)
        data = self.render(document)
        try:
            with atomic_output(path) as handle:
                handle.write(data)
        except OSError as e:
            raise ExportFailedError(
                f"Failed to write {path}: {e}", path=str(path), cause=e
            ) from e

        logger.info(f"Invoice {document.bill_no} exported to {path}")
        return path

    def _draw(self, document: InvoiceDocument, target: Any) -> None:
        pdf = canvas.Canvas(target, pagesize=A4)
        pdf.setTitle(f"tax-invoice-{document.bill_no}")

        y = self._draw_header(pdf, document)
        y = self._draw_party(pdf, document, y)
        y = self._draw_table(pdf, document, y)
        y = self._draw_totals(pdf, document, y)
        self._draw_footer(pdf, document, y)

        pdf.showPage()
        pdf.save()

    def _draw_header(self, pdf: canvas.Canvas, document: InvoiceDocument) -> float:
        header = document.header
        y = PAGE_HEIGHT - MARGIN

        pdf.setFont("Helvetica-Bold", 16)
        pdf.drawCentredString(PAGE_WIDTH / 2, y, header.title)
        y -= 4 * mm
        pdf.line(MARGIN, y, PAGE_WIDTH - MARGIN, y)

        y -= 7 * mm
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawCentredString(PAGE_WIDTH / 2, y, header.subtitle)
        y -= 5 * mm
        pdf.setFont("Helvetica", 9)
        pdf.drawCentredString(PAGE_WIDTH / 2, y, f"Address: {header.address}")
        y -= 4 * mm
        pdf.drawCentredString(PAGE_WIDTH / 2, y, f"Phone no: {header.phone_line}")
        return y - 8 * mm

    def _draw_party(self, pdf: canvas.Canvas, document: InvoiceDocument, y: float) -> float:
        party = document.party
        blank = "____________________"
        right = PAGE_WIDTH - MARGIN

        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(MARGIN, y, "Party's Name")
        pdf.setFont("Helvetica", 9)
        left_lines = [
            f"Name: {party.customer_name or blank}",
            f"Address: {party.customer_address or blank}",
            f"GSTIN NO: {party.customer_gstin or blank}",
        ]
        right_lines = [
            f"Invoice No: {party.invoice_no}",
            f"Date: {format_date(party.invoice_date)}",
        ]
        if party.store_gstin:
            right_lines.append(f"Store GSTIN: {party.store_gstin}")

        line_y = y
        for text in left_lines:
            line_y -= 5 * mm
            pdf.drawString(MARGIN, line_y, text)

        line_y = y
        for text in right_lines:
            line_y -= 5 * mm
            pdf.drawRightString(right, line_y, text)

        return y - (max(len(left_lines), len(right_lines)) + 2) * 5 * mm

    def _draw_table_head(self, pdf: canvas.Canvas, y: float) -> float:
        pdf.setFont("Helvetica-Bold", 9)
        for title, offset in TABLE_COLUMNS:
            pdf.drawString(MARGIN + offset * mm, y, title)
        y -= 2 * mm
        pdf.line(MARGIN, y, PAGE_WIDTH - MARGIN, y)
        pdf.setFont("Helvetica", 8)
        return y - ROW_HEIGHT + 2 * mm

    def _draw_table(self, pdf: canvas.Canvas, document: InvoiceDocument, y: float) -> float:
        y = self._draw_table_head(pdf, y)

        for line in document.lines:
            if y < MARGIN + 3 * ROW_HEIGHT:
                pdf.showPage()
                y = self._draw_table_head(pdf, PAGE_HEIGHT - MARGIN)

            tax = f"{line.tax_rate_percent.normalize():f}% ({_money(line.tax_amount)})"
            cells = [
                f"{line.serial_no}.",
                line.medicine_name[:40],
                line.hsn_code,
                str(line.quantity),
                _money(line.rate),
                _money(line.mrp),
                tax,
                _money(line.amount),
            ]
            for (_, offset), text in zip(TABLE_COLUMNS, cells):
                pdf.drawString(MARGIN + offset * mm, y, text)
            y -= 4 * mm

            detail = " ".join(p for p in (line.batch_no, line.description) if p)
            if detail:
                pdf.setFillGray(0.4)
                pdf.drawString(MARGIN + 12 * mm, y, detail[:90])
                pdf.setFillGray(0)
                y -= 4 * mm
            y -= 1 * mm

        serial = len(document.lines)
        for _ in range(document.blank_rows):
            serial += 1
            pdf.drawString(MARGIN, y, f"{serial}.")
            y -= ROW_HEIGHT

        pdf.line(MARGIN, y, PAGE_WIDTH - MARGIN, y)
        return y - 8 * mm

    def _draw_totals(self, pdf: canvas.Canvas, document: InvoiceDocument, y: float) -> float:
        totals = document.totals
        if y < MARGIN + 60 * mm:
            pdf.showPage()
            y = PAGE_HEIGHT - MARGIN

        label_x = PAGE_WIDTH - MARGIN - 45 * mm
        value_x = PAGE_WIDTH - MARGIN

        rows = [("Subtotal:", _money(totals.subtotal))]
        if totals.show_discount:
            rows.append(("Discount:", f"-{_money(totals.total_discount)}"))
        rows.append((f"Tax ({totals.tax_rate_percent.normalize():f}%):", _money(totals.tax_amount)))
        rows.append(("Total:", _money(totals.grand_total)))

        row_y = y
        for label, value in rows:
            pdf.setFont("Helvetica-Bold" if label == "Total:" else "Helvetica", 10)
            pdf.drawRightString(label_x, row_y, label)
            pdf.drawRightString(value_x, row_y, value)
            row_y -= 5 * mm

        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(MARGIN, y, "Sub Total")
        pdf.setFont("Helvetica-Bold", 14)
        pdf.drawString(MARGIN, y - 6 * mm, _money(totals.grand_total))
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(MARGIN, y - 13 * mm, "Amount in words")
        pdf.setFont("Helvetica-Oblique", 8)
        pdf.drawString(MARGIN, y - 18 * mm, totals.amount_in_words)

        return min(row_y, y - 18 * mm) - 10 * mm

    def _draw_footer(self, pdf: canvas.Canvas, document: InvoiceDocument, y: float) -> None:
        footer = document.footer
        if y < MARGIN + 40 * mm:
            pdf.showPage()
            y = PAGE_HEIGHT - MARGIN

        pdf.line(MARGIN, y + 4 * mm, PAGE_WIDTH - MARGIN, y + 4 * mm)
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(MARGIN, y, "Terms and Conditions")
        pdf.drawCentredString(PAGE_WIDTH * 0.75, y, "Seal & Signature")

        pdf.setFont("Helvetica", 8)
        term_y = y
        for term in footer.terms:
            term_y -= 4 * mm
            pdf.drawString(MARGIN, term_y, f"- {term}")

        pdf.drawCentredString(PAGE_WIDTH * 0.75, y - 5 * mm, footer.signatory_for)
        pdf.drawCentredString(PAGE_WIDTH * 0.75, y - 14 * mm, "____________________")
        pdf.drawCentredString(PAGE_WIDTH * 0.75, y - 18 * mm, footer.signatory_label)

        note_y = min(term_y, y - 18 * mm) - 10 * mm
        pdf.setFillGray(0.4)
        pdf.drawCentredString(PAGE_WIDTH / 2, note_y, footer.note)
        pdf.drawCentredString(
            PAGE_WIDTH / 2, note_y - 4 * mm,
            f"Generated on: {format_datetime(footer.generated_at)}",
        )
        pdf.setFillGray(0)


class JsonBillExporter:
    """Writes a bill with its totals as ``invoice-<billNo>.json``"""

    def export(
        self,
        bill: Bill,
        totals: BillTotals,
        directory: Union[str, Path],
    ) -> Path:
        path = output_path(directory, f"invoice-{bill.bill_no}.json")
        payload = bill.to_payload()
        payload.update(totals.model_dump(by_alias=True, mode="json"))

        try:
            with atomic_output(path, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ExportFailedError(
                f"Failed to write {path}: {e}", path=str(path), cause=e
            ) from e

        logger.info(f"Bill {bill.bill_no} downloaded to {path}")
        return path


class CsvExporter:
    """Writes report rows to ``<name>.csv``"""

    def export(
        self,
        rows: Sequence[Dict[str, Any]],
        name: str,
        directory: Union[str, Path],
        fieldnames: Optional[List[str]] = None,
    ) -> Optional[Path]:
        """
        Export rows; the header comes from the first row unless given

        Returns:
            Path of the written file, or None when there are no rows
        """
        if not rows:
            return None

        path = output_path(directory, f"{name}.csv")
        columns = fieldnames or list(rows[0].keys())
        try:
            with atomic_output(path, "w", encoding="utf-8", newline="") as handle:
                writer = csv.DictWriter(handle, fieldnames=columns, extrasaction="ignore")
                writer.writeheader()
                writer.writerows(rows)
        except OSError as e:
            raise ExportFailedError(
                f"Failed to write {path}: {e}", path=str(path), cause=e
            ) from e

        logger.info(f"Exported {len(rows)} row(s) to {path}")
        return path
