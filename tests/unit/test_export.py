"""
Exporter Unit Tests
"""

import csv
import json
from datetime import datetime
from pathlib import Path

import pytest

from pharmabill.exceptions import ExportFailedError
from pharmabill.models import Bill, InvoiceDocument, LineItem
from pharmabill.services import export as export_module
from pharmabill.services.export import CsvExporter, JsonBillExporter, PdfInvoiceRenderer
from pharmabill.services.invoice_builder import InvoiceBuilder
from pharmabill.services.totals import calculate_totals


@pytest.fixture
def document(bill: Bill, generated_at: datetime) -> InvoiceDocument:
    return InvoiceBuilder().build(bill, generated_at=generated_at)


class TestPdfInvoiceRenderer:
    """Tests for PdfInvoiceRenderer"""

    @pytest.fixture
    def renderer(self) -> PdfInvoiceRenderer:
        return PdfInvoiceRenderer()

    def test_render_bytes(self, renderer: PdfInvoiceRenderer, document: InvoiceDocument):
        data = renderer.render(document)
        assert data.startswith(b"%PDF")

    def test_export_file_name(self, renderer: PdfInvoiceRenderer, document: InvoiceDocument, tmp_path: Path):
        path = renderer.export(document, tmp_path)

        assert path == tmp_path / "invoice-BILL-1700000000000-42.pdf"
        assert path.read_bytes().startswith(b"%PDF")
        assert [p.name for p in tmp_path.iterdir()] == [path.name]

    def test_export_creates_directory(self, renderer: PdfInvoiceRenderer, document: InvoiceDocument, tmp_path: Path):
        path = renderer.export(document, tmp_path / "nested" / "invoices")
        assert path.exists()

    def test_long_bill_spans_pages(self, renderer: PdfInvoiceRenderer, generated_at: datetime):
        items = [
            LineItem(medicine_name=f"Medicine {i}", price=10, quantity=1, category="Tablet")
            for i in range(80)
        ]
        bill = Bill(bill_no="BILL-LONG", items=items, tax_rate_percent=12)
        document = InvoiceBuilder().build(bill, generated_at=generated_at)

        assert renderer.render(document).startswith(b"%PDF")

    def test_render_failure(self, renderer: PdfInvoiceRenderer, document: InvoiceDocument, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("canvas exploded")

        monkeypatch.setattr(renderer, "_draw", broken)

        with pytest.raises(ExportFailedError) as exc_info:
            renderer.render(document)

        assert exc_info.value.code == "EXPORT01"
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_write_failure_leaves_nothing(
        self, renderer: PdfInvoiceRenderer, document: InvoiceDocument, tmp_path: Path, monkeypatch
    ):
        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(export_module.os, "replace", failing_replace)

        with pytest.raises(ExportFailedError) as exc_info:
            renderer.export(document, tmp_path)

        assert exc_info.value.path == str(tmp_path / document.pdf_filename)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.parametrize("bill_no", ["BILL/2024/001", "x/../../escaped"])
    def test_unsafe_bill_no_not_written(
        self, renderer: PdfInvoiceRenderer, bill: Bill, generated_at: datetime, tmp_path: Path, bill_no: str
    ):
        unsafe = bill.model_copy(update={"bill_no": bill_no})
        document = InvoiceBuilder().build(unsafe, generated_at=generated_at)
        target = tmp_path / "a" / "out"

        with pytest.raises(ExportFailedError):
            renderer.export(document, target)

        assert list(tmp_path.rglob("*.pdf")) == []

    def test_export_is_repeatable(self, renderer: PdfInvoiceRenderer, document: InvoiceDocument, tmp_path: Path):
        first = renderer.export(document, tmp_path)
        second = renderer.export(document, tmp_path)
        assert first == second
        assert len(list(tmp_path.iterdir())) == 1


class TestJsonBillExporter:
    """Tests for JsonBillExporter"""

    def test_export(self, bill: Bill, tmp_path: Path):
        path = JsonBillExporter().export(bill, calculate_totals(bill), tmp_path)

        assert path.name == "invoice-BILL-1700000000000-42.json"
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["billNo"] == bill.bill_no
        assert payload["grandTotal"] == 189.0
        assert payload["customer"]["name"] == "Asha Rao"

    @pytest.mark.parametrize("bill_no", ["BILL/2024/001", "x/../../escaped"])
    def test_unsafe_bill_no_not_written(self, bill: Bill, tmp_path: Path, bill_no: str):
        unsafe = bill.model_copy(update={"bill_no": bill_no})

        with pytest.raises(ExportFailedError):
            JsonBillExporter().export(unsafe, calculate_totals(unsafe), tmp_path / "a" / "out")

        assert list(tmp_path.rglob("*.json")) == []


class TestCsvExporter:
    """Tests for CsvExporter"""

    def test_export(self, tmp_path: Path):
        rows = [
            {"Name": "Paracetamol, 500mg", "Quantity": 3},
            {"Name": "ORS", "Quantity": 10},
        ]

        path = CsvExporter().export(rows, "expiry-report", tmp_path)

        assert path.name == "expiry-report.csv"
        with open(path, newline="", encoding="utf-8") as f:
            read = list(csv.DictReader(f))
        assert read[0]["Name"] == "Paracetamol, 500mg"
        assert read[1]["Quantity"] == "10"

    def test_no_rows(self, tmp_path: Path):
        assert CsvExporter().export([], "empty", tmp_path) is None
        assert list(tmp_path.iterdir()) == []

    def test_name_outside_directory(self, tmp_path: Path):
        with pytest.raises(ExportFailedError):
            CsvExporter().export([{"Name": "ORS"}], "../report", tmp_path / "out")

        assert list(tmp_path.rglob("*.csv")) == []
