"""
Invoice Builder Unit Tests
"""

from datetime import datetime
from decimal import Decimal

import pytest

from pharmabill.exceptions import InvalidBillError
from pharmabill.models import Bill, LineItem, StoreProfile, TERMS_AND_CONDITIONS
from pharmabill.services.invoice_builder import InvoiceBuilder
from pharmabill.services.totals import calculate_totals


class TestInvoiceBuilder:
    """Tests for InvoiceBuilder"""

    @pytest.fixture
    def store(self) -> StoreProfile:
        return StoreProfile(
            store_name="CITY MEDICALS",
            address="MG Road Bengaluru",
            phone="+91-9000000000",
            alt_phone="+91-8000000000",
            gst_number="29ABCDE1234F1Z5",
        )

    @pytest.fixture
    def builder(self, store: StoreProfile) -> InvoiceBuilder:
        return InvoiceBuilder(store)

    def test_header(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        document = builder.build(bill, generated_at=generated_at)

        assert document.header.title == "TAX INVOICE"
        assert document.header.subtitle == "MEDICAL INVOICE"
        assert document.header.store_name == "CITY MEDICALS"
        assert document.header.phone_line == "+91-9000000000 +91-8000000000"

    def test_party_block(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        document = builder.build(bill, generated_at=generated_at)
        party = document.party

        assert party.customer_name == "Asha Rao"
        assert party.customer_mobile == "9876543210"
        assert party.invoice_no == "BILL-1700000000000-42"
        assert party.invoice_date == datetime(2024, 5, 1, 10, 30)
        assert party.store_gstin == "29ABCDE1234F1Z5"

    def test_line_amount_includes_tax(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        """Should show the discounted amount plus tax per line"""
        line = builder.build(bill, generated_at=generated_at).lines[0]

        assert line.serial_no == 1
        assert line.rate == Decimal("100.00")
        assert line.mrp == Decimal("120.00")
        assert line.tax_amount == Decimal("9.00")
        assert line.amount == Decimal("189.00")
        assert line.description == "Tablet Medicine"

    def test_mrp_fallback(self, builder: InvoiceBuilder, generated_at: datetime):
        bill = Bill(
            bill_no="BILL-2",
            items=[LineItem(medicine_name="ORS", price=Decimal("20"), quantity=1)],
        )

        line = builder.build(bill, generated_at=generated_at).lines[0]

        assert line.mrp == Decimal("24.00")
        assert line.description == "Medicine"

    def test_totals_block(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        totals = builder.build(bill, generated_at=generated_at).totals

        assert totals.subtotal == Decimal("180.00")
        assert totals.total_discount == Decimal("20.00")
        assert totals.tax_amount == Decimal("9.00")
        assert totals.grand_total == Decimal("189.00")
        assert totals.amount_in_words == "One Hundred and Eighty Nine Rupees Only"
        assert totals.show_discount is True

    def test_uses_given_totals(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        totals = calculate_totals(bill)
        document = builder.build(bill, totals, generated_at=generated_at)
        assert document.totals.grand_total == totals.grand_total

    def test_blank_rows(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        """Should pad the item table to five rows"""
        assert builder.build(bill, generated_at=generated_at).blank_rows == 4

    def test_no_blank_rows_for_long_bills(self, store: StoreProfile, bill: Bill, generated_at: datetime):
        builder = InvoiceBuilder(store, min_rows=0)
        assert builder.build(bill, generated_at=generated_at).blank_rows == 0

    def test_footer(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        footer = builder.build(bill, generated_at=generated_at).footer

        assert footer.terms == list(TERMS_AND_CONDITIONS)
        assert footer.signatory_for == "For CITY MEDICALS"
        assert footer.signatory_label == "Authorized Signatory"
        assert footer.generated_at == generated_at

    def test_pdf_filename(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        document = builder.build(bill, generated_at=generated_at)
        assert document.pdf_filename == "invoice-BILL-1700000000000-42.pdf"

    def test_deterministic(self, builder: InvoiceBuilder, bill: Bill, generated_at: datetime):
        assert builder.build(bill, generated_at=generated_at) == builder.build(
            bill, generated_at=generated_at
        )

    def test_invalid_bill(self, builder: InvoiceBuilder):
        with pytest.raises(InvalidBillError):
            builder.build(Bill(bill_no="BILL-3"))

    def test_default_store(self, bill: Bill, generated_at: datetime):
        document = InvoiceBuilder().build(bill, generated_at=generated_at)
        assert document.header.store_name == "MEDICAL STORE"
        assert document.party.store_gstin == ""
