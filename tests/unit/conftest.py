"""Shared fixtures"""

from datetime import datetime

import pytest

from pharmabill.models import Bill


@pytest.fixture
def bill_payload() -> dict:
    """Bill as the billing screen posts it"""
    return {
        "billNo": "BILL-1700000000000-42",
        "customerName": "Asha Rao",
        "customerAddress": "12 Residency Road",
        "customerGSTIN": "",
        "customerMobile": "9876543210",
        "items": [
            {
                "medicine": "med-1",
                "medicineName": "Paracetamol 500mg",
                "batchNo": "PCM-0425",
                "hsnCode": "3004",
                "price": 100,
                "quantity": 2,
                "discount": 10,
                "mrp": 120,
                "category": "Tablet",
            }
        ],
        "taxRate": 5,
        "paymentMethod": "Cash",
        "date": "2024-05-01T10:30:00",
    }


@pytest.fixture
def bill(bill_payload: dict) -> Bill:
    return Bill.from_payload(bill_payload)


@pytest.fixture
def generated_at() -> datetime:
    return datetime(2024, 5, 1, 10, 45)
