"""
Inventory Status Unit Tests
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from pharmabill.models import Medicine
from pharmabill.services.inventory import (
    ExpiryStatus,
    InventoryService,
    StockStatus,
    days_until_expiry,
    expiry_status,
    stock_status,
)


TODAY = date(2024, 5, 1)


def medicine(name: str, days: int = None, quantity: int = 20, **kwargs) -> Medicine:
    expiry = TODAY + timedelta(days=days) if days is not None else None
    return Medicine(name=name, price=Decimal("10"), quantity=quantity, expiry_date=expiry, **kwargs)


class TestExpiryStatus:
    """Tests for expiry classification"""

    @pytest.mark.parametrize("days, expected", [
        (-1, ExpiryStatus.EXPIRED),
        (0, ExpiryStatus.EXPIRING),
        (30, ExpiryStatus.EXPIRING),
        (31, ExpiryStatus.SAFE),
    ])
    def test_boundaries(self, days, expected):
        assert expiry_status(TODAY + timedelta(days=days), TODAY) == expected

    def test_missing_date(self):
        assert expiry_status(None, TODAY) == ExpiryStatus.UNKNOWN
        assert days_until_expiry(None, TODAY) is None

    def test_custom_warning_window(self):
        assert expiry_status(TODAY + timedelta(days=45), TODAY, warning_days=60) == ExpiryStatus.EXPIRING


class TestStockStatus:
    """Tests for stock classification"""

    @pytest.mark.parametrize("quantity, expected", [
        (0, StockStatus.OUT_OF_STOCK),
        (1, StockStatus.LOW_STOCK),
        (5, StockStatus.LOW_STOCK),
        (6, StockStatus.IN_STOCK),
    ])
    def test_boundaries(self, quantity, expected):
        assert stock_status(quantity) == expected


class TestInventoryService:
    """Tests for InventoryService"""

    @pytest.fixture
    def service(self) -> InventoryService:
        return InventoryService(warning_days=30, low_stock_threshold=5)

    @pytest.fixture
    def medicines(self) -> list:
        return [
            medicine("Old Syrup", days=-10),
            medicine("Soon Tablet", days=20),
            medicine("Sooner Tablet", days=3),
            medicine("Fresh Capsule", days=200, quantity=2),
            medicine("No Date", quantity=0),
        ]

    def test_expired(self, service: InventoryService, medicines: list):
        assert [m.name for m in service.expired(medicines, TODAY)] == ["Old Syrup"]

    def test_expiring_sorted(self, service: InventoryService, medicines: list):
        names = [m.name for m in service.expiring(medicines, TODAY)]
        assert names == ["Sooner Tablet", "Soon Tablet"]

    def test_low_stock(self, service: InventoryService, medicines: list):
        names = [m.name for m in service.low_stock(medicines)]
        assert names == ["No Date", "Fresh Capsule"]

    def test_medicine_alert_level_wins(self, service: InventoryService):
        item = medicine("Insulin", quantity=8, low_stock_alert=10)
        assert service.stock_status_of(item) == StockStatus.LOW_STOCK

    def test_in_stock(self, service: InventoryService, medicines: list):
        assert "No Date" not in [m.name for m in service.in_stock(medicines)]

    def test_expiry_report_rows(self, service: InventoryService, medicines: list):
        rows = service.expiry_report_rows(medicines[:1], TODAY)

        assert rows == [{
            "Name": "Old Syrup",
            "Batch No": "",
            "Category": "",
            "Quantity": 20,
            "Price": "₹10.00",
            "Expiry Date": "21/04/2024",
            "Days Until Expiry": -10,
            "Status": "expired",
        }]
