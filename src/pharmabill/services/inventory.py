"""Stock and expiry classification for the medicine inventory"""

from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pharmabill.models.medicine import Medicine
from pharmabill.utils.formatting import format_currency, format_date


class ExpiryStatus(str, Enum):
    """Expiry classification"""
    EXPIRED = "expired"
    EXPIRING = "expiring"
    SAFE = "safe"
    UNKNOWN = "unknown"


class StockStatus(str, Enum):
    """Stock level classification"""
    OUT_OF_STOCK = "out-of-stock"
    LOW_STOCK = "low-stock"
    IN_STOCK = "in-stock"


def days_until_expiry(expiry_date: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole days from today to the expiry date; negative once expired"""
    if expiry_date is None:
        return None
    today = today or date.today()
    return (expiry_date - today).days


def expiry_status(
    expiry_date: Optional[date],
    today: Optional[date] = None,
    warning_days: int = 30,
) -> ExpiryStatus:
    days = days_until_expiry(expiry_date, today)
    if days is None:
        return ExpiryStatus.UNKNOWN
    if days < 0:
        return ExpiryStatus.EXPIRED
    if days <= warning_days:
        return ExpiryStatus.EXPIRING
    return ExpiryStatus.SAFE


def stock_status(quantity: int, low_stock_alert: int = 5) -> StockStatus:
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= low_stock_alert:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class InventoryService:
    """
    Filters and reports over a list of medicines

    Args:
        warning_days: Days before expiry that count as expiring
        low_stock_threshold: Fallback low-stock level for medicines
            without their own
    """

    def __init__(self, warning_days: int = 30, low_stock_threshold: int = 5) -> None:
        self.warning_days = warning_days
        self.low_stock_threshold = low_stock_threshold

    def expiry_status_of(self, medicine: Medicine, today: Optional[date] = None) -> ExpiryStatus:
        return expiry_status(medicine.expiry_date, today, self.warning_days)

    def stock_status_of(self, medicine: Medicine) -> StockStatus:
        alert = self.low_stock_threshold
        if "low_stock_alert" in medicine.model_fields_set:
            alert = medicine.low_stock_alert
        return stock_status(medicine.quantity, alert)

    def by_expiry_status(
        self,
        medicines: Iterable[Medicine],
        status: ExpiryStatus,
        today: Optional[date] = None,
    ) -> List[Medicine]:
        """Medicines with the given expiry status, soonest expiry first"""
        matching = [m for m in medicines if self.expiry_status_of(m, today) == status]
        return sorted(matching, key=lambda m: m.expiry_date or date.max)

    def expired(self, medicines: Iterable[Medicine], today: Optional[date] = None) -> List[Medicine]:
        return self.by_expiry_status(medicines, ExpiryStatus.EXPIRED, today)

    def expiring(self, medicines: Iterable[Medicine], today: Optional[date] = None) -> List[Medicine]:
        return self.by_expiry_status(medicines, ExpiryStatus.EXPIRING, today)

    def low_stock(self, medicines: Iterable[Medicine]) -> List[Medicine]:
        """Medicines that are low or out of stock, lowest quantity first"""
        matching = [
            m for m in medicines
            if self.stock_status_of(m) != StockStatus.IN_STOCK
        ]
        return sorted(matching, key=lambda m: m.quantity)

    def in_stock(self, medicines: Iterable[Medicine]) -> List[Medicine]:
        """Medicines available for billing"""
        return [m for m in medicines if m.quantity > 0]

    def expiry_report_rows(
        self,
        medicines: Iterable[Medicine],
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Rows for the expiry CSV report"""
        rows = []
        for medicine in medicines:
            days = days_until_expiry(medicine.expiry_date, today)
            rows.append({
                "Name": medicine.name,
                "Batch No": medicine.batch_no,
                "Category": medicine.category,
                "Quantity": medicine.quantity,
                "Price": format_currency(medicine.price),
                "Expiry Date": format_date(medicine.expiry_date),
                "Days Until Expiry": "" if days is None else days,
                "Status": self.expiry_status_of(medicine, today).value,
            })
        return rows
