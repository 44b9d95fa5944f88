"""Checkout cart"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Union

from pharmabill.exceptions import InvalidBillError, StockError, ValidationError
from pharmabill.models.bill import Bill, Customer, LineItem, PaymentMethod
from pharmabill.models.medicine import Medicine
from pharmabill.utils.formatting import generate_bill_no


logger = logging.getLogger(__name__)


@dataclass
class CartEntry:
    """Medicine in the cart with the quantity being sold"""
    medicine: Medicine
    quantity: int
    discount_percent: Decimal = Decimal("0")

    @property
    def key(self) -> str:
        return cart_key(self.medicine)

    def to_line_item(self) -> LineItem:
        medicine = self.medicine
        return LineItem(
            medicine_id=medicine.id,
            medicine_name=medicine.name,
            batch_no=medicine.batch_no,
            hsn_code=medicine.hsn_code,
            price=medicine.price,
            quantity=self.quantity,
            discount_percent=self.discount_percent,
            mrp=medicine.effective_mrp,
            category=medicine.category,
            description=f"{medicine.category} Medicine".strip(),
        )


def cart_key(medicine: Medicine) -> str:
    """Same medicine means same id, or same name and batch without an id"""
    return medicine.id or f"{medicine.name.lower()}|{medicine.batch_no}"


class Cart:
    """
    Items selected for a bill

    Quantities never exceed the stock recorded on the medicine.

    Args:
        default_tax_rate: Tax percentage used when checkout is given none
    """

    def __init__(self, default_tax_rate: Union[Decimal, int, float, str] = 0) -> None:
        self.default_tax_rate = Decimal(str(default_tax_rate))
        self._entries: Dict[str, CartEntry] = {}

    def add(self, medicine: Medicine, quantity: int = 1) -> CartEntry:
        """
        Add a medicine, merging with an existing entry

        Raises:
            ValidationError: If the quantity is not positive
            StockError: If the medicine is out of stock or the cart would
                exceed the available quantity
        """
        if quantity <= 0:
            raise ValidationError("Quantity must be positive", field="quantity")

        if medicine.quantity < 1:
            raise StockError(
                f"{medicine.name} is out of stock",
                available=medicine.quantity,
                requested=quantity,
            )

        key = cart_key(medicine)
        entry = self._entries.get(key)
        current = entry.quantity if entry else 0
        if current + quantity > medicine.quantity:
            raise StockError(
                f"Only {medicine.quantity} units of {medicine.name} available in stock",
                available=medicine.quantity,
                requested=current + quantity,
            )

        if entry:
            entry.quantity += quantity
        else:
            entry = CartEntry(medicine=medicine, quantity=quantity)
            self._entries[key] = entry

        logger.info(f"{medicine.name} added to cart (quantity {entry.quantity})")
        return entry

    def update_quantity(self, key: str, quantity: int) -> None:
        """Set the quantity for an entry; zero or less removes it"""
        entry = self._get(key)
        if quantity <= 0:
            self.remove(key)
            return

        if quantity > entry.medicine.quantity:
            raise StockError(
                f"Only {entry.medicine.quantity} units of {entry.medicine.name} available in stock",
                available=entry.medicine.quantity,
                requested=quantity,
            )
        entry.quantity = quantity

    def set_discount(self, key: str, discount_percent: Union[Decimal, int, float, str]) -> None:
        value = Decimal(str(discount_percent))
        if not 0 <= value <= 100:
            raise InvalidBillError.out_of_range("discount", value)
        self._get(key).discount_percent = value

    def remove(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry:
            logger.info(f"{entry.medicine.name} removed from cart")

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> List[CartEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def checkout(
        self,
        customer: Customer,
        tax_rate: Optional[Union[Decimal, int, float, str]] = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        bill_no: Optional[str] = None,
    ) -> Bill:
        """
        Turn the cart into a bill

        Args:
            customer: Customer details; the name is required
            tax_rate: Tax percentage for the bill (default: the cart default)
            payment_method: How the customer pays
            bill_no: Bill number (generated when omitted)

        Raises:
            InvalidBillError: If the cart is empty, the customer has no name,
                or the tax rate or bill number is invalid
        """
        if self.is_empty():
            raise InvalidBillError("Please add items to the cart", field="items")

        if not customer.name.strip():
            raise InvalidBillError("Please enter customer name", field="customer.name")

        tax = self.default_tax_rate if tax_rate is None else Decimal(str(tax_rate))
        if not 0 <= tax <= 100:
            raise InvalidBillError.out_of_range("taxRate", tax)

        bill = Bill.from_payload({
            "bill_no": bill_no or generate_bill_no(),
            "customer": customer,
            "items": [entry.to_line_item() for entry in self._entries.values()],
            "tax_rate_percent": tax,
            "payment_method": payment_method,
        })
        logger.info(f"Checked out bill {bill.bill_no} with {len(bill.items)} item(s)")
        return bill

    def _get(self, key: str) -> CartEntry:
        try:
            return self._entries[key]
        except KeyError:
            raise KeyError(f"Cart has no entry '{key}'") from None
