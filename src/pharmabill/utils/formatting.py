"""Display formatting and identifier helpers"""

import random
import re
import time
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union


_PHONE_RE = re.compile(r"[0-9]{10}")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def group_indian(digits: str) -> str:
    """Group a digit string the Indian way: 12,34,567"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: Optional[Union[Decimal, int, float]], symbol: str = "₹") -> str:
    """
    Format an amount as Indian rupees

    >>> format_currency(123456.789)
    '₹1,23,456.79'
    """
    if amount is None:
        return f"{symbol}0.00"

    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    return f"{sign}{symbol}{group_indian(whole)}.{fraction}"


def format_date(value: Optional[Union[date, datetime]]) -> str:
    """dd/mm/yyyy, or N/A when missing"""
    if value is None:
        return "N/A"
    return value.strftime("%d/%m/%Y")


def format_datetime(value: Optional[datetime]) -> str:
    """dd/mm/yyyy HH:MM, or N/A when missing"""
    if value is None:
        return "N/A"
    return value.strftime("%d/%m/%Y %H:%M")


def generate_bill_no() -> str:
    """Bill number of the form BILL-<epoch ms>-<0..999>"""
    return f"BILL-{int(time.time() * 1000)}-{random.randint(0, 999)}"


def generate_invoice_number() -> str:
    """Invoice number of the form INV-<last 6 digits of epoch ms>-<3 digits>"""
    timestamp = str(int(time.time() * 1000))[-6:]
    return f"INV-{timestamp}-{random.randint(0, 999):03d}"


def validate_phone(phone: str) -> bool:
    return bool(_PHONE_RE.fullmatch(phone or ""))


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email or ""))
