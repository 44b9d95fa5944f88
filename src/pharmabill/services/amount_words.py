"""Amount in words, Indian numbering system (Crore/Lakh/Thousand/Hundred)"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from pharmabill.exceptions import ValidationError
from pharmabill.services.totals import money_context, round_money


UNITS = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen",
    "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def _below_thousand(number: int) -> str:
    if number == 0:
        return ""
    if number < 10:
        return UNITS[number]
    if number < 20:
        return TEENS[number - 10]
    if number < 100:
        unit = number % 10
        return TENS[number // 10] + (f" {UNITS[unit]}" if unit else "")

    words = f"{UNITS[number // 100]} Hundred"
    remainder = number % 100
    if remainder:
        words += f" and {_below_thousand(remainder)}"
    return words


def integer_words(number: int) -> str:
    """Words for a whole number; empty string for zero"""
    parts = []

    if number >= CRORE:
        # Counts of 1000 crore and above are themselves spelled out
        parts.append(f"{integer_words(number // CRORE)} Crore")
        number %= CRORE

    if number >= LAKH:
        parts.append(f"{_below_thousand(number // LAKH)} Lakh")
        number %= LAKH

    if number >= THOUSAND:
        parts.append(f"{_below_thousand(number // THOUSAND)} Thousand")
        number %= THOUSAND

    if number > 0:
        parts.append(_below_thousand(number))

    return " ".join(parts)


def amount_in_words(amount: Union[Decimal, int, float, str]) -> str:
    """
    Spell out a rupee amount

    The amount is rounded half-up to whole paise first.

    >>> amount_in_words(1234.50)
    'One Thousand Two Hundred and Thirty Four Rupees and Fifty Paise Only'

    Raises:
        ValidationError: If the amount is negative or not a number
    """
    try:
        value = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"Amount is not a number: {amount!r}", field="amount") from e

    if not value.is_finite():
        raise ValidationError(f"Amount is not a finite number: {amount!r}", field="amount")
    if value < 0:
        raise ValidationError(f"Amount must not be negative, got {amount}", field="amount")

    value = round_money(value)
    if value == 0:
        return "Zero Rupees Only"

    rupees = int(value)
    with localcontext(money_context(value)):
        paise = int((value - rupees) * 100)

    words = f"{integer_words(rupees) or 'Zero'} Rupees"
    if paise > 0:
        words += f" and {_below_thousand(paise)} Paise"

    return words + " Only"
