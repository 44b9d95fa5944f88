"""
Bill totals calculation

Exact decimal arithmetic; each aggregate is rounded half-up to two places
from the unrounded sums, independently of the others.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal, getcontext, localcontext
from typing import List

from pharmabill.exceptions import InvalidBillError
from pharmabill.models.bill import Bill, LineItem
from pharmabill.models.totals import BillTotals


CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def money_context(value: Decimal) -> Context:
    """Decimal context wide enough to hold every integer digit of ``value`` plus paise"""
    context = getcontext().copy()
    if value.is_finite():
        context.prec = max(context.prec, value.adjusted() + 3)
    return context


def round_money(value: Decimal) -> Decimal:
    """Round to two decimal places, half-up"""
    value = Decimal(value)
    with localcontext(money_context(value)):
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineAmounts:
    """Unrounded amounts for one line item"""
    gross: Decimal
    discount: Decimal
    net: Decimal
    tax: Decimal

    @property
    def amount(self) -> Decimal:
        """Line amount including tax"""
        return self.net + self.tax


def validate_bill(bill: Bill) -> None:
    """
    Check the bill can be totalled

    Raises:
        InvalidBillError: For an empty bill, negative price or quantity,
            or a tax/discount percentage outside [0, 100]
    """
    if not bill.items:
        raise InvalidBillError.empty()

    if not 0 <= bill.tax_rate_percent <= 100:
        raise InvalidBillError.out_of_range("taxRate", bill.tax_rate_percent)

    for index, item in enumerate(bill.items):
        if item.price < 0:
            raise InvalidBillError.negative(f"items[{index}].price", item.price)
        if item.quantity < 0:
            raise InvalidBillError.negative(f"items[{index}].quantity", item.quantity)
        if not 0 <= item.discount_percent <= 100:
            raise InvalidBillError.out_of_range(
                f"items[{index}].discount", item.discount_percent
            )


def line_amounts(item: LineItem, tax_rate_percent: Decimal) -> LineAmounts:
    """Compute gross, discount, net and tax for one item"""
    gross = item.price * item.quantity
    discount = gross * item.discount_percent / HUNDRED
    net = gross - discount
    tax = net * Decimal(tax_rate_percent) / HUNDRED
    return LineAmounts(gross=gross, discount=discount, net=net, tax=tax)


class TotalsCalculator:
    """
    Computes BillTotals from a Bill

    Stateless; calling it twice on the same bill gives equal results.

    Example:
        >>> totals = TotalsCalculator().calculate(bill)
        >>> totals.grand_total
        Decimal('189.00')
    """

    def lines(self, bill: Bill) -> List[LineAmounts]:
        """Per-line breakdown of a validated bill"""
        validate_bill(bill)
        return [line_amounts(item, bill.tax_rate_percent) for item in bill.items]

    def calculate(self, bill: Bill) -> BillTotals:
        """
        Calculate bill totals

        Args:
            bill: Bill to total

        Returns:
            Subtotal, total discount, tax and grand total, each with
            exactly two decimal places

        Raises:
            InvalidBillError: If the bill is malformed
        """
        lines = self.lines(bill)

        subtotal = sum((line.net for line in lines), Decimal("0"))
        total_discount = sum((line.discount for line in lines), Decimal("0"))
        tax_amount = subtotal * bill.tax_rate_percent / HUNDRED
        grand_total = subtotal + tax_amount

        return BillTotals(
            subtotal=round_money(subtotal),
            total_discount=round_money(total_discount),
            tax_amount=round_money(tax_amount),
            grand_total=round_money(grand_total),
        )


def calculate_totals(bill: Bill) -> BillTotals:
    """Shortcut for ``TotalsCalculator().calculate(bill)``"""
    return TotalsCalculator().calculate(bill)
