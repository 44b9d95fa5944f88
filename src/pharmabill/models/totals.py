"""Bill totals model"""

from pydantic import BaseModel, Field

from pharmabill.models.types import Amount


class BillTotals(BaseModel):
    """
    Totals derived from a bill

    Always recomputed from the bill, never stored on their own.
    """

    subtotal: Amount = Field(..., description="Sum of discounted line amounts")
    total_discount: Amount = Field(..., alias="totalDiscount", description="Sum of line discounts")
    tax_amount: Amount = Field(..., alias="taxAmount", description="Tax on the subtotal")
    grand_total: Amount = Field(..., alias="grandTotal", description="Subtotal plus tax")

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }
