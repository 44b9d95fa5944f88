"""Medicine inventory model"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from pharmabill.models.bill import DEFAULT_HSN_CODE
from pharmabill.models.types import Amount


class Medicine(BaseModel):
    """Medicine stocked by the store"""

    id: Optional[str] = Field(None, alias="_id", description="Remote record id")
    name: str = Field(..., min_length=1, description="Medicine name")
    batch_no: str = Field("", alias="batchNo", description="Batch number")
    hsn_code: str = Field(DEFAULT_HSN_CODE, alias="hsnCode", description="HSN code")
    category: str = Field("", description="Category, e.g. Tablet or Syrup")
    manufacturer: str = Field("", description="Manufacturer name")
    price: Amount = Field(..., ge=0, description="Unit selling price")
    mrp: Optional[Amount] = Field(None, ge=0, description="Maximum retail price")
    quantity: int = Field(0, ge=0, description="Units in stock")
    expiry_date: Optional[date] = Field(None, alias="expiryDate", description="Expiry date")
    low_stock_alert: int = Field(5, alias="lowStockAlert", ge=0, description="Low stock level")
    description: str = Field("", description="Free-text description")

    model_config = {"populate_by_name": True}

    @field_validator("expiry_date", mode="before")
    @classmethod
    def parse_expiry_date(cls, v: Any) -> Any:
        """Accept ISO timestamps such as ``2025-03-01T00:00:00.000Z``"""
        if isinstance(v, str):
            return v[:10] if v else None
        return v

    @field_validator("hsn_code", mode="before")
    @classmethod
    def default_hsn_code(cls, v: Any) -> Any:
        return v or DEFAULT_HSN_CODE

    @property
    def effective_mrp(self) -> Decimal:
        """MRP, falling back to a 20% markup on the selling price"""
        if self.mrp is not None:
            return self.mrp
        return self.price * Decimal("1.2")
