"""Bill models"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import pydantic
from pydantic import BaseModel, Field, field_validator, model_validator

from pharmabill.exceptions import InvalidBillError
from pharmabill.models.types import Amount


DEFAULT_HSN_CODE = "3004"

_UNSAFE_BILL_NO_CHARS = ("/", "\\", "\0")

# Flat customer keys used by the billing screen and older API records
_FLAT_CUSTOMER_KEYS = {
    "customerName": "name",
    "customerAddress": "address",
    "customerGSTIN": "gstin",
    "customerMobile": "mobile",
    "customerEmail": "email",
}


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
    OTHER = "Other"


class Customer(BaseModel):
    """Customer (party) information"""

    name: str = Field("", description="Customer name")
    address: str = Field("", description="Customer address")
    gstin: str = Field("", description="Customer GSTIN")
    mobile: str = Field("", description="Customer mobile number")
    email: str = Field("", description="Customer email")

    model_config = {"str_strip_whitespace": True}

    @field_validator("name", "address", "gstin", "mobile", "email", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class LineItem(BaseModel):
    """Bill line item"""

    medicine_id: Optional[str] = Field(None, alias="medicine", description="Remote medicine id")
    medicine_name: str = Field(..., alias="medicineName", description="Medicine name")
    batch_no: str = Field("", alias="batchNo", description="Batch number")
    hsn_code: str = Field(DEFAULT_HSN_CODE, alias="hsnCode", description="HSN code")
    price: Amount = Field(..., description="Unit selling price")
    quantity: int = Field(..., description="Quantity sold")
    discount_percent: Amount = Field(
        Decimal("0"), alias="discount", description="Discount percentage (0-100)"
    )
    mrp: Optional[Amount] = Field(None, description="Maximum retail price")
    category: str = Field("", description="Medicine category")
    description: str = Field("", description="Free-text description")

    model_config = {"populate_by_name": True}

    @field_validator("hsn_code", mode="before")
    @classmethod
    def default_hsn_code(cls, v: Any) -> Any:
        return v or DEFAULT_HSN_CODE

    @field_validator("discount_percent", mode="before")
    @classmethod
    def default_discount(cls, v: Any) -> Any:
        return 0 if v in (None, "") else v

    @field_validator("batch_no", "category", "description", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Bill(BaseModel):
    """
    Bill model

    Accepts the customer either nested under ``customer`` or as the flat
    ``customerName``/``customerMobile``/... keys the billing screen sends.
    """

    bill_no: str = Field(..., alias="billNo", min_length=1, description="Unique bill number")
    customer: Customer = Field(default_factory=Customer, description="Customer information")
    items: List[LineItem] = Field(default_factory=list, description="Line items in order")
    tax_rate_percent: Amount = Field(
        Decimal("0"), alias="taxRate", description="Tax percentage (0-100)"
    )
    payment_method: PaymentMethod = Field(
        PaymentMethod.CASH, alias="paymentMethod", description="Payment method"
    )
    created_at: datetime = Field(
        default_factory=datetime.now, alias="createdAt", description="Creation time"
    )

    model_config = {"populate_by_name": True}

    @field_validator("bill_no")
    @classmethod
    def no_path_separators(cls, v: str) -> str:
        """Bill numbers name exported files, so they cannot contain path separators"""
        if any(sep in v for sep in _UNSAFE_BILL_NO_CHARS) or v.strip(".") == "":
            raise ValueError("bill number must not contain path separators or be only dots")
        return v

    @model_validator(mode="before")
    @classmethod
    def lift_flat_fields(cls, data: Any) -> Any:
        """Accept the flat customer keys and ``date`` for createdAt"""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        flat = {
            target: data.pop(key)
            for key, target in _FLAT_CUSTOMER_KEYS.items()
            if key in data
        }
        if flat and "customer" not in data:
            data["customer"] = flat

        if "date" in data:
            date_value = data.pop("date")
            if "createdAt" not in data and "created_at" not in data:
                data["createdAt"] = date_value

        if data.get("taxRate") is None and "tax_rate_percent" not in data:
            data.pop("taxRate", None)

        return data

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Bill":
        """
        Build a bill from a JSON-shaped payload

        Raises:
            InvalidBillError: If the payload cannot be decoded into a bill
        """
        try:
            return cls.model_validate(payload)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise InvalidBillError(
                f"Invalid bill payload: {field}: {first['msg']}",
                field=field,
                details={"errors": e.error_count()},
            ) from e

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape the API expects"""
        return self.model_dump(by_alias=True, mode="json")
