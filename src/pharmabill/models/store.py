"""Store profile model"""

from pydantic import BaseModel, Field


class StoreProfile(BaseModel):
    """Store identity printed on invoices"""

    store_name: str = Field("MEDICAL STORE", alias="storeName", description="Store name")
    address: str = Field("Church Street Bengaluru", description="Store address")
    phone: str = Field("+91-1075314648", description="Primary phone")
    alt_phone: str = Field("+91-8029924749", alias="altPhone", description="Alternate phone")
    gst_number: str = Field("", alias="gstNumber", description="Store GSTIN")
    manager_name: str = Field("Store Manager", alias="managerName", description="Manager name")

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @property
    def phone_line(self) -> str:
        """Phone numbers as printed in the invoice header"""
        return " ".join(p for p in (self.phone, self.alt_phone) if p)
