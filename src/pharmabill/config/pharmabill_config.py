"""
Pharmabill Configuration Types and Schema
Type-safe configuration objects for the billing library
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from pharmabill.models.store import StoreProfile


DEFAULT_API_BASE_URL = "http://localhost:5000/api"


class ConfigDefaults:
    """Default configuration values"""
    API_BASE_URL = DEFAULT_API_BASE_URL
    TIMEOUT = 30000
    RETRY_ATTEMPTS = 3
    RETRY_DELAY = 1000
    ENABLE_AUDIT_LOG = True
    DEFAULT_TAX_RATE = 0.0
    LOW_STOCK_THRESHOLD = 5
    EXPIRY_WARNING_DAYS = 30
    MIN_INVOICE_ROWS = 5
    INVOICE_OUTPUT_DIR = "./invoices"


# Environment variable mapping
ENV_VAR_MAPPING = {
    "PHARMABILL_API_BASE_URL": "api_base_url",
    "PHARMABILL_API_TOKEN": "api_token",
    "PHARMABILL_TIMEOUT": "timeout",
    "PHARMABILL_RETRY_ATTEMPTS": "retry_attempts",
    "PHARMABILL_RETRY_DELAY": "retry_delay",
    "PHARMABILL_ENABLE_AUDIT_LOG": "enable_audit_log",
    "PHARMABILL_AUDIT_LOG_PATH": "audit_log_path",
    "PHARMABILL_DEFAULT_TAX_RATE": "default_tax_rate",
    "PHARMABILL_LOW_STOCK_THRESHOLD": "low_stock_threshold",
    "PHARMABILL_EXPIRY_WARNING_DAYS": "expiry_warning_days",
    "PHARMABILL_MIN_INVOICE_ROWS": "min_invoice_rows",
    "PHARMABILL_INVOICE_OUTPUT_DIR": "invoice_output_dir",
    "PHARMABILL_STORE_NAME": "store_name",
    "PHARMABILL_STORE_ADDRESS": "store_address",
    "PHARMABILL_STORE_PHONE": "store_phone",
    "PHARMABILL_STORE_ALT_PHONE": "store_alt_phone",
    "PHARMABILL_STORE_GST_NUMBER": "store_gst_number",
    "PHARMABILL_MANAGER_NAME": "manager_name",
}


class PharmabillConfig(BaseModel):
    """
    Main configuration class
    Defines all configuration options for the billing library
    """

    # Remote API
    api_base_url: str = Field(
        default=ConfigDefaults.API_BASE_URL,
        description="Base URL of the medicines/bills/reports API"
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent with every API request"
    )
    timeout: int = Field(
        default=ConfigDefaults.TIMEOUT,
        description="Request timeout in milliseconds",
        ge=1000,
        le=300000
    )
    retry_attempts: int = Field(
        default=ConfigDefaults.RETRY_ATTEMPTS,
        description="Number of retry attempts",
        ge=0,
        le=10
    )
    retry_delay: int = Field(
        default=ConfigDefaults.RETRY_DELAY,
        description="Base delay between retries in milliseconds",
        ge=1,
        le=60000
    )

    # Audit logging
    enable_audit_log: bool = Field(
        default=ConfigDefaults.ENABLE_AUDIT_LOG,
        description="Enable audit logging of API requests"
    )
    audit_log_path: Optional[str] = Field(
        default=None,
        description="File path for audit logs"
    )

    # Billing
    default_tax_rate: float = Field(
        default=ConfigDefaults.DEFAULT_TAX_RATE,
        description="Tax rate percentage applied when checkout gives none",
        ge=0,
        le=100
    )
    min_invoice_rows: int = Field(
        default=ConfigDefaults.MIN_INVOICE_ROWS,
        description="Minimum number of rows in the invoice item table",
        ge=0,
        le=50
    )
    invoice_output_dir: str = Field(
        default=ConfigDefaults.INVOICE_OUTPUT_DIR,
        description="Directory exported invoices are written to"
    )

    # Inventory
    low_stock_threshold: int = Field(
        default=ConfigDefaults.LOW_STOCK_THRESHOLD,
        description="Quantity at or below which stock counts as low",
        ge=0
    )
    expiry_warning_days: int = Field(
        default=ConfigDefaults.EXPIRY_WARNING_DAYS,
        description="Days before expiry at which a medicine counts as expiring",
        ge=0
    )

    # Store profile
    store_name: str = Field(default="MEDICAL STORE", min_length=1)
    store_address: str = Field(default="Church Street Bengaluru")
    store_phone: str = Field(default="+91-1075314648")
    store_alt_phone: str = Field(default="+91-8029924749")
    store_gst_number: str = Field(default="")
    manager_name: str = Field(default="Store Manager")

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate api_base_url is a valid URL"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

    def store_profile(self) -> StoreProfile:
        """Build the store profile printed on invoices"""
        return StoreProfile(
            store_name=self.store_name,
            address=self.store_address,
            phone=self.store_phone,
            alt_phone=self.store_alt_phone,
            gst_number=self.store_gst_number,
            manager_name=self.manager_name,
        )


class PartialPharmabillConfig(BaseModel):
    """
    Partial configuration for merging from multiple sources
    All fields are optional to allow partial configuration
    """

    api_base_url: Optional[str] = None
    api_token: Optional[str] = None
    timeout: Optional[int] = None
    retry_attempts: Optional[int] = None
    retry_delay: Optional[int] = None
    enable_audit_log: Optional[bool] = None
    audit_log_path: Optional[str] = None
    default_tax_rate: Optional[float] = None
    low_stock_threshold: Optional[int] = None
    expiry_warning_days: Optional[int] = None
    min_invoice_rows: Optional[int] = None
    invoice_output_dir: Optional[str] = None
    store_name: Optional[str] = None
    store_address: Optional[str] = None
    store_phone: Optional[str] = None
    store_alt_phone: Optional[str] = None
    store_gst_number: Optional[str] = None
    manager_name: Optional[str] = None

    model_config = {
        "str_strip_whitespace": True,
    }
