"""
Billing Examples for pharmabill
Demonstrates configuration, checkout, invoice export and inventory checks
"""

from datetime import date, timedelta
from decimal import Decimal

from pharmabill.config import ConfigLoader, ConfigValidator, PharmabillConfig
from pharmabill.exceptions import InvalidBillError, StockError
from pharmabill.models import Customer, Medicine, PaymentMethod
from pharmabill.services import BillingService, Cart, CsvExporter, InventoryService
from pharmabill.utils import format_currency


# =============================================================================
# Example 1: Configuration
# =============================================================================

def load_config_example() -> PharmabillConfig:
    """
    Merge configuration from the environment and runtime overrides
    Priority: programmatic > environment > file

    export PHARMABILL_API_BASE_URL="http://localhost:5000/api"
    export PHARMABILL_API_TOKEN="..."
    export PHARMABILL_STORE_GST_NUMBER="29ABCDE1234F1Z5"
    """
    loader = ConfigLoader()
    return loader.load(
        env=True,
        config={
            "store_name": "Sri Lakshmi Medicals",
            "invoice_output_dir": "./invoices",
        },
    )


def validation_example() -> None:
    """Validate configuration before use"""
    result = ConfigValidator().validate({"timeout": 10, "store_gst_number": "123"})

    if not result.valid:
        print("Configuration validation failed:")
        for error in result.errors:
            print(f"  - {error.field}: {error.message}")


# =============================================================================
# Example 2: Checkout and Invoice Export
# =============================================================================

def sample_stock() -> list:
    today = date.today()
    return [
        Medicine(
            _id="med-1",
            name="Paracetamol 500mg",
            batchNo="PCM-0425",
            category="Tablet",
            price=Decimal("100"),
            mrp=Decimal("120"),
            quantity=40,
            expiryDate=today + timedelta(days=300),
        ),
        Medicine(
            _id="med-2",
            name="Cough Syrup",
            batchNo="CS-0112",
            category="Syrup",
            price=Decimal("85.50"),
            quantity=4,
            expiryDate=today + timedelta(days=12),
        ),
        Medicine(
            _id="med-3",
            name="Amoxicillin 250mg",
            batchNo="AMX-0923",
            category="Capsule",
            price=Decimal("42"),
            quantity=25,
            expiryDate=today - timedelta(days=3),
        ),
    ]


def checkout_example(config: PharmabillConfig) -> None:
    stock = sample_stock()
    service = BillingService(config)
    cart = service.new_cart()

    entry = cart.add(stock[0], 2)
    cart.set_discount(entry.key, 10)
    cart.add(stock[1])

    try:
        cart.add(stock[1], 10)
    except StockError as e:
        print(f"Not added: {e}")

    bill = cart.checkout(
        Customer(name="Asha Rao", mobile="9876543210"),
        payment_method=PaymentMethod.UPI,
    )

    prepared = service.prepare(bill)
    totals = prepared.totals

    print(f"Bill {bill.bill_no}")
    print(f"  Subtotal:    {format_currency(totals.subtotal)}")
    print(f"  Discount:    {format_currency(totals.total_discount)}")
    print(f"  Tax:         {format_currency(totals.tax_amount)}")
    print(f"  Grand total: {format_currency(totals.grand_total)}")
    print(f"  In words:    {prepared.document.totals.amount_in_words}")

    path = service.export_pdf(bill)
    print(f"  Invoice written to {path}")


def invalid_bill_example(config: PharmabillConfig) -> None:
    """Empty carts cannot be checked out"""
    try:
        Cart().checkout(Customer(name="Walk-in"))
    except InvalidBillError as e:
        print(f"Rejected ({e.field}): {e}")


# =============================================================================
# Example 3: Inventory Checks
# =============================================================================

def inventory_example(config: PharmabillConfig) -> None:
    stock = sample_stock()
    inventory = InventoryService(
        warning_days=config.expiry_warning_days,
        low_stock_threshold=config.low_stock_threshold,
    )

    print("Expired:", [m.name for m in inventory.expired(stock)])
    print("Expiring soon:", [m.name for m in inventory.expiring(stock)])
    print("Low stock:", [m.name for m in inventory.low_stock(stock)])

    path = CsvExporter().export(
        inventory.expiry_report_rows(stock), "expiry-report", config.invoice_output_dir
    )
    print(f"Expiry report written to {path}")


# =============================================================================
# Run Examples
# =============================================================================

if __name__ == "__main__":
    print("=== pharmabill Examples ===\n")

    print("1. Configuration Validation:")
    validation_example()
    print()

    config = load_config_example()

    print("2. Checkout:")
    checkout_example(config)
    invalid_bill_example(config)
    print()

    print("3. Inventory:")
    inventory_example(config)
