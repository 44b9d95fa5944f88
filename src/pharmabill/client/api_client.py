"""
Pharmacy API client
Typed access to the medicines, bills and reports endpoints
"""

import logging
from typing import Any, Dict, List, Optional

from pharmabill.client.http_client import HttpClient, HttpRequestOptions
from pharmabill.config.pharmabill_config import PharmabillConfig
from pharmabill.models.bill import Bill
from pharmabill.models.medicine import Medicine
from pharmabill.models.totals import BillTotals


logger = logging.getLogger(__name__)


def _records(data: Any, key: str) -> List[Dict[str, Any]]:
    """List payloads come either bare or wrapped as {key: [...]}"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for candidate in (key, "data", "items"):
            value = data.get(candidate)
            if isinstance(value, list):
                return value
    return []


def _record(data: Any, key: str) -> Dict[str, Any]:
    """Single-record payloads come either bare or wrapped as {key: {...}}"""
    if isinstance(data, dict):
        for candidate in (key, "data"):
            value = data.get(candidate)
            if isinstance(value, dict):
                return value
        return data
    return {}


class PharmacyApiClient:
    """
    Client for the pharmacy REST API

    Example:
        >>> with PharmacyApiClient(config) as api:
        ...     medicines = api.list_medicines(stock_status="inStock")
        ...     api.save_bill(bill, totals)
    """

    def __init__(
        self,
        config: PharmabillConfig,
        http_client: Optional[HttpClient] = None,
    ) -> None:
        self.config = config
        self.http = http_client or HttpClient(config)

    # Medicines

    def list_medicines(
        self,
        limit: Optional[int] = None,
        stock_status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Medicine]:
        params: Dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if stock_status:
            params["stockStatus"] = stock_status
        if search:
            params["search"] = search

        response = self.http.get("/medicines/", HttpRequestOptions(params=params or None))
        return [Medicine.model_validate(r) for r in _records(response.data, "medicines")]

    def get_medicine(self, medicine_id: str) -> Medicine:
        response = self.http.get(f"/medicines/{medicine_id}")
        return Medicine.model_validate(_record(response.data, "medicine"))

    def create_medicine(self, medicine: Medicine) -> Medicine:
        response = self.http.post(
            "/medicines/",
            medicine.model_dump(by_alias=True, mode="json", exclude_none=True),
        )
        logger.info(f"Medicine {medicine.name} created")
        return Medicine.model_validate(_record(response.data, "medicine"))

    def update_medicine(self, medicine_id: str, changes: Dict[str, Any]) -> Medicine:
        response = self.http.put(f"/medicines/{medicine_id}", changes)
        return Medicine.model_validate(_record(response.data, "medicine"))

    def delete_medicine(self, medicine_id: str) -> None:
        self.http.delete(f"/medicines/{medicine_id}")
        logger.info(f"Medicine {medicine_id} deleted")

    def expiring_medicines(self, expiry_type: str = "expiring") -> List[Medicine]:
        """Medicines the server classifies as ``expired`` or ``expiring``"""
        response = self.http.get(
            "/medicines/expiry", HttpRequestOptions(params={"type": expiry_type})
        )
        return [Medicine.model_validate(r) for r in _records(response.data, "medicines")]

    def dashboard_stats(self) -> Dict[str, Any]:
        return self.http.get("/medicines/dashboard/stats").data

    # Bills

    def list_bills(self, params: Optional[Dict[str, Any]] = None) -> List[Bill]:
        response = self.http.get("/bills/", HttpRequestOptions(params=params))
        return [Bill.from_payload(r) for r in _records(response.data, "bills")]

    def get_bill(self, bill_id: str) -> Bill:
        response = self.http.get(f"/bills/{bill_id}")
        return Bill.from_payload(_record(response.data, "bill"))

    def save_bill(self, bill: Bill, totals: BillTotals) -> Dict[str, Any]:
        """
        Post a bill with its computed totals

        Returns:
            The stored record as returned by the server
        """
        payload = bill.to_payload()
        payload.update(totals.model_dump(by_alias=True, mode="json"))
        # Older consumers read the grand total as "total"
        payload["total"] = payload["grandTotal"]

        response = self.http.post("/bills/", payload)
        logger.info(f"Bill {bill.bill_no} saved")
        return _record(response.data, "bill")

    def update_bill(self, bill_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        response = self.http.put(f"/bills/{bill_id}", changes)
        return _record(response.data, "bill")

    def delete_bill(self, bill_id: str) -> None:
        self.http.delete(f"/bills/{bill_id}")
        logger.info(f"Bill {bill_id} deleted")

    def sales_stats(self) -> Dict[str, Any]:
        return self.http.get("/bills/stats/sales").data

    def download_bill_pdf(self, bill_id: str) -> bytes:
        """Server-rendered PDF for a stored bill"""
        response = self.http.get(f"/bills/{bill_id}/pdf", HttpRequestOptions(raw=True))
        return response.data

    # Reports

    def sales_report(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.http.get("/reports/sales", HttpRequestOptions(params=params)).data

    def inventory_report(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.http.get("/reports/inventory", HttpRequestOptions(params=params)).data

    def expiry_report(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.http.get("/reports/expiry", HttpRequestOptions(params=params)).data

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "PharmacyApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
