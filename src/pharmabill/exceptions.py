"""Exception classes for pharmabill"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Error category codes"""
    VALIDATION = "VAL"
    AUTH = "AUTH"
    NETWORK = "NET"
    API = "API"
    EXPORT = "EXPORT"
    STOCK = "STOCK"
    CONFIG = "CONFIG"
    UNKNOWN = "UNKNOWN"


class PharmabillError(Exception):
    """
    Base exception for pharmabill errors

    All errors raised by the library extend from this class.
    Provides consistent error handling and categorization.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = self._determine_category(code)

    def _determine_category(self, code: Optional[str]) -> ErrorCategory:
        """Determine error category from code"""
        if not code:
            return ErrorCategory.UNKNOWN

        for category in ErrorCategory:
            if category is not ErrorCategory.UNKNOWN and code.startswith(category.value):
                return category

        return ErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: ErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class ValidationError(PharmabillError):
    """Validation error"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.field = field


class InvalidBillError(ValidationError):
    """
    Raised for a malformed bill

    Empty item list, negative price or quantity, or a tax/discount
    percentage outside [0, 100]. Nothing may be rendered for such a bill.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, field=field, details=details, code="VAL_INVALID_BILL")

    @classmethod
    def empty(cls) -> "InvalidBillError":
        """Create an error for a bill without items"""
        return cls("Bill must contain at least one item", field="items")

    @classmethod
    def out_of_range(
        cls, field: str, value: Any, low: Any = 0, high: Any = 100
    ) -> "InvalidBillError":
        """Create an error for a value outside its allowed range"""
        return cls(
            f"{field} must be between {low} and {high}, got {value}",
            field=field,
            details={"value": str(value)},
        )

    @classmethod
    def negative(cls, field: str, value: Any) -> "InvalidBillError":
        """Create an error for a negative numeric field"""
        return cls(
            f"{field} must not be negative, got {value}",
            field=field,
            details={"value": str(value)},
        )


class StockError(PharmabillError):
    """Requested quantity cannot be served from stock"""

    def __init__(
        self,
        message: str,
        available: int = 0,
        requested: int = 0,
    ) -> None:
        super().__init__(
            message,
            code="STOCK01",
            details={"available": available, "requested": requested},
        )
        self.available = available
        self.requested = requested


class ExportFailedError(PharmabillError):
    """
    Print/PDF/file export failure

    The exporter leaves no partial output behind, so the same bill can
    be exported again.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[Exception] = None,
        code: str = "EXPORT01",
    ) -> None:
        super().__init__(
            message,
            code=code,
            cause=cause,
            details={"path": path} if path else None,
        )
        self.path = path


class NetworkError(PharmabillError):
    """
    Network error for HTTP transport layer failures
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        network_code: str = "NET10",
        retryable: bool = True,
    ) -> None:
        super().__init__(message, code=network_code, status_code=status_code)
        self.network_code = network_code
        self.retryable = retryable

    @classmethod
    def timeout(cls, message: str = "Request timed out") -> "NetworkError":
        """Create a timeout error"""
        return cls(message, status_code=408, network_code="NET01", retryable=True)

    @classmethod
    def connection_refused(
        cls, message: str = "Connection refused"
    ) -> "NetworkError":
        """Create a connection refused error"""
        return cls(message, network_code="NET02", retryable=True)

    @classmethod
    def circuit_breaker_open(cls, retry_after_seconds: int) -> "NetworkError":
        """Create a circuit breaker open error"""
        return cls(
            f"Circuit breaker is open. Retry after {retry_after_seconds} seconds",
            status_code=503,
            network_code="NET05",
            retryable=False,
        )


class ApiError(PharmabillError):
    """Error response returned by the pharmacy API"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: str = "API01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, status_code=status_code, details=details)


class AuthError(ApiError):
    """Session token missing, expired or rejected"""

    def __init__(self, message: str = "Session expired. Please login again.") -> None:
        super().__init__(message, status_code=401, code="AUTH01")


class ConfigError(PharmabillError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
