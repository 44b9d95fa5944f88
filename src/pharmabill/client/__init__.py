"""
HTTP Client module for pharmabill
"""

from pharmabill.client.api_client import PharmacyApiClient
from pharmabill.client.http_client import (
    HttpClient,
    HttpMethod,
    HttpRequestOptions,
    HttpResponse,
    HttpAuditEntry,
    AuditLogFile,
    CircuitState,
    CircuitBreakerConfig,
    NetworkErrorCode,
    RequestInterceptor,
    ResponseInterceptor,
)

__all__ = [
    "PharmacyApiClient",
    "HttpClient",
    "HttpMethod",
    "HttpRequestOptions",
    "HttpResponse",
    "HttpAuditEntry",
    "AuditLogFile",
    "CircuitState",
    "CircuitBreakerConfig",
    "NetworkErrorCode",
    "RequestInterceptor",
    "ResponseInterceptor",
]
