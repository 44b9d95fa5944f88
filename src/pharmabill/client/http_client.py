"""
HTTP transport layer for the pharmacy API
Handles all HTTP communication with retry logic, interceptors,
circuit breaker pattern, and connection pooling
"""

import json
import time
import uuid
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    List,
    Optional,
    TypeVar,
    Union,
)

import requests
from requests.adapters import HTTPAdapter

from pharmabill.config.pharmabill_config import PharmabillConfig
from pharmabill.exceptions import ApiError, AuthError, NetworkError, PharmabillError


T = TypeVar("T")

logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    """HTTP method types supported"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class CircuitState(str, Enum):
    """Circuit breaker states"""
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class NetworkErrorCode(str, Enum):
    """Network error codes"""
    TIMEOUT = "NET01"
    CONNECTION_REFUSED = "NET02"
    SSL_ERROR = "NET04"
    CIRCUIT_BREAKER_OPEN = "NET05"
    UNKNOWN = "NET10"


RETRYABLE_STATUSES = (408, 429, 500, 502, 503, 504)


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration"""
    failure_threshold: int = 5
    recovery_timeout: int = 30000  # milliseconds
    success_threshold: int = 3


@dataclass
class HttpRequestOptions:
    """Request options for HTTP client"""
    headers: Optional[Dict[str, str]] = None
    params: Optional[Dict[str, Union[str, int, bool]]] = None
    timeout: Optional[int] = None  # milliseconds
    skip_retry: bool = False
    raw: bool = False  # return response bytes instead of decoded JSON


@dataclass
class HttpResponse(Generic[T]):
    """HTTP response wrapper"""
    data: T
    status: int
    headers: Dict[str, str]
    duration: int  # milliseconds
    request_id: str


@dataclass
class HttpAuditEntry:
    """Audit log entry for HTTP requests"""
    timestamp: str
    request_id: str
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Any] = None
    response: Optional[Dict[str, Any]] = None
    duration: int = 0
    success: bool = False
    error: Optional[str] = None
    retry_attempt: Optional[int] = None


# Sensitive fields that should be redacted in logs
SENSITIVE_FIELDS = [
    "authorization",
    "token",
    "password",
    "x-api-key",
]


class AuditLogFile:
    """
    Audit sink that appends one JSON object per entry to a file

    Entries are already redacted when they reach the sink.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        self._handler = logging.FileHandler(self.path, encoding="utf-8")
        self._handler.setFormatter(logging.Formatter("%(message)s"))

        # One logger per sink so two clients never share handlers
        self._logger = logging.getLogger(f"{__name__}.audit.{uuid.uuid4().hex[:8]}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._logger.addHandler(self._handler)

    def __call__(self, entry: HttpAuditEntry) -> None:
        self._logger.info(json.dumps(asdict(entry), default=str))

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()


RequestInterceptor = Callable[[requests.PreparedRequest], requests.PreparedRequest]

ResponseInterceptor = Callable[[requests.Response], requests.Response]


class HttpClient:
    """
    HTTP Client for the pharmacy API

    Features:
    - Automatic retry with exponential backoff
    - Circuit breaker pattern for resilience
    - Request/response interceptors
    - Request ID generation for traceability
    - Audit logging with sensitive values redacted, to a callback and
      to ``audit_log_path`` as JSON lines
    - Connection keep-alive via session pooling

    Example:
        >>> config = PharmabillConfig(api_token="...")
        >>> client = HttpClient(config)
        >>> response = client.get("/medicines/", HttpRequestOptions(params={"limit": 100}))
        >>> print(response.data)
    """

    def __init__(
        self,
        config: PharmabillConfig,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Create a new HTTP client instance

        Args:
            config: Resolved configuration
            circuit_breaker_config: Optional circuit breaker configuration
            session: Preconfigured session (default: a pooled session)
        """
        self.config = config
        self.circuit_config = circuit_breaker_config or CircuitBreakerConfig()

        self._circuit_state = CircuitState.CLOSED
        self._circuit_failure_count = 0
        self._circuit_success_count = 0
        self._circuit_open_time = 0.0

        self._request_interceptors: List[RequestInterceptor] = []
        self._response_interceptors: List[ResponseInterceptor] = []

        self._audit_log_callback: Optional[Callable[[HttpAuditEntry], None]] = None
        self._audit_file: Optional[AuditLogFile] = None
        if config.enable_audit_log and config.audit_log_path:
            self._audit_file = AuditLogFile(config.audit_log_path)

        self._session = session or self._create_session()
        self._session.headers.update(self._default_headers())

    def _create_session(self) -> requests.Session:
        """Create requests session with connection pooling"""
        session = requests.Session()

        # Retries are handled here, not by urllib3
        adapter = HTTPAdapter(
            pool_connections=10,
            pool_maxsize=10,
            max_retries=0,
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    def set_token(self, token: Optional[str]) -> None:
        """Replace or clear the bearer token"""
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        else:
            self._session.headers.pop("Authorization", None)

    def _generate_request_id(self) -> str:
        """Generate unique request ID for traceability"""
        timestamp = hex(int(time.time() * 1000))[2:]
        unique_id = uuid.uuid4().hex[:8]
        return f"pharmabill-{timestamp}-{unique_id}"

    def _redact_sensitive_data(self, obj: Any) -> Any:
        """Redact sensitive data from object for logging"""
        if isinstance(obj, list):
            return [self._redact_sensitive_data(item) for item in obj]

        if isinstance(obj, dict):
            redacted = {}
            for key, value in obj.items():
                lower_key = str(key).lower()
                if any(field in lower_key for field in SENSITIVE_FIELDS):
                    redacted[key] = "[REDACTED]"
                elif isinstance(value, (dict, list)):
                    redacted[key] = self._redact_sensitive_data(value)
                else:
                    redacted[key] = value
            return redacted

        return obj

    def _check_circuit_breaker(self) -> None:
        """Check circuit breaker state and raise if open"""
        if self._circuit_state == CircuitState.OPEN:
            time_since_open = (time.time() * 1000) - self._circuit_open_time

            if time_since_open >= self.circuit_config.recovery_timeout:
                self._circuit_state = CircuitState.HALF_OPEN
                self._circuit_success_count = 0
                logger.info("Circuit breaker transitioning to HALF_OPEN state")
            else:
                retry_after = int(
                    (self.circuit_config.recovery_timeout - time_since_open) / 1000
                )
                raise NetworkError.circuit_breaker_open(retry_after)

    def _record_circuit_success(self) -> None:
        """Record circuit breaker success"""
        if self._circuit_state == CircuitState.HALF_OPEN:
            self._circuit_success_count += 1

            if self._circuit_success_count >= self.circuit_config.success_threshold:
                self._circuit_state = CircuitState.CLOSED
                self._circuit_failure_count = 0
                self._circuit_success_count = 0
                logger.info("Circuit breaker CLOSED after successful recovery")
        elif self._circuit_state == CircuitState.CLOSED:
            self._circuit_failure_count = 0

    def _record_circuit_failure(self) -> None:
        """Record circuit breaker failure"""
        if self._circuit_state == CircuitState.HALF_OPEN:
            self._circuit_state = CircuitState.OPEN
            self._circuit_open_time = time.time() * 1000
            logger.warning("Circuit breaker REOPENED after failure in half-open state")
        elif self._circuit_state == CircuitState.CLOSED:
            self._circuit_failure_count += 1

            if self._circuit_failure_count >= self.circuit_config.failure_threshold:
                self._circuit_state = CircuitState.OPEN
                self._circuit_open_time = time.time() * 1000
                logger.warning(
                    f"Circuit breaker OPENED after {self._circuit_failure_count} failures"
                )

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Calculate retry delay with exponential backoff

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds, capped at 16 seconds
        """
        delay_ms = self.config.retry_delay * (2 ** attempt)
        delay_ms = min(delay_ms, 16000)
        return delay_ms / 1000.0

    def _is_retryable_error(self, error: Exception) -> bool:
        """Determine if error is retryable"""
        if isinstance(error, requests.exceptions.HTTPError):
            response = error.response
            return response is not None and response.status_code in RETRYABLE_STATUSES

        if isinstance(error, requests.exceptions.RequestException):
            return True

        if isinstance(error, NetworkError):
            return error.retryable

        return False

    def _is_server_failure(self, error: Exception) -> bool:
        """Client errors (4xx other than 408/429) do not count against the circuit"""
        if isinstance(error, requests.exceptions.HTTPError):
            response = error.response
            return response is None or response.status_code in RETRYABLE_STATUSES
        return True

    def _normalize_error(
        self, error: Exception, response: Optional[requests.Response] = None
    ) -> PharmabillError:
        """Normalize error from various sources into PharmabillError"""
        if isinstance(error, PharmabillError):
            return error

        if isinstance(error, requests.exceptions.Timeout):
            return NetworkError.timeout()

        if isinstance(error, requests.exceptions.SSLError):
            return NetworkError(
                f"SSL/TLS error: {error}",
                network_code=NetworkErrorCode.SSL_ERROR.value,
                retryable=False,
            )

        if isinstance(error, requests.exceptions.ConnectionError):
            return NetworkError.connection_refused(f"Connection error: {error}")

        if isinstance(error, requests.exceptions.HTTPError) and response is not None:
            if response.status_code == 401:
                return AuthError()

            message = str(error)
            try:
                data = response.json()
                if isinstance(data, dict):
                    message = data.get("message") or data.get("error") or message
            except ValueError:
                pass
            return ApiError(message, status_code=response.status_code)

        if isinstance(error, requests.exceptions.RequestException):
            return NetworkError(f"Request error: {error}")

        return PharmabillError(f"Request error: {error}")

    def _create_audit_entry(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any],
        request_id: str,
        start_time: float,
        response: Optional[requests.Response] = None,
        error: Optional[Exception] = None,
        retry_attempt: Optional[int] = None,
    ) -> HttpAuditEntry:
        """Create audit log entry"""
        duration = int((time.time() - start_time) * 1000)

        response_data = None
        if response is not None:
            content_type = response.headers.get("Content-Type", "")
            if "json" in content_type:
                try:
                    response_body = response.json()
                except ValueError:
                    response_body = response.text[:500] if response.text else None
            else:
                response_body = f"<{len(response.content or b'')} bytes {content_type}>"

            response_data = {
                "statusCode": response.status_code,
                "body": self._redact_sensitive_data(response_body),
            }

        return HttpAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=method,
            url=url,
            headers=self._redact_sensitive_data(dict(headers)),
            body=self._redact_sensitive_data(body),
            response=response_data,
            duration=duration,
            success=error is None,
            error=str(error) if error else None,
            retry_attempt=retry_attempt,
        )

    def _log_audit(self, entry: HttpAuditEntry) -> None:
        """Log audit entry"""
        if not self.config.enable_audit_log:
            return
        if self._audit_file:
            self._audit_file(entry)
        if self._audit_log_callback:
            self._audit_log_callback(entry)

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        """Add a custom request interceptor"""
        self._request_interceptors.append(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        """Add a custom response interceptor"""
        self._response_interceptors.append(interceptor)

    def set_audit_log_callback(
        self, callback: Callable[[HttpAuditEntry], None]
    ) -> None:
        """Set audit log callback"""
        self._audit_log_callback = callback

    def _apply_request_interceptors(
        self, prepared: requests.PreparedRequest
    ) -> requests.PreparedRequest:
        for interceptor in self._request_interceptors:
            prepared = interceptor(prepared)
        return prepared

    def _apply_response_interceptors(
        self, response: requests.Response
    ) -> requests.Response:
        for interceptor in self._response_interceptors:
            response = interceptor(response)
        return response

    def _execute_with_retry(
        self,
        method: HttpMethod,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """Execute HTTP request with retry logic"""
        options = options or HttpRequestOptions()

        self._check_circuit_breaker()

        max_attempts = 1 if options.skip_retry else self.config.retry_attempts + 1
        full_url = f"{self.base_url}{url}"
        timeout_seconds = (options.timeout or self.config.timeout) / 1000.0

        for attempt in range(max_attempts):
            start_time = time.time()
            request_id = self._generate_request_id()

            headers = dict(self._session.headers)
            headers["X-Request-ID"] = request_id
            if options.headers:
                headers.update(options.headers)

            response: Optional[requests.Response] = None

            try:
                request = requests.Request(
                    method=method.value,
                    url=full_url,
                    headers=headers,
                    params=options.params,
                    json=data,
                )
                prepared = self._session.prepare_request(request)
                prepared = self._apply_request_interceptors(prepared)

                response = self._session.send(prepared, timeout=timeout_seconds)
                response = self._apply_response_interceptors(response)
                response.raise_for_status()

                self._record_circuit_success()

                self._log_audit(self._create_audit_entry(
                    method=method.value,
                    url=full_url,
                    headers=headers,
                    body=data,
                    request_id=request_id,
                    start_time=start_time,
                    response=response,
                    retry_attempt=attempt if attempt > 0 else None,
                ))

                if options.raw:
                    response_data: Any = response.content
                else:
                    try:
                        response_data = response.json()
                    except ValueError:
                        response_data = response.text

                return HttpResponse(
                    data=response_data,
                    status=response.status_code,
                    headers=dict(response.headers),
                    duration=int((time.time() - start_time) * 1000),
                    request_id=request_id,
                )

            except Exception as e:
                if self._is_server_failure(e):
                    self._record_circuit_failure()

                self._log_audit(self._create_audit_entry(
                    method=method.value,
                    url=full_url,
                    headers=headers,
                    body=data,
                    request_id=request_id,
                    start_time=start_time,
                    response=response,
                    error=e,
                    retry_attempt=attempt,
                ))

                if attempt < max_attempts - 1 and self._is_retryable_error(e):
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{max_attempts}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    time.sleep(delay)
                    continue

                raise self._normalize_error(e, response) from e

        raise PharmabillError("Unknown error occurred")

    def get(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """
        Perform GET request

        Args:
            url: Request URL (relative to base URL)
            options: Optional request options

        Returns:
            HTTP response wrapper
        """
        return self._execute_with_retry(HttpMethod.GET, url, None, options)

    def post(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """Perform POST request"""
        return self._execute_with_retry(HttpMethod.POST, url, data, options)

    def put(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """Perform PUT request"""
        return self._execute_with_retry(HttpMethod.PUT, url, data, options)

    def delete(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """Perform DELETE request"""
        return self._execute_with_retry(HttpMethod.DELETE, url, None, options)

    @property
    def circuit_state(self) -> CircuitState:
        """Get current circuit breaker state"""
        return self._circuit_state

    def reset_circuit_breaker(self) -> None:
        """Reset circuit breaker to closed state"""
        self._circuit_state = CircuitState.CLOSED
        self._circuit_failure_count = 0
        self._circuit_success_count = 0
        self._circuit_open_time = 0.0
        logger.info("Circuit breaker manually reset to CLOSED state")

    @property
    def base_url(self) -> str:
        """Get base URL"""
        return self.config.api_base_url

    def close(self) -> None:
        """Close the HTTP session and the audit log file"""
        self._session.close()
        if self._audit_file:
            self._audit_file.close()
            self._audit_file = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
