"""
HTTP Client Unit Tests
"""

import json
from typing import List, Optional

import pytest
import requests

from pharmabill.client import http_client as http_module
from pharmabill.client.http_client import (
    CircuitBreakerConfig,
    CircuitState,
    HttpAuditEntry,
    HttpClient,
    HttpRequestOptions,
)
from pharmabill.config import PharmabillConfig
from pharmabill.exceptions import ApiError, AuthError, NetworkError


def make_response(status: int = 200, body=None, content: Optional[bytes] = None,
                  content_type: str = "application/json") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.headers["Content-Type"] = content_type
    if content is None:
        content = json.dumps(body if body is not None else {}).encode()
    response._content = content
    response.url = "http://api.test/api"
    return response


class FakeSession(requests.Session):
    """Session that replays queued responses instead of sending"""

    def __init__(self, responses: list) -> None:
        super().__init__()
        self.responses = list(responses)
        self.sent: List[requests.PreparedRequest] = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def config() -> PharmabillConfig:
    return PharmabillConfig(
        api_base_url="http://api.test/api",
        api_token="secret-token",
        retry_attempts=2,
        retry_delay=1,
    )


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(http_module.time, "sleep", lambda seconds: None)


class TestHttpClient:
    """Tests for HttpClient"""

    def test_get_json(self, config: PharmabillConfig):
        session = FakeSession([make_response(200, {"medicines": []})])
        client = HttpClient(config, session=session)

        response = client.get("/medicines/", HttpRequestOptions(params={"limit": 100}))

        assert response.status == 200
        assert response.data == {"medicines": []}
        sent = session.sent[0]
        assert sent.url == "http://api.test/api/medicines/?limit=100"
        assert sent.headers["Authorization"] == "Bearer secret-token"
        assert sent.headers["X-Request-ID"].startswith("pharmabill-")

    def test_post_json_body(self, config: PharmabillConfig):
        session = FakeSession([make_response(201, {"bill": {"billNo": "B-1"}})])
        client = HttpClient(config, session=session)

        client.post("/bills/", {"billNo": "B-1"})

        assert json.loads(session.sent[0].body) == {"billNo": "B-1"}

    def test_raw_response(self, config: PharmabillConfig):
        session = FakeSession([make_response(200, content=b"%PDF-1.4", content_type="application/pdf")])
        client = HttpClient(config, session=session)

        response = client.get("/bills/1/pdf", HttpRequestOptions(raw=True))

        assert response.data == b"%PDF-1.4"

    def test_retries_server_errors(self, config: PharmabillConfig):
        session = FakeSession([
            make_response(503),
            make_response(502),
            make_response(200, {"ok": True}),
        ])
        client = HttpClient(config, session=session)

        response = client.get("/bills/")

        assert response.data == {"ok": True}
        assert len(session.sent) == 3

    def test_gives_up_after_retries(self, config: PharmabillConfig):
        session = FakeSession([make_response(500, {"message": "boom"})] * 3)
        client = HttpClient(config, session=session)

        with pytest.raises(ApiError) as exc_info:
            client.get("/bills/")

        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "boom"
        assert len(session.sent) == 3

    def test_client_error_not_retried(self, config: PharmabillConfig):
        session = FakeSession([make_response(404, {"message": "Bill not found"})])
        client = HttpClient(config, session=session)

        with pytest.raises(ApiError) as exc_info:
            client.get("/bills/missing")

        assert exc_info.value.status_code == 404
        assert len(session.sent) == 1
        assert client.circuit_state == CircuitState.CLOSED

    def test_unauthorized(self, config: PharmabillConfig):
        session = FakeSession([make_response(401, {"message": "jwt expired"})])
        client = HttpClient(config, session=session)

        with pytest.raises(AuthError) as exc_info:
            client.get("/medicines/")

        assert exc_info.value.status_code == 401

    def test_timeout(self, config: PharmabillConfig):
        session = FakeSession([requests.exceptions.Timeout()] * 3)
        client = HttpClient(config, session=session)

        with pytest.raises(NetworkError) as exc_info:
            client.get("/medicines/")

        assert exc_info.value.network_code == "NET01"

    def test_skip_retry(self, config: PharmabillConfig):
        session = FakeSession([requests.exceptions.ConnectionError("refused")])
        client = HttpClient(config, session=session)

        with pytest.raises(NetworkError) as exc_info:
            client.get("/medicines/", HttpRequestOptions(skip_retry=True))

        assert exc_info.value.network_code == "NET02"
        assert len(session.sent) == 1

    def test_circuit_opens(self, config: PharmabillConfig):
        session = FakeSession([requests.exceptions.ConnectionError("refused")] * 2)
        client = HttpClient(
            config,
            circuit_breaker_config=CircuitBreakerConfig(failure_threshold=2),
            session=session,
        )

        for _ in range(2):
            with pytest.raises(NetworkError):
                client.get("/medicines/", HttpRequestOptions(skip_retry=True))

        assert client.circuit_state == CircuitState.OPEN
        with pytest.raises(NetworkError) as exc_info:
            client.get("/medicines/")
        assert exc_info.value.network_code == "NET05"
        assert len(session.sent) == 2

        client.reset_circuit_breaker()
        assert client.circuit_state == CircuitState.CLOSED

    def test_audit_entries_redacted(self, config: PharmabillConfig):
        session = FakeSession([make_response(200, {"token": "new-token"})])
        client = HttpClient(config, session=session)
        entries: List[HttpAuditEntry] = []
        client.set_audit_log_callback(entries.append)

        client.post("/auth/refresh", {"password": "hunter2", "user": "asha"})

        entry = entries[0]
        assert entry.success is True
        assert entry.headers["Authorization"] == "[REDACTED]"
        assert entry.body == {"password": "[REDACTED]", "user": "asha"}
        assert entry.response["body"] == {"token": "[REDACTED]"}

    def test_audit_disabled(self, config: PharmabillConfig):
        config.enable_audit_log = False
        session = FakeSession([make_response(200, {})])
        client = HttpClient(config, session=session)
        entries: List[HttpAuditEntry] = []
        client.set_audit_log_callback(entries.append)

        client.get("/medicines/")

        assert entries == []

    def test_set_token(self, config: PharmabillConfig):
        session = FakeSession([make_response(200, {})])
        client = HttpClient(config, session=session)

        client.set_token(None)
        client.get("/medicines/")

        assert "Authorization" not in session.sent[0].headers

    def test_retry_delay_backoff(self, config: PharmabillConfig):
        client = HttpClient(config, session=FakeSession([]))
        config.retry_delay = 1000

        assert client._calculate_retry_delay(0) == 1.0
        assert client._calculate_retry_delay(2) == 4.0
        assert client._calculate_retry_delay(10) == 16.0

    def test_audit_log_file(self, config: PharmabillConfig, tmp_path):
        config.audit_log_path = str(tmp_path / "logs" / "audit.jsonl")
        session = FakeSession([make_response(200, {"ok": True}), make_response(404, {"message": "missing"})])
        client = HttpClient(config, session=session)

        client.post("/auth/login", {"password": "hunter2"})
        with pytest.raises(ApiError):
            client.get("/bills/missing")
        client.close()

        with open(config.audit_log_path, encoding="utf-8") as f:
            entries = [json.loads(line) for line in f]
        assert [(e["method"], e["success"]) for e in entries] == [("POST", True), ("GET", False)]
        assert entries[0]["headers"]["Authorization"] == "[REDACTED]"
        assert entries[0]["body"] == {"password": "[REDACTED]"}
        assert entries[1]["response"]["statusCode"] == 404

    def test_no_audit_file_when_disabled(self, config: PharmabillConfig, tmp_path):
        config.enable_audit_log = False
        config.audit_log_path = str(tmp_path / "audit.jsonl")
        client = HttpClient(config, session=FakeSession([make_response(200, {})]))

        client.get("/medicines/")
        client.close()

        assert not (tmp_path / "audit.jsonl").exists()

    def test_interceptors(self, config: PharmabillConfig):
        session = FakeSession([make_response(200, {"ok": True})])
        client = HttpClient(config, session=session)
        seen = []

        def tag_request(prepared):
            prepared.headers["X-Counter"] = "7"
            return prepared

        def record_response(response):
            seen.append(response.status_code)
            return response

        client.add_request_interceptor(tag_request)
        client.add_response_interceptor(record_response)
        client.get("/medicines/")

        assert session.sent[0].headers["X-Counter"] == "7"
        assert seen == [200]
