import json
import logging

from fastapi.testclient import TestClient
from sqlalchemy import inspect
from starlette.requests import Request

from travel_api.core.database import Database
from travel_api.core.logging_setup import JsonFormatter, mask_sensitive
from travel_api.core.rate_limiter import InMemoryRateLimiterService
from travel_api.main import create_app
from travel_api.middleware.rate_limit import client_key


def test_health_and_root_are_public(client):
    health = client.get("/api/health")
    root = client.get("/")

    assert health.status_code == 200
    assert health.json()["success"] is True
    assert health.json()["message"] == "Travel Agency API is running"
    assert root.json()["endpoints"]["trips"] == "/api/trips"


def test_unknown_route_uses_failure_envelope(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route /api/nowhere not found"}


def test_missing_query_parameter_is_a_validation_failure(client, employee, auth_headers):
    response = client.get("/api/trips/range", headers=auth_headers(employee))

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
    assert "start" in response.json()["error"]


def test_request_id_is_echoed_or_generated(client):
    echoed = client.get("/api/health", headers={"X-Request-ID": "req-123"})
    generated = client.get("/api/health")

    assert echoed.headers["X-Request-ID"] == "req-123"
    assert generated.headers["X-Request-ID"]


def test_unhandled_error_hides_detail_outside_dev(database, token_service):
    app = create_app(database=database, token_service=token_service, rate_limit_enabled=False, expose_error_detail=False)

    @app.get("/api/boom")
    def boom():
        raise RuntimeError("database password=hunter2 leaked")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/api/boom")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


def test_unhandled_error_exposes_detail_in_dev(database, token_service):
    app = create_app(database=database, token_service=token_service, rate_limit_enabled=False, expose_error_detail=True)

    @app.get("/api/boom")
    def boom():
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/api/boom")

    assert response.status_code == 500
    assert response.json()["error"] == "kaboom"


def test_rate_limit_rejects_requests_over_the_window_limit(database, token_service):
    limiter = InMemoryRateLimiterService(limit=2, window_seconds=60)
    app = create_app(database=database, token_service=token_service, rate_limiter=limiter, rate_limit_enabled=True)
    client = TestClient(app)

    first = client.get("/api/health")
    second = client.get("/api/health")
    third = client.get("/api/health")

    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert second.status_code == 200
    assert third.status_code == 429
    assert third.json() == {
        "success": False,
        "message": "Too many requests from this IP, please try again later.",
    }
    assert int(third.headers["Retry-After"]) >= 1


def test_rate_limit_ignores_forwarded_header_from_untrusted_peer(database, token_service):
    limiter = InMemoryRateLimiterService(limit=2, window_seconds=60)
    app = create_app(
        database=database,
        token_service=token_service,
        rate_limiter=limiter,
        rate_limit_enabled=True,
        trusted_proxies=(),
    )
    client = TestClient(app)

    codes = [
        client.get("/api/health", headers={"X-Forwarded-For": f"10.0.0.{i}"}).status_code
        for i in range(10)
    ]

    assert codes[:2] == [200, 200]
    assert set(codes[2:]) == {429}
    assert limiter.tracked_clients == 1


def test_rate_limit_uses_forwarded_client_behind_trusted_proxy(database, token_service):
    limiter = InMemoryRateLimiterService(limit=1, window_seconds=60)
    app = create_app(
        database=database,
        token_service=token_service,
        rate_limiter=limiter,
        rate_limit_enabled=True,
        trusted_proxies={"testclient"},
    )
    client = TestClient(app)

    assert client.get("/api/health", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 200
    assert client.get("/api/health", headers={"X-Forwarded-For": "10.0.0.2"}).status_code == 200
    assert client.get("/api/health", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429


def test_json_formatter_masks_credentials():
    record = logging.LogRecord(
        name="travel_api.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="login attempt password=hunter2 Authorization: Bearer abc.def.ghi",
        args=(),
        exc_info=None,
    )

    payload = json.loads(JsonFormatter("%(message)s").format(record))

    assert "hunter2" not in payload["message"]
    assert "abc.def.ghi" not in payload["message"]
    assert payload["level"] == "INFO"


def test_startup_creates_schema_for_sqlite(token_service):
    database = Database.from_url("sqlite+pysqlite:///:memory:")
    app = create_app(database=database, token_service=token_service, rate_limit_enabled=False)

    with TestClient(app) as client:
        tables = set(inspect(database.engine).get_table_names())
        response = client.get("/api/tourists")

    assert {"users", "tourists", "trips"} <= tables
    assert response.status_code == 401


def _request_from(peer: str, forwarded: str | None = None) -> Request:
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers, "client": (peer, 5000)})


def test_client_key_takes_rightmost_untrusted_hop():
    proxies = frozenset({"10.0.0.5", "10.0.0.6"})

    assert client_key(_request_from("203.0.113.9", "1.1.1.1")) == "203.0.113.9"
    assert client_key(_request_from("10.0.0.5", "6.6.6.6, 198.51.100.7, 10.0.0.6"), proxies) == "198.51.100.7"
    assert client_key(_request_from("10.0.0.5"), proxies) == "10.0.0.5"


def test_mask_sensitive_hides_emails_and_bare_tokens():
    masked = mask_sensitive("exists email=rina.agent@agency.com token eyJhbGciOi.eyJzdWIiOi.c2lnbmF0dXJl")

    assert "rina.agent@agency.com" not in masked
    assert "r***@agency.com" in masked
    assert "eyJhbGciOi" not in masked
