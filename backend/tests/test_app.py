"""
Tests for cross-origin handling, error rendering and health endpoints
"""
import pytest
from fastapi.testclient import TestClient
from loguru import logger

from club_cms.core.config import settings
from club_cms.core.logging_config import TEXT_FORMAT
from club_cms.main import app
from club_cms.services.kv.store import MemoryKeyValueStore
from club_cms.services.storage.r2_client import LocalObjectStore
from conftest import FailingKeyValueStore, make_settings


CORS_EXPECTED = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization, X-Admin-Token",
}


def assert_cors(response):
    for name, value in CORS_EXPECTED.items():
        assert response.headers[name] == value


# ============================================================================
# CORS
# ============================================================================

@pytest.mark.parametrize("path", ["/content", "/content/update", "/upload", "/does/not/exist"])
def test_options_returns_empty_success(client, path):
    response = client.options(path)

    assert response.status_code == 200
    assert response.content == b""
    assert_cors(response)


def test_browser_preflight_is_answered(client):
    response = client.options(
        "/content/update",
        headers={
            "Origin": "https://boatclub.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type, x-admin-token",
        },
    )

    assert response.status_code == 200
    assert response.content == b""
    assert_cors(response)


def test_options_does_not_touch_store(make_client):
    client = make_client(kv=FailingKeyValueStore())

    assert client.options("/content").status_code == 200


def test_error_responses_carry_cors_headers(client):
    response = client.post("/content/update", json={"section": "sponsors", "data": {}})

    assert response.status_code == 400
    assert_cors(response)


def test_request_id_header_added(client):
    response = client.get("/content")

    assert response.headers["x-request-id"]
    assert float(response.headers["x-process-time"]) >= 0


def test_request_logs_carry_request_id(client):
    lines = []
    handler_id = logger.add(lines.append, format=TEXT_FORMAT, level="INFO")
    try:
        response = client.get("/content")
    finally:
        logger.remove(handler_id)

    request_id = response.headers["x-request-id"]
    completed = [line for line in lines if "Request completed GET /content -> 200" in line]
    assert len(completed) == 1
    assert f"| {request_id} | club_cms.api.dependencies.logging:dispatch:" in completed[0]


def test_logs_outside_requests_use_placeholder_id():
    lines = []
    handler_id = logger.add(lines.append, format=TEXT_FORMAT, level="INFO")
    try:
        logger.info("startup banner")
    finally:
        logger.remove(handler_id)

    assert "| - | club_cms:" in lines[0]


# ============================================================================
# UNMATCHED ROUTES
# ============================================================================

def test_unknown_route_is_plain_text_404(client):
    response = client.get("/sponsors")

    assert response.status_code == 404
    assert response.text == "Not Found"
    assert response.headers["content-type"].startswith("text/plain")
    assert_cors(response)


def test_wrong_method_on_content_is_405(client):
    response = client.delete("/content")

    assert response.status_code == 405
    assert response.text == "Method Not Allowed"


# ============================================================================
# HEALTH
# ============================================================================

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["environment"] == "testing"


def test_detailed_health_healthy_when_configured(make_client):
    client = make_client(settings=make_settings(ADMIN_TOKEN="s3cret-admin"))

    data = client.get("/health/detailed").json()

    assert data["status"] == "healthy"
    by_name = {d["name"]: d for d in data["dependencies"]}
    assert by_name["kv_store"]["status"] == "healthy"
    assert by_name["kv_store"]["details"]["backend"] == "memory"
    assert by_name["object_store"]["details"]["backend"] == "recording"
    assert by_name["admin_token"]["status"] == "configured"
    assert "cpu_percent" in data["system_resources"]


def test_detailed_health_degraded_without_admin_token(client):
    data = client.get("/health/detailed").json()

    assert data["status"] == "degraded"


class RedisLikeStore(MemoryKeyValueStore):
    backend = "redis"

    async def server_info(self):
        return {"version": "7.2.4", "connected_clients": 3}


def test_detailed_health_reports_redis_info(make_client):
    client = make_client(kv=RedisLikeStore())

    data = client.get("/health/detailed").json()

    kv = next(d for d in data["dependencies"] if d["name"] == "kv_store")
    assert kv["details"] == {"backend": "redis", "version": "7.2.4", "connected_clients": 3}


def test_detailed_health_unhealthy_store(make_client):
    client = make_client(
        settings=make_settings(ADMIN_TOKEN="s3cret-admin"),
        kv=FailingKeyValueStore("connection refused"),
    )

    data = client.get("/health/detailed").json()

    assert data["status"] == "unhealthy"
    kv = next(d for d in data["dependencies"] if d["name"] == "kv_store")
    assert kv["status"] == "unhealthy"
    assert "connection refused" in kv["message"]


# ============================================================================
# LIFESPAN
# ============================================================================

def test_lifespan_builds_development_stores(tmp_path, monkeypatch):
    if settings.REDIS_ENABLE or settings.r2_configured or settings.admin_auth_enabled:
        pytest.skip("Environment configures real backends or an admin token")

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings, "LOCAL_STORAGE_PATH", str(tmp_path / "uploads"))

    with TestClient(app) as client:
        assert isinstance(app.state.kv_store, MemoryKeyValueStore)
        assert isinstance(app.state.object_store, LocalObjectStore)

        client.post("/content/update", json={"section": "team", "data": {"members": []}})
        assert client.get("/content").json() == {"team": {"members": []}}
