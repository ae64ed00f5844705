"""
Tests for the content endpoints
"""
import json
from datetime import datetime

import pytest

from conftest import FailingKeyValueStore, make_settings


VALID_SECTIONS_MESSAGE = "Invalid section. Must be one of: general, about, events, gallery, team"


# ============================================================================
# GET /content
# ============================================================================

def test_get_content_before_any_update_is_empty(client):
    response = client.get("/content")

    assert response.status_code == 200
    assert response.json() == {}


def test_get_content_sets_cache_headers(client):
    response = client.get("/content")

    assert response.headers["cache-control"] == "public, max-age=60, s-maxage=300"
    assert response.headers["access-control-allow-origin"] == "*"


def test_get_content_omits_unwritten_sections(client, kv_store):
    client.post("/content/update", json={"section": "about", "data": {"founded": 1952}})

    data = client.get("/content").json()

    assert data == {"about": {"founded": 1952}}


def test_get_content_store_failure_returns_500(make_client):
    client = make_client(kv=FailingKeyValueStore("KV namespace unavailable"))

    response = client.get("/content")

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal Server Error",
        "message": "KV namespace unavailable",
    }


def test_get_content_corrupt_document_returns_500(client, kv_store):
    kv_store._data["events"] = "{not json"

    response = client.get("/content")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"


# ============================================================================
# POST /content/update
# ============================================================================

def test_update_then_fetch_round_trip(client):
    team = {
        "members": [
            {"name": "Ananya", "role": "Captain", "photo": None},
            {"name": "Joseph", "role": "Cox", "since": 2019},
        ],
        "note": "Rowing since 1952, ñ ü 漢字",
    }

    response = client.post("/content/update", json={"section": "team", "data": team})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Section 'team' updated successfully"
    datetime.fromisoformat(body["timestamp"])

    assert client.get("/content").json() == {"team": team}


def test_update_overwrites_previous_document(client):
    client.post("/content/update", json={"section": "events", "data": [{"title": "Regatta"}]})
    client.post("/content/update", json={"section": "events", "data": [{"title": "Open day"}]})

    assert client.get("/content").json() == {"events": [{"title": "Open day"}]}


def test_update_stores_json_text(client, kv_store):
    client.post("/content/update", json={"section": "general", "data": {"name": "New Pallavi"}})

    assert json.loads(kv_store.snapshot()["general"]) == {"name": "New Pallavi"}


def test_update_unknown_section_rejected_without_write(client, kv_store):
    client.post("/content/update", json={"section": "team", "data": {"members": []}})
    before = kv_store.snapshot()

    response = client.post("/content/update", json={"section": "sponsors", "data": {"x": 1}})

    assert response.status_code == 400
    assert response.json() == {"error": "Bad Request", "message": VALID_SECTIONS_MESSAGE}
    assert kv_store.snapshot() == before


@pytest.mark.parametrize("payload", [
    {},
    {"section": "team"},
    {"data": {"members": []}},
    {"section": "team", "data": None},
    {"section": None, "data": {"a": 1}},
])
def test_update_missing_fields_rejected(client, kv_store, payload):
    response = client.post("/content/update", json=payload)

    assert response.status_code == 400
    assert response.json() == {
        "error": "Bad Request",
        "message": "Missing required fields: section and data",
    }
    assert kv_store.snapshot() == {}


def test_update_empty_body_rejected(client):
    response = client.post("/content/update")

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields: section and data"


@pytest.mark.parametrize("data", [{}, [], 0, False, ""])
def test_update_accepts_present_but_falsy_documents(client, data):
    response = client.post("/content/update", json={"section": "gallery", "data": data})

    assert response.status_code == 200
    assert client.get("/content").json() == {"gallery": data}


def test_update_malformed_json_rejected(client, kv_store):
    response = client.post(
        "/content/update",
        content=b'{"section": "team", "data": ',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request"
    assert kv_store.snapshot() == {}


@pytest.mark.parametrize("literal", [b"NaN", b"Infinity", b"-Infinity"])
def test_update_non_finite_numbers_rejected(client, kv_store, literal):
    client.post("/content/update", json={"section": "team", "data": {"score": 3}})
    before = kv_store.snapshot()

    response = client.post(
        "/content/update",
        content=b'{"section": "team", "data": {"score": ' + literal + b"}}",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request"
    assert kv_store.snapshot() == before
    assert client.get("/content").json() == {"team": {"score": 3}}


def test_update_store_failure_returns_500(make_client):
    client = make_client(kv=FailingKeyValueStore("write quota exceeded"))

    response = client.post("/content/update", json={"section": "team", "data": {"a": 1}})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal Server Error",
        "message": "write quota exceeded",
    }


# ============================================================================
# ADMIN TOKEN
# ============================================================================

UPDATE = {"section": "about", "data": {"text": "Est. 1952"}}


def test_update_without_admin_token_configured_is_open(client):
    response = client.post("/content/update", json=UPDATE)

    assert response.status_code == 200


def test_update_without_token_rejected(admin_client, kv_store):
    response = admin_client.post("/content/update", json=UPDATE)

    assert response.status_code == 401
    assert response.json() == {
        "error": "Unauthorized",
        "message": "Missing or invalid admin token",
    }
    assert response.headers["www-authenticate"] == "Bearer"
    assert kv_store.snapshot() == {}


@pytest.mark.parametrize("headers", [
    {"X-Admin-Token": "wrong"},
    {"Authorization": "Bearer wrong"},
    {"Authorization": "s3cret-admin-but-longer"},
    {"Authorization": "Bearer "},
])
def test_update_with_wrong_token_rejected(admin_client, kv_store, headers):
    response = admin_client.post("/content/update", json=UPDATE, headers=headers)

    assert response.status_code == 401
    assert kv_store.snapshot() == {}


@pytest.mark.parametrize("headers", [
    {"X-Admin-Token": "s3cret-admin"},
    {"X-Admin-Token": "Bearer s3cret-admin"},
    {"Authorization": "Bearer s3cret-admin"},
    {"Authorization": "bearer s3cret-admin"},
    {"Authorization": "s3cret-admin"},
])
def test_update_with_correct_token_succeeds(admin_client, headers):
    response = admin_client.post("/content/update", json=UPDATE, headers=headers)

    assert response.status_code == 200
    assert admin_client.get("/content").json() == {"about": UPDATE["data"]}


def test_admin_token_checked_before_body(admin_client):
    response = admin_client.post("/content/update", json={"section": "sponsors"})

    assert response.status_code == 401


def test_x_admin_token_takes_precedence(admin_client):
    response = admin_client.post(
        "/content/update",
        json=UPDATE,
        headers={"X-Admin-Token": "wrong", "Authorization": "Bearer s3cret-admin"},
    )

    assert response.status_code == 401


def test_get_content_never_requires_token(make_client):
    client = make_client(settings=make_settings(ADMIN_TOKEN="s3cret-admin"))

    assert client.get("/content").status_code == 200


@pytest.mark.parametrize("header", ["X-Admin-Token", "Authorization"])
def test_non_ascii_admin_token_accepted(make_client, header):
    client = make_client(settings=make_settings(ADMIN_TOKEN="clé-ünïcode"))
    value = "clé-ünïcode" if header == "X-Admin-Token" else "Bearer clé-ünïcode"

    response = client.post("/content/update", json=UPDATE, headers={header: value.encode("utf-8")})

    assert response.status_code == 200


def test_non_ascii_admin_token_mismatch_rejected(make_client, kv_store):
    client = make_client(settings=make_settings(ADMIN_TOKEN="clé-ünïcode"))

    response = client.post(
        "/content/update",
        json=UPDATE,
        headers={"X-Admin-Token": "cle-unicode".encode("utf-8")},
    )

    assert response.status_code == 401
    assert kv_store.snapshot() == {}
