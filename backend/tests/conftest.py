"""
Shared fixtures: in-memory stores, failing stores and an app client
with dependency overrides.
"""

from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from club_cms.api.dependencies.stores import get_kv_store, get_object_store
from club_cms.core.config import Settings, get_settings
from club_cms.main import app
from club_cms.services.kv.store import MemoryKeyValueStore


CDN_BASE = "https://cdn.boatclub.example/"


class RecordingObjectStore:
    """Object store fake that keeps every write"""

    backend = "recording"

    def __init__(self):
        self.objects: Dict[str, dict] = {}

    async def put(self, key, body, *, content_type, cache_control):
        self.objects[key] = {
            "body": body,
            "content_type": content_type,
            "cache_control": cache_control,
        }

    async def ping(self):
        return True


class FailingKeyValueStore:
    backend = "failing"

    def __init__(self, message: str = "KV namespace unavailable"):
        self.message = message

    async def get(self, key):
        raise RuntimeError(self.message)

    async def put(self, key, value):
        raise RuntimeError(self.message)

    async def ping(self):
        raise RuntimeError(self.message)


class FailingObjectStore:
    backend = "failing"

    def __init__(self, message: str = "bucket write refused"):
        self.message = message

    async def put(self, key, body, *, content_type, cache_control):
        raise RuntimeError(self.message)

    async def ping(self):
        return False


def make_settings(**overrides) -> Settings:
    """Settings isolated from any .env file"""
    values = {
        "ENVIRONMENT": "testing",
        "ADMIN_TOKEN": None,
        "R2_PUBLIC_URL": CDN_BASE,
        "R2_ACCOUNT_ID": None,
        "REDIS_ENABLE": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def kv_store():
    return MemoryKeyValueStore()


@pytest.fixture
def object_store():
    return RecordingObjectStore()


@pytest.fixture
def make_client(kv_store, object_store):
    """
    Build a TestClient wired to the given stores and settings

    Defaults to the per-test memory KV store, recording object store and
    settings without an admin token.
    """
    def _make(
        settings: Optional[Settings] = None,
        kv=None,
        objects=None,
    ) -> TestClient:
        settings = settings or make_settings()
        kv = kv_store if kv is None else kv
        objects = object_store if objects is None else objects

        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_kv_store] = lambda: kv
        app.dependency_overrides[get_object_store] = lambda: objects
        return TestClient(app)

    yield _make

    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def admin_client(make_client):
    return make_client(settings=make_settings(ADMIN_TOKEN="s3cret-admin"))
