"""
Store Dependencies
==================
Hands the stores built at startup to route handlers.

Tests replace ``get_kv_store`` / ``get_object_store`` through
``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from club_cms.core.config import Settings, get_settings
from club_cms.services.content_service import ContentService
from club_cms.services.kv.store import KeyValueStore
from club_cms.services.storage.r2_client import ObjectStore
from club_cms.services.upload_service import UploadService


def get_kv_store(request: Request) -> KeyValueStore:
    return request.app.state.kv_store


def get_object_store(request: Request) -> ObjectStore:
    return request.app.state.object_store


def get_content_service(store: KeyValueStore = Depends(get_kv_store)) -> ContentService:
    return ContentService(store)


def get_upload_service(
    store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    return UploadService(store, settings)
