"""
Storage Services
================
Object storage for uploaded images (R2, local filesystem).
"""

from club_cms.services.storage.r2_client import (
    ObjectStore,
    R2ObjectStore,
    LocalObjectStore,
    build_object_store,
)

__all__ = ["ObjectStore", "R2ObjectStore", "LocalObjectStore", "build_object_store"]
