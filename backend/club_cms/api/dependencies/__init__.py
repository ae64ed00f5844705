"""
API Dependencies
================
Centralized imports for API dependencies.
"""

from club_cms.api.dependencies.auth import (
    extract_admin_token,
    require_admin_token,
    token_matches,
)
from club_cms.api.dependencies.cors import CORS_HEADERS, CORSHeadersMiddleware
from club_cms.api.dependencies.logging import RequestLoggingMiddleware
from club_cms.api.dependencies.stores import (
    get_content_service,
    get_kv_store,
    get_object_store,
    get_upload_service,
)

__all__ = [
    # Auth
    "extract_admin_token",
    "require_admin_token",
    "token_matches",

    # Stores and services
    "get_kv_store",
    "get_object_store",
    "get_content_service",
    "get_upload_service",

    # Middleware
    "CORS_HEADERS",
    "CORSHeadersMiddleware",
    "RequestLoggingMiddleware",
]
