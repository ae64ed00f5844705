"""
Upload Service
==============
Stores uploaded images and computes their public URLs.
"""

import re
import time
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from club_cms.core.config import Settings
from club_cms.core.logging_config import get_logger
from club_cms.models.upload import UploadResult
from club_cms.services.storage.r2_client import ObjectStore


logger = get_logger(__name__)


DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_EXTENSION = "bin"
PLACEHOLDER_ACCOUNT_ID = "YOUR-ACCOUNT-ID"

_EXTENSION_STRIP = re.compile(r"[^A-Za-z0-9]")


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_file_extension(filename: Optional[str]) -> str:
    """Extension after the last dot, alphanumerics only"""
    if not filename or "." not in filename:
        return DEFAULT_EXTENSION
    extension = _EXTENSION_STRIP.sub("", filename.rsplit(".", 1)[-1])
    return extension or DEFAULT_EXTENSION


def generate_object_key(
    filename: Optional[str],
    timestamp_ms: Optional[int] = None,
    random_id: Optional[str] = None,
) -> str:
    """
    Build a unique object key

    Format: ``{epoch-millis}-{uuid4}.{extension}``. Uniqueness comes from
    the random part; collisions are not checked.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    if random_id is None:
        random_id = str(uuid.uuid4())
    return f"{timestamp_ms}-{random_id}.{get_file_extension(filename)}"


def build_public_url(key: str, settings: Settings) -> Tuple[str, bool]:
    """
    Public URL for an object key

    Returns:
        Tuple[str, bool]: URL and whether it is an unconfigured placeholder
    """
    if settings.R2_PUBLIC_URL:
        return f"{settings.R2_PUBLIC_URL.rstrip('/')}/{key}", False

    account_id = settings.R2_ACCOUNT_ID or PLACEHOLDER_ACCOUNT_ID
    return f"https://pub-{account_id}.r2.dev/{key}", True


# ============================================================================
# SERVICE
# ============================================================================

class UploadService:
    """Image ingestion over an object store"""

    def __init__(self, store: ObjectStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def ingest_image(
        self,
        body: bytes,
        filename: Optional[str],
        content_type: Optional[str],
    ) -> UploadResult:
        """
        Store one uploaded image

        Args:
            body: Raw file content
            filename: Original filename, used only for its extension
            content_type: Declared MIME type

        Returns:
            UploadResult: Public URL, generated key and timestamp
        """
        key = generate_object_key(filename)

        await self.store.put(
            key,
            body,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            cache_control=self.settings.UPLOAD_CACHE_CONTROL,
        )

        url, placeholder = build_public_url(key, self.settings)
        if placeholder:
            logger.warning(
                "R2_PUBLIC_URL not set; returning placeholder URL {} which may not resolve", url
            )

        logger.info("Successfully uploaded: {} -> {}", key, url)

        return UploadResult(
            success=True,
            url=url,
            filename=key,
            timestamp=datetime.now(timezone.utc).isoformat(),
            placeholder_url=True if placeholder else None,
        )
