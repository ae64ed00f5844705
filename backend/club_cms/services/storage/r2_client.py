"""
Cloudflare R2 Storage Client
=============================
Writes uploaded images to Cloudflare R2 with local filesystem fallback.
"""

import json
from pathlib import Path
from typing import Optional, Protocol

import aioboto3
from botocore.exceptions import ClientError

from club_cms.core.config import Settings
from club_cms.core.logging_config import get_logger


logger = get_logger(__name__)


class ObjectStore(Protocol):
    """Capability required by the upload service"""

    backend: str

    async def put(
        self,
        key: str,
        body: bytes,
        *,
        content_type: str,
        cache_control: str,
    ) -> None:
        ...

    async def ping(self) -> bool:
        ...


class R2ObjectStore:
    """
    R2 Storage Client

    Talks to R2 through its S3-compatible API.
    """

    backend = "r2"

    def __init__(self, settings: Settings):
        self.bucket_name = settings.R2_BUCKET_NAME
        self._endpoint_url = settings.R2_ENDPOINT_URL
        self._access_key_id = settings.R2_ACCESS_KEY_ID
        self._secret_access_key = settings.R2_SECRET_ACCESS_KEY
        self._session = aioboto3.Session()

    def _client(self):
        return self._session.client(
            "s3",
            endpoint_url=self._endpoint_url,
            aws_access_key_id=self._access_key_id,
            aws_secret_access_key=self._secret_access_key,
            region_name="auto"  # R2 uses "auto" region
        )

    async def put(
        self,
        key: str,
        body: bytes,
        *,
        content_type: str,
        cache_control: str,
    ) -> None:
        """
        Upload object to Cloudflare R2

        Args:
            key: Object key in bucket
            body: Object content
            content_type: MIME type
            cache_control: Cache-Control stored with the object

        Raises:
            ClientError: If R2 rejects the write
        """
        try:
            async with self._client() as s3_client:
                await s3_client.put_object(
                    Bucket=self.bucket_name,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                    CacheControl=cache_control,
                )
        except ClientError as e:
            logger.error("R2 upload failed for {}: {}", key, e)
            raise

        logger.bind(bucket=self.bucket_name, key=key, size=len(body)).info(
            "Object uploaded to R2: {}", key
        )

    async def ping(self) -> bool:
        try:
            async with self._client() as s3_client:
                await s3_client.head_bucket(Bucket=self.bucket_name)
            return True
        except Exception as e:
            logger.error("R2 health check failed: {}", e)
            return False


class LocalObjectStore:
    """
    Local filesystem storage

    Used when R2 is not configured. Metadata that R2 would keep with the
    object is written to a ``<key>.meta.json`` sidecar.
    """

    backend = "local"

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Invalid object key: {key}")
        return path

    async def put(
        self,
        key: str,
        body: bytes,
        *,
        content_type: str,
        cache_control: str,
    ) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            f.write(body)

        meta_path = path.with_name(path.name + ".meta.json")
        with open(meta_path, "w", encoding="utf-8") as f:
            json.dump({"content_type": content_type, "cache_control": cache_control}, f)

        logger.bind(path=str(path), size=len(body)).info(
            "Object written to local storage: {}", key
        )

    async def ping(self) -> bool:
        return self.root.is_dir()


def build_object_store(settings: Settings, root: Optional[Path] = None) -> ObjectStore:
    """
    Pick the object store for the current configuration

    Args:
        settings: Application settings
        root: Override for the local storage directory

    Returns:
        ObjectStore: R2 when fully configured, local filesystem otherwise
    """
    if settings.r2_configured:
        logger.info("R2 configured. Using Cloudflare R2 bucket '{}'.", settings.R2_BUCKET_NAME)
        return R2ObjectStore(settings)

    local_root = Path(root or settings.LOCAL_STORAGE_PATH)
    logger.warning("R2 not configured. Using local filesystem storage at {}.", local_root)
    return LocalObjectStore(local_root)
