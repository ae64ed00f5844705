"""
Configuration Management
========================
Loads and validates environment variables using Pydantic Settings.
Provides type-safe access to configuration throughout the application.

Enhanced features:
- Connection string builders
- Secret masking
- Production readiness checks
"""

from functools import lru_cache
from typing import List, Optional, Dict, Any

from pydantic import Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Settings

    All settings are loaded from environment variables or .env file.
    Pydantic validates types and required fields automatically.
    """

    # ========================================================================
    # APPLICATION
    # ========================================================================
    APP_NAME: str = "Club CMS Backend"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # ========================================================================
    # API SERVER
    # ========================================================================
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    API_WORKERS: int = Field(default=4)

    # ========================================================================
    # SECURITY
    # ========================================================================
    # Shared secret for content updates. Updates are open when unset.
    ADMIN_TOKEN: Optional[str] = Field(default=None)

    # ========================================================================
    # KEY-VALUE STORE
    # ========================================================================
    REDIS_URL: str = Field(default="redis://localhost:6379/0")
    REDIS_PASSWORD: Optional[str] = Field(default=None)
    REDIS_ENABLE: bool = Field(default=False)
    REDIS_MAX_CONNECTIONS: int = Field(default=20)
    CONTENT_KEY_PREFIX: str = Field(default="content:")

    # ========================================================================
    # OBJECT STORAGE
    # ========================================================================
    R2_ACCOUNT_ID: Optional[str] = Field(default=None)
    R2_ACCESS_KEY_ID: Optional[str] = Field(default=None)
    R2_SECRET_ACCESS_KEY: Optional[str] = Field(default=None)
    R2_BUCKET_NAME: str = Field(default="club-images")
    R2_ENDPOINT_URL: Optional[str] = Field(default=None)
    R2_PUBLIC_URL: Optional[str] = Field(default=None)
    LOCAL_STORAGE_PATH: str = Field(default="uploads")

    # ========================================================================
    # HTTP CACHING
    # ========================================================================
    CONTENT_CACHE_CONTROL: str = Field(default="public, max-age=60, s-maxage=300")
    UPLOAD_CACHE_CONTROL: str = Field(default="public, max-age=31536000, immutable")

    @field_validator("CONTENT_CACHE_CONTROL", "UPLOAD_CACHE_CONTROL")
    def cache_directive_not_empty(cls, v):
        """Reject blank cache directives"""
        if not v or not v.strip():
            raise ValueError("Cache-Control directive must not be empty")
        return v.strip()

    @field_validator("ADMIN_TOKEN", "R2_PUBLIC_URL")
    def blank_as_unset(cls, v):
        """Treat empty strings from the environment as unset"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ========================================================================
    # PYDANTIC CONFIGURATION
    # ========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra fields in .env
    )

    # ========================================================================
    # COMPUTED PROPERTIES
    # ========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.ENVIRONMENT.lower() == "production"

    @computed_field
    @property
    def redis_connection_url(self) -> str:
        """
        Get Redis connection URL with password if configured

        Returns:
            str: Complete Redis connection URL
        """
        if self.REDIS_PASSWORD:
            # Format: redis://localhost:6379/0
            parts = self.REDIS_URL.replace("redis://", "").split("/")
            host_port = parts[0]
            db = parts[1] if len(parts) > 1 else "0"
            return f"redis://:{self.REDIS_PASSWORD}@{host_port}/{db}"
        return self.REDIS_URL

    @computed_field
    @property
    def r2_configured(self) -> bool:
        """Check if Cloudflare R2 is fully configured"""
        return all([
            self.R2_ACCOUNT_ID,
            self.R2_ACCESS_KEY_ID,
            self.R2_SECRET_ACCESS_KEY,
            self.R2_ENDPOINT_URL,
        ])

    @computed_field
    @property
    def admin_auth_enabled(self) -> bool:
        """Check if content updates require the admin token"""
        return bool(self.ADMIN_TOKEN)

    @computed_field
    @property
    def public_url_configured(self) -> bool:
        """Check if uploaded objects get a real public base URL"""
        return bool(self.R2_PUBLIC_URL)

    # ========================================================================
    # VALIDATION METHODS
    # ========================================================================

    def validate_required_for_production(self) -> List[str]:
        """
        Validate that all required settings for production are configured

        Returns:
            List[str]: List of missing required settings
        """
        if not self.is_production:
            return []

        missing = []

        if not self.admin_auth_enabled:
            missing.append("ADMIN_TOKEN must be set in production")

        if not self.REDIS_ENABLE:
            missing.append("Redis must be enabled for production content storage")

        if not self.r2_configured:
            missing.append("Cloudflare R2 must be fully configured for production")

        if not self.public_url_configured:
            missing.append("R2_PUBLIC_URL must be set so uploads get a working public URL")

        return missing

    def mask_secret(self, secret: Optional[str], show_chars: int = 4) -> str:
        """
        Mask a secret for safe logging

        Args:
            secret: The secret to mask
            show_chars: Number of characters to show at the start

        Returns:
            str: Masked secret
        """
        if not secret:
            return "NOT_SET"

        if len(secret) <= show_chars:
            return "*" * len(secret)

        return secret[:show_chars] + "*" * (len(secret) - show_chars)

    def to_safe_dict(self) -> Dict[str, Any]:
        """
        Export configuration as dictionary with secrets masked

        Returns:
            Dict[str, Any]: Safe configuration dictionary
        """
        config = self.model_dump()

        sensitive_fields = [
            "ADMIN_TOKEN",
            "REDIS_PASSWORD",
            "R2_ACCESS_KEY_ID",
            "R2_SECRET_ACCESS_KEY",
        ]

        for field in sensitive_fields:
            if field in config:
                config[field] = self.mask_secret(config[field])

        # Connection URL embeds the password
        if self.REDIS_PASSWORD:
            config["redis_connection_url"] = self.redis_connection_url.replace(
                self.REDIS_PASSWORD, self.mask_secret(self.REDIS_PASSWORD)
            )

        return config

    def get_storage_config(self) -> Dict[str, Any]:
        """
        Get store configuration

        Returns:
            Dict[str, Any]: Key-value and object store configuration
        """
        return {
            "kv": {
                "backend": "redis" if self.REDIS_ENABLE else "memory",
                "url": self.REDIS_URL.split("@")[-1] if "@" in self.REDIS_URL else self.REDIS_URL,
                "key_prefix": self.CONTENT_KEY_PREFIX,
            },
            "objects": {
                "backend": "r2" if self.r2_configured else "local",
                "bucket": self.R2_BUCKET_NAME,
                "public_url": self.R2_PUBLIC_URL,
            },
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance

    Uses lru_cache to ensure settings are loaded only once.
    This is also the FastAPI dependency for settings, so tests can
    override it through ``app.dependency_overrides``.

    Returns:
        Settings: Validated settings instance
    """
    return Settings()


# Convenience: Create a global settings instance
settings = get_settings()


# ============================================================================
# CONFIGURATION VALIDATION ON IMPORT
# ============================================================================

def validate_configuration(config: Optional[Settings] = None):
    """
    Validate configuration

    Raises:
        ValueError: If production configuration is invalid
    """
    config = config or settings
    if config.is_production:
        missing = config.validate_required_for_production()
        if missing:
            error_msg = "Production configuration validation failed:\n" + "\n".join(f"  - {m}" for m in missing)
            raise ValueError(error_msg)


# Run validation on import (will only raise in production)
try:
    validate_configuration()
except ValueError as e:
    if settings.is_production:
        raise
    else:
        print(f"⚠️  Configuration warning: {e}")
