"""
Health Check Endpoints
======================
Provides health status for monitoring and observability.

Endpoints:
- GET /health - Simple health check (for load balancers)
- GET /health/detailed - Store connectivity, configuration and resources
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import psutil
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from club_cms.api.dependencies.stores import get_kv_store, get_object_store
from club_cms.core.config import Settings, get_settings
from club_cms.services.kv.store import KeyValueStore
from club_cms.services.storage.r2_client import ObjectStore


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class HealthStatus(BaseModel):
    """Simple health status response"""
    status: str = Field(..., description="Overall system status")
    timestamp: str = Field(..., description="Current server timestamp")
    version: str = Field(..., description="API version")
    environment: str = Field(..., description="Current environment")


class DependencyHealth(BaseModel):
    """Health status of a single dependency"""
    name: str = Field(..., description="Dependency name")
    status: str = Field(..., description="healthy, unhealthy, configured, not_configured")
    response_time_ms: Optional[float] = Field(None, description="Response time in milliseconds")
    message: Optional[str] = Field(None, description="Additional information")
    details: Dict[str, Any] = Field(default_factory=dict, description="Extra details")


class SystemResources(BaseModel):
    """System resource utilization"""
    cpu_percent: float = Field(..., description="CPU usage percentage")
    memory_percent: float = Field(..., description="Memory usage percentage")
    memory_available_mb: float = Field(..., description="Available memory in MB")
    process_rss_mb: float = Field(..., description="Resident memory of this process in MB")


class DetailedHealthStatus(BaseModel):
    """Detailed health status response"""
    status: str
    timestamp: str
    version: str
    environment: str
    uptime_seconds: float
    dependencies: list[DependencyHealth] = Field(default_factory=list)
    system_resources: SystemResources


# Track server start time for uptime calculation
SERVER_START_TIME = time.time()

router = APIRouter()


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def check_store_health(name: str, store: Any) -> DependencyHealth:
    """
    Ping a key-value or object store

    Returns:
        DependencyHealth: healthy or unhealthy, with the backend in use
        and server details when the store reports them
    """
    start_time = time.time()
    try:
        ok = await store.ping()
        message = None if ok else f"{name} ping failed"
    except Exception as e:
        ok = False
        message = f"{name} health check error: {e}"
    response_time_ms = round((time.time() - start_time) * 1000, 2)

    details: Dict[str, Any] = {"backend": getattr(store, "backend", "unknown")}

    # Redis reports version and client count
    server_info = getattr(store, "server_info", None)
    if ok and server_info is not None:
        details.update(await server_info())

    return DependencyHealth(
        name=name,
        status="healthy" if ok else "unhealthy",
        response_time_ms=response_time_ms,
        message=message,
        details=details,
    )


def check_configuration(settings: Settings) -> list[DependencyHealth]:
    """Report settings that change behavior when missing"""
    return [
        DependencyHealth(
            name="admin_token",
            status="configured" if settings.admin_auth_enabled else "not_configured",
            message=None if settings.admin_auth_enabled else "Content updates are unauthenticated",
        ),
        DependencyHealth(
            name="public_url",
            status="configured" if settings.public_url_configured else "not_configured",
            message=None if settings.public_url_configured else "Upload URLs are placeholders",
        ),
    ]


def get_system_resources() -> SystemResources:
    """
    Get current system resource utilization

    Returns:
        SystemResources: Current system resource metrics
    """
    memory = psutil.virtual_memory()
    process = psutil.Process()

    return SystemResources(
        cpu_percent=round(psutil.cpu_percent(interval=None), 2),
        memory_percent=round(memory.percent, 2),
        memory_available_mb=round(memory.available / (1024 * 1024), 2),
        process_rss_mb=round(process.memory_info().rss / (1024 * 1024), 2),
    )


def determine_overall_status(dependencies: list[DependencyHealth]) -> str:
    """
    Determine overall system status based on dependencies

    Returns:
        str: Overall status (healthy, degraded, unhealthy)
    """
    statuses = [dep.status for dep in dependencies]

    if "unhealthy" in statuses:
        return "unhealthy"

    if "not_configured" in statuses:
        return "degraded"

    return "healthy"


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get(
    "/health",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Simple health check",
    description="Returns basic health status. Used by load balancers and monitoring tools.",
    tags=["health"],
)
async def health_check(settings: Settings = Depends(get_settings)):
    return HealthStatus(
        status="healthy",
        timestamp=_now(),
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    description="Returns store connectivity, configuration gaps and resource usage.",
    tags=["health"],
)
async def detailed_health_check(
    kv_store: KeyValueStore = Depends(get_kv_store),
    object_store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
):
    """
    Detailed Health Check

    More expensive than /health since it pings both stores.
    """
    dependencies = [
        await check_store_health("kv_store", kv_store),
        await check_store_health("object_store", object_store),
    ]
    dependencies.extend(check_configuration(settings))

    return DetailedHealthStatus(
        status=determine_overall_status(dependencies),
        timestamp=_now(),
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        uptime_seconds=round(time.time() - SERVER_START_TIME, 2),
        dependencies=dependencies,
        system_resources=get_system_resources(),
    )
