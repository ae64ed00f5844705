"""
Club CMS Backend - Main Application
===================================
FastAPI application entry point with lifecycle management.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from club_cms.core.config import settings
from club_cms.core.exceptions import APIException, BadRequestException, ServiceException
from club_cms.core.logging_config import setup_logging, get_logger
from club_cms.api.routes import content, upload, health
from club_cms.api.dependencies.cors import CORS_HEADERS, CORSHeadersMiddleware
from club_cms.api.dependencies.logging import RequestLoggingMiddleware
from club_cms.services.kv import RedisManager, build_kv_store
from club_cms.services.storage import build_object_store

logger = get_logger(__name__)


# ============================================================================
# APPLICATION LIFESPAN MANAGEMENT
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application Lifespan Manager

    Connects the stores on startup and releases them on shutdown.
    """

    # ========================================================================
    # STARTUP
    # ========================================================================

    setup_logging()

    logger.info("=" * 70)
    logger.info("🚀 Starting {} v{}", settings.APP_NAME, settings.APP_VERSION)
    logger.info("=" * 70)

    logger.info("📋 Environment: {}", settings.ENVIRONMENT)
    logger.info("🐛 Debug Mode: {}", settings.DEBUG)
    logger.info("🌐 API Host: {}:{}", settings.API_HOST, settings.API_PORT)
    logger.info("💾 Stores: {}", settings.get_storage_config())

    if settings.admin_auth_enabled:
        logger.info("🔐 Admin token: {}", settings.mask_secret(settings.ADMIN_TOKEN))
    else:
        logger.warning("🔓 ADMIN_TOKEN not set; content updates are unauthenticated")

    redis_manager = RedisManager(settings)
    await redis_manager.connect()

    app.state.redis_manager = redis_manager
    app.state.kv_store = build_kv_store(redis_manager)
    app.state.object_store = build_object_store(settings)

    logger.info("✅ Application startup complete")
    logger.info("=" * 70)

    yield

    # ========================================================================
    # SHUTDOWN
    # ========================================================================

    logger.info("🛑 Shutting down application...")

    try:
        await redis_manager.disconnect()
    except Exception:
        logger.exception("⚠️ Error while closing Redis connection")

    logger.info("✅ Shutdown complete")


# ============================================================================
# FASTAPI APPLICATION
# ============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="Content sections and image uploads for the club website",
    version=settings.APP_VERSION,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "content", "description": "Section documents"},
        {"name": "upload", "description": "Image uploads"},
        {"name": "health", "description": "Health check and system status endpoints"},
    ],
)

# Last added runs first: request logging wraps the CORS layer
app.add_middleware(CORSHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(content.router)
app.include_router(upload.router)
app.include_router(health.router)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unmatched routes and methods
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    message = "Invalid request: " + "; ".join(problems) if problems else "Invalid request"
    return await api_exception_handler(request, BadRequestException(message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Runs outside the middleware stack, so CORS headers are added here
    logger.exception("Unhandled error on {} {}", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ServiceException(str(exc)).to_dict(),
        headers=CORS_HEADERS,
    )


# ============================================================================
# APPLICATION ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    from club_cms.core.server_config import get_uvicorn_config

    uvicorn.run(**get_uvicorn_config())
