"""
Content Routes
==============
Read-all and update-one endpoints for the site's section documents.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response, status

from club_cms.api.dependencies.auth import require_admin_token
from club_cms.api.dependencies.stores import get_content_service
from club_cms.core.config import Settings, get_settings
from club_cms.core.exceptions import APIException, ServiceException
from club_cms.core.logging_config import get_logger
from club_cms.models.content import ContentUpdate, ContentUpdateResponse
from club_cms.models.errors import ErrorResponse
from club_cms.services.content_service import ContentService


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# CONTENT RETRIEVAL
# ============================================================================

@router.get(
    "/content",
    response_model=Dict[str, Any],
    status_code=status.HTTP_200_OK,
    summary="Get all content",
    description="Returns every stored section document keyed by section name.",
    responses={500: {"model": ErrorResponse}},
    tags=["content"],
)
async def get_content(
    response: Response,
    service: ContentService = Depends(get_content_service),
    settings: Settings = Depends(get_settings),
):
    """
    Get All Content

    Sections that were never written are left out; an empty object means
    nothing has been stored yet.
    """
    try:
        content = await service.fetch_all()
    except APIException:
        raise
    except Exception as e:
        logger.error("Error getting content: {}", e)
        raise ServiceException(str(e))

    # short TTL for browsers, longer for the CDN
    response.headers["Cache-Control"] = settings.CONTENT_CACHE_CONTROL
    return content


# ============================================================================
# CONTENT UPDATE
# ============================================================================

@router.post(
    "/content/update",
    response_model=ContentUpdateResponse,
    status_code=status.HTTP_200_OK,
    summary="Update one section",
    description="Overwrites a section document. Requires the admin token when one is configured.",
    dependencies=[Depends(require_admin_token)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    tags=["content"],
)
async def update_content(
    payload: Optional[ContentUpdate] = None,
    service: ContentService = Depends(get_content_service),
):
    """
    Update Section

    Expected body::

        {"section": "team", "data": {...}}
    """
    payload = payload or ContentUpdate()

    try:
        return await service.update_section(payload.section, payload.data)
    except APIException:
        raise
    except Exception as e:
        logger.error("Error updating content: {}", e)
        raise ServiceException(str(e))
