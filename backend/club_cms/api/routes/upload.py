"""
Upload Routes
=============
Image upload endpoint backed by the object store.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from club_cms.api.dependencies.stores import get_upload_service
from club_cms.core.exceptions import APIException, NoFileProvidedException, ServiceException
from club_cms.core.logging_config import get_logger
from club_cms.models.errors import ErrorResponse
from club_cms.models.upload import UploadResult
from club_cms.services.upload_service import UploadService


logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/upload",
    response_model=UploadResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Upload image",
    description="Stores an image under a generated unique name and returns its public URL.",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["upload"],
)
async def upload_image(
    file: Optional[UploadFile] = File(default=None, description="Image to store"),
    service: UploadService = Depends(get_upload_service),
):
    """
    Upload Image

    No size limit and no content-type checks; the declared type is stored
    with the object as-is.
    """
    if file is None:
        raise NoFileProvidedException()

    try:
        body = await file.read()
        return await service.ingest_image(body, file.filename, file.content_type)
    except APIException:
        raise
    except Exception as e:
        logger.error("Error uploading file: {}", e)
        raise ServiceException(str(e))
