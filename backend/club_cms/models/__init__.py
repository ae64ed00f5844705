"""
Data Models
===========
Pydantic models for data validation and serialization.
"""

from club_cms.models.content import (
    Section,
    SECTIONS,
    ContentUpdate,
    ContentUpdateResponse,
)
from club_cms.models.upload import UploadResult
from club_cms.models.errors import ErrorResponse


__all__ = [
    "Section",
    "SECTIONS",
    "ContentUpdate",
    "ContentUpdateResponse",
    "UploadResult",
    "ErrorResponse",
]
