"""
Upload Models
=============
Pydantic models for image uploads.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UploadResult(BaseModel):
    """Stored image and where to fetch it"""
    success: bool = True
    url: str = Field(..., description="Public URL of the stored object")
    filename: str = Field(..., description="Generated object key")
    timestamp: str
    placeholder_url: Optional[bool] = Field(
        default=None,
        description="Set when no public base URL is configured and the URL may not resolve",
    )
