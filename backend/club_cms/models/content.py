"""
Content Models
==============
Pydantic models for section documents.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Section(str, Enum):
    """Named content sections of the club site"""
    GENERAL = "general"
    ABOUT = "about"
    EVENTS = "events"
    GALLERY = "gallery"
    TEAM = "team"


# Read order for GET /content
SECTIONS = tuple(s.value for s in Section)


class ContentUpdate(BaseModel):
    """
    Update request body

    Both fields are optional here so that a missing field produces the
    service's own 400 message instead of a schema error.
    """
    section: Optional[str] = Field(default=None, description="Section name", examples=["team"])
    data: Any = Field(default=None, description="JSON document stored as-is")


class ContentUpdateResponse(BaseModel):
    """Acknowledgement for a stored section"""
    success: bool = True
    message: str
    timestamp: str
