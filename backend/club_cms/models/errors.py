"""
Error Models
============
Shape of JSON error bodies, used for OpenAPI docs.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """JSON error body"""
    error: str = Field(..., examples=["Bad Request"])
    message: str = Field(..., examples=["No file provided"])
