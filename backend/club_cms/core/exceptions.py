"""
Custom Exceptions
=================
Application-specific exception classes.

Every ``APIException`` is rendered as ``{"error": ..., "message": ...}``
by the handlers registered in ``club_cms.main``.
"""

from typing import Dict, Optional

from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception carrying an error label and a message"""
    error: str = "Error"

    def __init__(
        self,
        status_code: int,
        message: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)

    @property
    def message(self) -> str:
        return self.detail

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.error, "message": self.message}


class BadRequestException(APIException):
    """Malformed or invalid request"""
    error = "Bad Request"

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, message=message)


class UnauthorizedException(APIException):
    """Missing or incorrect admin credential"""
    error = "Unauthorized"

    def __init__(self, message: str = "Missing or invalid admin token"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ServiceException(APIException):
    """Unexpected failure, including store-layer errors"""
    error = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, message=message)


class InvalidSectionException(BadRequestException):
    """Section name outside the fixed whitelist"""
    def __init__(self, valid_sections):
        super().__init__(f"Invalid section. Must be one of: {', '.join(valid_sections)}")


class MissingFieldsException(BadRequestException):
    """Content update without section or data"""
    def __init__(self):
        super().__init__("Missing required fields: section and data")


class NoFileProvidedException(BadRequestException):
    """Upload without a file part"""
    def __init__(self):
        super().__init__("No file provided")
