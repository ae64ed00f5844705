"""
Authentication Dependencies
===========================
Static admin token check for content updates.
"""

import secrets
from typing import Optional

from fastapi import Depends, Header

from club_cms.core.config import Settings, get_settings
from club_cms.core.exceptions import UnauthorizedException
from club_cms.core.logging_config import get_logger


logger = get_logger(__name__)

BEARER_SCHEME = "bearer"

# HTTP optional whitespace; str.strip() would also eat latin-1 bytes such as \xa0
HEADER_WHITESPACE = " \t"


# ============================================================================
# TOKEN EXTRACTION & VALIDATION
# ============================================================================

def extract_admin_token(
    x_admin_token: Optional[str],
    authorization: Optional[str],
) -> Optional[str]:
    """
    Pull the presented token out of the request headers

    ``X-Admin-Token`` wins over ``Authorization``. Either may carry a
    ``Bearer`` prefix, matched case-insensitively.

    Returns:
        Optional[str]: Token, or None if nothing usable was sent
    """
    header = x_admin_token or authorization
    if not header:
        return None

    header = header.strip(HEADER_WHITESPACE)
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        header = credentials.strip(HEADER_WHITESPACE)

    return header or None


def token_matches(provided: Optional[str], expected: str) -> bool:
    """
    Constant-time comparison of the presented token

    ``provided`` is a header value as Starlette decodes it (latin-1), so it
    is turned back into the bytes on the wire and compared with the UTF-8
    encoding of the configured token.
    """
    if not provided:
        return False

    try:
        sent = provided.encode("latin-1")
    except UnicodeEncodeError:
        # not a decoded header value
        return False

    return secrets.compare_digest(sent, expected.encode("utf-8"))


async def require_admin_token(
    x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Guard for content updates

    A no-op when no ADMIN_TOKEN is configured.

    Raises:
        UnauthorizedException: Token missing or wrong
    """
    if not settings.admin_auth_enabled:
        return

    provided = extract_admin_token(x_admin_token, authorization)
    if not token_matches(provided, settings.ADMIN_TOKEN):
        logger.warning("Rejected content update: {} admin token", "missing" if not provided else "invalid")
        raise UnauthorizedException()
