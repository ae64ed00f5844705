"""
Content Service
===============
Reads and overwrites the club site's named section documents.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict

from club_cms.core.exceptions import (
    BadRequestException,
    InvalidSectionException,
    MissingFieldsException,
)
from club_cms.core.logging_config import get_logger
from club_cms.models.content import SECTIONS, ContentUpdateResponse
from club_cms.services.kv.store import KeyValueStore


logger = get_logger(__name__)


class ContentService:
    """
    Section document access over a key-value store

    Documents are opaque JSON; nothing about their shape is checked.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def fetch_all(self) -> Dict[str, Any]:
        """
        Read every section that has a stored document

        Returns:
            Dict[str, Any]: Section name to document, empty if nothing was stored

        Raises:
            Exception: Any store or decode failure aborts the whole read
        """
        content: Dict[str, Any] = {}

        for section in SECTIONS:
            raw = await self.store.get(section)
            if raw is None:
                continue
            content[section] = json.loads(raw)

        logger.debug("Fetched {} of {} sections", len(content), len(SECTIONS))
        return content

    @staticmethod
    def validate_update(section: Any, data: Any) -> str:
        """
        Check an update request before anything is written

        Returns:
            str: The validated section name

        Raises:
            MissingFieldsException: section or data absent
            InvalidSectionException: section outside the whitelist
        """
        if section is None or data is None:
            raise MissingFieldsException()

        if section not in SECTIONS:
            raise InvalidSectionException(SECTIONS)

        return section

    async def update_section(self, section: Any, data: Any) -> ContentUpdateResponse:
        """
        Overwrite one section's document

        Args:
            section: Section name, must be in the whitelist
            data: Any JSON value except null

        Returns:
            ContentUpdateResponse: Success acknowledgement with timestamp
        """
        section = self.validate_update(section, data)

        # NaN and Infinity parse but are not JSON; GET would not return them intact
        try:
            document = json.dumps(data, allow_nan=False)
        except ValueError:
            raise BadRequestException("Invalid JSON: NaN and Infinity are not allowed")

        await self.store.put(section, document)

        logger.info("Successfully updated section: {}", section)

        return ContentUpdateResponse(
            success=True,
            message=f"Section '{section}' updated successfully",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
