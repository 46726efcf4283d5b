"""
Import source detection.

Handles the three known export formats:
1. DEFAULT   - direct bookings and generic partner exports
2. TICKETING - reseller ticketing feed (one row per ticket)
3. MASTER    - internal master spreadsheet with fixed (yacht, package) columns
"""

import logging
from enum import Enum

from booking_import.config import (
    MASTER_COLUMN_PREFIX,
    SOURCE_DEFAULT,
    SOURCE_MASTER,
    SOURCE_TICKETING,
    TICKETING_HEADER_FINGERPRINT,
    TICKETING_PRODUCT_HEADERS,
)
from booking_import.utils.normalization import lookup_field

logger = logging.getLogger(__name__)


class ImportSource(Enum):
    """Enumeration of import sources."""
    DEFAULT = SOURCE_DEFAULT
    TICKETING = SOURCE_TICKETING
    MASTER = SOURCE_MASTER

    @classmethod
    def from_value(cls, value):
        """
        Resolve a source from an enum member or a case-insensitive name.

        Raises:
            ValueError: If the name is not a known source
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            valid = ', '.join(s.value for s in cls)
            raise ValueError(f"Unknown import source '{value}'. Expected one of: {valid}") from None


def detect_source(headers):
    """
    Determine the import source from normalized header tokens.

    Args:
        headers: List of normalized header tokens

    Returns:
        ImportSource: MASTER if any fixed master column is present,
            TICKETING if the reseller fingerprint is present, else DEFAULT
    """
    header_set = set(headers)

    for header in headers:
        field = lookup_field(header)
        if field and field.startswith(MASTER_COLUMN_PREFIX):
            logger.info(f"Detected MASTER source from column '{header}'")
            return ImportSource.MASTER

    if header_set & TICKETING_HEADER_FINGERPRINT and header_set & TICKETING_PRODUCT_HEADERS:
        logger.info("Detected TICKETING source from reseller header fingerprint")
        return ImportSource.TICKETING

    logger.info("No source fingerprint found, using DEFAULT source")
    return ImportSource.DEFAULT


def resolve_source(requested, headers):
    """Use the requested source when given, otherwise auto-detect."""
    if requested is None or requested == '':
        return detect_source(headers)
    return ImportSource.from_value(requested)
