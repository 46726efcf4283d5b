"""
Transaction id allocation.

Format: TRN-<year>-<5 digit sequence>, numbered per event year.
"""

import logging
import re

from booking_import.config import TRANSACTION_ID_DIGITS, TRANSACTION_ID_PREFIX

logger = logging.getLogger(__name__)


def format_transaction_id(year, sequence):
    """
    Build a transaction id.

    Example:
        format_transaction_id(2026, 42) -> "TRN-2026-00042"
    """
    return f"{TRANSACTION_ID_PREFIX}-{year}-{sequence:0{TRANSACTION_ID_DIGITS}d}"


def parse_transaction_id(transaction_id):
    """
    Split a generated transaction id into (year, sequence).

    Returns:
        tuple or None: (year, sequence), None if the id is not generated
    """
    if not transaction_id:
        return None
    match = re.match(rf'^{TRANSACTION_ID_PREFIX}-(\d{{4}})-(\d+)$', str(transaction_id).strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


class TransactionIdAllocator:
    """
    Allocates sequential transaction ids across a whole batch.

    The first request for a year scans the existing bookings for that year's
    highest sequence; later requests continue from an in-memory high-water
    mark, so ids never collide within the batch.
    """

    def __init__(self, existing_bookings=()):
        self.existing_bookings = existing_bookings
        self._high_water = {}

    def _scan_existing(self, year):
        highest = 0
        for booking in self.existing_bookings:
            parsed = parse_transaction_id(booking.transaction_id)
            if parsed and parsed[0] == year:
                highest = max(highest, parsed[1])
        return highest

    def observe(self, transaction_id):
        """Raise the high-water mark for an id already present in the batch."""
        parsed = parse_transaction_id(transaction_id)
        if not parsed:
            return
        year, sequence = parsed
        if year not in self._high_water:
            self._high_water[year] = self._scan_existing(year)
        self._high_water[year] = max(self._high_water[year], sequence)

    def allocate(self, year):
        """Return the next free transaction id for the given event year."""
        if year not in self._high_water:
            self._high_water[year] = self._scan_existing(year)
            logger.debug(f"Transaction id high-water mark for {year}: {self._high_water[year]}")

        self._high_water[year] += 1
        transaction_id = format_transaction_id(year, self._high_water[year])
        logger.info(f"Allocated transaction id {transaction_id}")
        return transaction_id
