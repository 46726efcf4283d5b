"""
Duplicate detection for candidate bookings.

Each candidate is compared against the existing bookings and against the
candidates already seen in the current batch:
- Client name: flagged unless the match shares the same booking reference
- Booking reference: flagged when reused (different or same logical booking)
- Transaction id: any reuse is flagged, ids are globally unique

Flags are advisory. They are returned as messages for the candidate's
notes, the candidate itself is never rejected.
"""

import logging
from collections import defaultdict

from booking_import.utils.normalization import normalize_key

logger = logging.getLogger(__name__)


class DuplicateTracker:
    """
    Indexes existing bookings and the growing batch for duplicate checks.

    Args:
        existing_bookings: Iterable of ExistingBooking records
    """

    def __init__(self, existing_bookings=()):
        self._store_refs_by_name = defaultdict(list)
        self._store_names_by_ref = defaultdict(list)
        self._store_transaction_ids = set()

        self._batch_refs_by_name = defaultdict(list)
        self._batch_names_by_ref = defaultdict(list)
        self._batch_transaction_ids = set()

        for booking in existing_bookings:
            name_key = normalize_key(booking.client_name)
            ref_key = normalize_key(booking.booking_ref_no)
            if name_key:
                self._store_refs_by_name[name_key].append(ref_key)
            if ref_key:
                self._store_names_by_ref[ref_key].append(booking.client_name)
            if booking.transaction_id:
                self._store_transaction_ids.add(normalize_key(booking.transaction_id))

    def check(self, client_name, booking_ref_no, transaction_id):
        """
        Check one candidate without registering it.

        Returns:
            list: Duplicate alert messages (empty when clean)
        """
        alerts = []
        alerts.extend(self._check_client_name(client_name, booking_ref_no))
        alerts.extend(self._check_booking_ref(client_name, booking_ref_no))
        alerts.extend(self._check_transaction_id(transaction_id))

        for alert in alerts:
            logger.warning(f"Duplicate check for '{client_name}': {alert}")
        return alerts

    def register(self, client_name, booking_ref_no, transaction_id):
        """Add a candidate to the batch-so-far indexes."""
        name_key = normalize_key(client_name)
        ref_key = normalize_key(booking_ref_no)
        if name_key:
            self._batch_refs_by_name[name_key].append(ref_key)
        if ref_key:
            self._batch_names_by_ref[ref_key].append(client_name)
        if transaction_id:
            self._batch_transaction_ids.add(normalize_key(transaction_id))

    def check_and_register(self, client_name, booking_ref_no, transaction_id):
        alerts = self.check(client_name, booking_ref_no, transaction_id)
        self.register(client_name, booking_ref_no, transaction_id)
        return alerts

    def _check_client_name(self, client_name, booking_ref_no):
        name_key = normalize_key(client_name)
        ref_key = normalize_key(booking_ref_no)
        if not name_key:
            return []

        alerts = []
        for where, index in (('existing bookings', self._store_refs_by_name),
                             ('this import', self._batch_refs_by_name)):
            other_refs = [r for r in index.get(name_key, []) if not (ref_key and r == ref_key)]
            if other_refs:
                shown = ', '.join(sorted({r or 'no ref' for r in other_refs}))
                alerts.append(f"Client name '{client_name}' already appears in {where} (ref: {shown})")
        return alerts

    def _check_booking_ref(self, client_name, booking_ref_no):
        ref_key = normalize_key(booking_ref_no)
        if not ref_key:
            return []

        name_key = normalize_key(client_name)
        alerts = []
        for where, index in (('existing bookings', self._store_names_by_ref),
                             ('this import', self._batch_names_by_ref)):
            names = index.get(ref_key, [])
            if not names:
                continue
            different = [n for n in names if normalize_key(n) != name_key]
            if different:
                alerts.append(f"Booking ref '{booking_ref_no}' is used by a different booking in {where} "
                              f"(client: {', '.join(sorted(set(different)))})")
            else:
                alerts.append(f"Booking ref '{booking_ref_no}' was already imported in {where}")
        return alerts

    def _check_transaction_id(self, transaction_id):
        key = normalize_key(transaction_id)
        if not key:
            return []

        alerts = []
        if key in self._store_transaction_ids:
            alerts.append(f"Transaction id '{transaction_id}' already exists in existing bookings")
        if key in self._batch_transaction_ids:
            alerts.append(f"Transaction id '{transaction_id}' is used twice in this import")
        return alerts
