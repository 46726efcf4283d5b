from __future__ import annotations

from booking_import.utils.transaction_ids import (
    TransactionIdAllocator,
    format_transaction_id,
    parse_transaction_id,
)


def test_format_and_parse():
    assert format_transaction_id(2026, 42) == 'TRN-2026-00042'
    assert parse_transaction_id('TRN-2026-00042') == (2026, 42)
    assert parse_transaction_id('T-100') is None
    assert parse_transaction_id('') is None


def test_allocation_continues_from_store(reference):
    allocator = TransactionIdAllocator(reference.bookings)
    assert allocator.allocate(2026) == 'TRN-2026-00008'
    assert allocator.allocate(2026) == 'TRN-2026-00009'
    assert allocator.allocate(2025) == 'TRN-2025-00043'


def test_new_year_starts_at_one(reference):
    allocator = TransactionIdAllocator(reference.bookings)
    assert allocator.allocate(2027) == 'TRN-2027-00001'


def test_observed_ids_raise_the_high_water_mark(reference):
    allocator = TransactionIdAllocator(reference.bookings)
    allocator.observe('TRN-2026-00050')
    allocator.observe('TRN-2026-00003')
    allocator.observe('T-100')
    assert allocator.allocate(2026) == 'TRN-2026-00051'
