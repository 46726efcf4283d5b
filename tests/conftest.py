# Shared pytest fixtures
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from booking_import.data_loader import build_reference_data, parse_import_text
from booking_import.processor import BookingImportProcessor

REFERENCE_PAYLOAD = {
    'agents': [
        {'id': 'a-1', 'name': 'Baseet Tourism LLC', 'discountPercentage': 10},
        {'id': 'a-2', 'name': 'Sea Travel', 'discountPercentage': 0},
        {'id': 'a-3', 'name': 'Gulf Tours FZE', 'discountPercentage': 5},
    ],
    'yachts': [
        {
            'id': 'y-lotus', 'name': 'Lotus Royale', 'category': 'Megayacht',
            'packages': [
                {'id': 'l-adult', 'name': 'Food & Soft Drinks (Adult)', 'rate': 249},
                {'id': 'l-child', 'name': 'Food & Soft Drinks (Child)', 'rate': 149},
                {'id': 'l-alc', 'name': 'Food & Unlimited Alcoholic Drinks', 'rate': 349},
                {'id': 'l-vip-adult', 'name': 'VIP Soft (Adult)', 'rate': 399},
                {'id': 'l-vip-child', 'name': 'VIP Soft (Child)', 'rate': 299},
                {'id': 'l-vip-alc', 'name': 'VIP Unlimited Alcoholic Drinks', 'rate': 499},
                {'id': 'l-royal', 'name': 'Royale Standard', 'rate': 999},
            ],
        },
        {
            'id': 'y-oe', 'name': 'Ocean Empress', 'category': 'Dinner Cruise',
            'packages': [
                {'id': 'oe-adult', 'name': 'ADULT', 'rate': 149},
                {'id': 'oe-child', 'name': 'CHILD', 'rate': 129},
                {'id': 'oe-alc', 'name': 'ADULT ALC', 'rate': 249},
                {'id': 'oe-top', 'name': 'ADULT TOP DECK', 'rate': 199},
                {'id': 'oe-top-child', 'name': 'CHILD TOP DECK', 'rate': 159},
                {'id': 'oe-top-alc', 'name': 'ADULT TOP DECK ALC', 'rate': 299},
            ],
        },
        {
            'id': 'y-dhow', 'name': 'Al Mansour Dhow', 'category': 'Dhow',
            'packages': [
                {'id': 'd-child', 'name': 'Child', 'rate': 89},
                {'id': 'd-food', 'name': 'Food', 'rate': 99},
                {'id': 'd-drinks', 'name': 'Drinks', 'rate': 199},
                {'id': 'd-vip', 'name': 'VIP', 'rate': 299},
            ],
        },
    ],
    'bookings': [
        {
            'id': 'b-1', 'clientName': 'Existing Client', 'bookingRefNo': 'REF-OLD',
            'transactionId': 'TRN-2026-00007', 'month': '2026-01-10T12:00:00',
            'packages': [], 'paidAmount': 500,
        },
        {
            'id': 'b-2', 'clientName': 'Old Timer', 'bookingRefNo': 'REF-2025',
            'transactionId': 'TRN-2025-00042', 'month': '2025-12-31T12:00:00',
            'packages': [], 'paidAmount': 0,
        },
    ],
    'users': {'u-1': 'Sales Admin'},
}


@pytest.fixture()
def reference_payload() -> dict:
    return json.loads(json.dumps(REFERENCE_PAYLOAD))


@pytest.fixture()
def reference(reference_payload):
    return build_reference_data(reference_payload)


@pytest.fixture()
def reference_file(tmp_path: Path, reference_payload) -> Path:
    path = tmp_path / 'reference.json'
    path.write_text(json.dumps(reference_payload), encoding='utf-8')
    return path


@pytest.fixture()
def fixed_now() -> datetime:
    return datetime(2026, 3, 1, 9, 30)


@pytest.fixture()
def run_import(reference, fixed_now):
    """Run the processor over CSV text, returning (processor, result)."""
    def _run(text, **kwargs):
        kwargs.setdefault('now', fixed_now)
        kwargs.setdefault('current_actor_id', 'u-1')
        processor = BookingImportProcessor(parse_import_text(text), reference, **kwargs)
        return processor, processor.process()
    return _run


@pytest.fixture()
def ticketing_export() -> str:
    rows = [
        ['Company Name', 'TicketNumber', 'YachtName', 'Booking Ref No', 'Customer Name',
         'Adult', 'Child', 'Sales Amount(AED)'],
        ['Sea Travel', 'T-100', 'LOTUS ROYALE - VIP SOFT', 'R-9', 'Jane Roe', '1', '0', '399'],
        ['Sea Travel', 'T-101', 'LOTUS ROYALE - VIP SOFT', 'R-9', 'Jane Roe', '0', '1', '299'],
        ['Sea Travel', 'T-102', 'Ocean Empress - UNLIMITED ALCOHOLIC DRINKS', 'R-10',
         'Max Mustermann', '4', '', '996'],
    ]
    return '\n'.join('\t'.join(r) for r in rows)
