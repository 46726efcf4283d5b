from __future__ import annotations

from datetime import datetime

import pytest

from booking_import.models import CandidateBooking, PackageQuantityLine
from booking_import.validators import (
    DuplicateTracker,
    find_agent_fuzzy,
    format_validation_result,
    generate_validation_report,
    validate_amounts,
)


def make_candidate(agent, yacht, packages=(), paid=0.0, client='John Doe'):
    return CandidateBooking(
        client_name=client,
        yacht=yacht,
        event_date=datetime(2026, 1, 30, 12, 0),
        type='Shared Cruise',
        agent=agent,
        packages=[PackageQuantityLine(pid, name, qty, rate) for pid, name, qty, rate in packages],
        paid_amount=paid,
    )


VIP_FAMILY = [('l-vip-adult', 'VIP Soft (Adult)', 2, 399.0), ('l-vip-child', 'VIP Soft (Child)', 1, 299.0)]


# --- duplicates --------------------------------------------------------

@pytest.fixture()
def tracker(reference):
    return DuplicateTracker(reference.bookings)


def test_clean_candidate_has_no_alerts(tracker):
    assert tracker.check('New Person', 'REF-NEW', 'TRN-2026-00100') == []


def test_same_name_different_ref_is_flagged(tracker):
    alerts = tracker.check('existing  client', 'REF-NEW', '')
    assert len(alerts) == 1
    assert "already appears in existing bookings" in alerts[0]


def test_same_name_same_ref_is_reimport(tracker):
    alerts = tracker.check('Existing Client', 'ref-old', '')
    assert alerts == ["Booking ref 'ref-old' was already imported in existing bookings"]


def test_ref_used_by_other_client(tracker):
    alerts = tracker.check('Someone Else', 'REF-OLD', '')
    assert alerts == [
        "Booking ref 'REF-OLD' is used by a different booking in existing bookings (client: Existing Client)"
    ]


def test_existing_transaction_id(tracker):
    alerts = tracker.check('New Person', '', 'TRN-2026-00007')
    assert alerts == ["Transaction id 'TRN-2026-00007' already exists in existing bookings"]


def test_batch_duplicates(tracker):
    assert tracker.check_and_register('Jane Roe', 'R-9', 'T-100') == []
    alerts = tracker.check_and_register('Jane Roe', 'R-9', 'T-100')
    assert "Booking ref 'R-9' was already imported in this import" in alerts
    assert "Transaction id 'T-100' is used twice in this import" in alerts
    assert len(alerts) == 2


def test_check_does_not_register(tracker):
    tracker.check('Jane Roe', 'R-9', 'T-100')
    assert tracker.check('Jane Roe', 'R-9', 'T-100') == []


# --- amounts -----------------------------------------------------------

@pytest.mark.parametrize('agent_ref, agent_id', [
    ('a-2', 'a-2'),
    ('SEA TRAVEL', 'a-2'),
    ('Baseet Tourism', 'a-1'),
    ('Gulf Tours', 'a-3'),
    ('Unknown Agency', None),
    ('', None),
])
def test_find_agent_fuzzy(reference, agent_ref, agent_id):
    agent = find_agent_fuzzy(agent_ref, reference.agents)
    assert (agent.id if agent else None) == agent_id


def test_matching_amount_is_valid(reference):
    result = validate_amounts(make_candidate('a-1', 'y-lotus', VIP_FAMILY, paid=987.3), reference)
    assert result.is_valid
    assert result.discount_percentage == 10
    assert result.calculated_total == pytest.approx(987.3)
    assert result.yacht_name == 'Lotus Royale'


def test_payment_mismatch(reference):
    candidate = make_candidate('a-2', 'y-oe', [('oe-adult', 'ADULT', 2, 149.0)], paid=100.0)
    result = validate_amounts(candidate, reference)
    assert not result.is_valid
    assert result.errors == [
        'Payment mismatch: Expected 298.00 (Base: 298.00 - Discount: 0.00) '
        'but CSV shows 100.00. Difference: 198.00'
    ]


def test_direct_booking_has_no_discount(reference):
    candidate = make_candidate('Direct Booking', 'y-oe', [('oe-adult', 'ADULT', 1, 149.0)], paid=149.0)
    result = validate_amounts(candidate, reference)
    assert result.is_valid
    assert result.agent_name == 'Direct Booking'
    assert result.discount_percentage == 0


def test_unknown_agent(reference):
    result = validate_amounts(make_candidate('Nobody Travel', 'y-oe'), reference)
    assert result.errors == ['Agent "Nobody Travel" not found in the system']


def test_unknown_yacht(reference):
    result = validate_amounts(make_candidate('a-2', 'Phantom'), reference)
    assert result.errors == ['Yacht "Phantom" not found in the system']


def test_declared_total_is_base_without_packages(reference):
    result = validate_amounts(make_candidate('a-3', 'y-dhow', paid=475.0), reference, declared_total=500.0)
    assert result.is_valid
    assert result.discount_applied == pytest.approx(25.0)


def test_paid_amount_is_base_without_any_total(reference):
    result = validate_amounts(make_candidate('a-2', 'y-dhow', paid=120.0), reference)
    assert result.is_valid
    assert result.warnings == ['No package quantities or total amount provided. Using paid amount as base.']


# --- report ------------------------------------------------------------

def test_format_validation_result(reference):
    valid = validate_amounts(make_candidate('a-1', 'y-lotus', VIP_FAMILY, paid=987.3), reference)
    assert format_validation_result(2, valid, 'John Doe') == (
        '✅ Row 2 (John Doe): VALID - Agent: Baseet Tourism LLC (10% discount), '
        'Yacht: Lotus Royale, Expected: 987.30, CSV: 987.30'
    )

    invalid = validate_amounts(make_candidate('Nobody Travel', 'y-oe'), reference)
    assert format_validation_result(3, invalid) == '❌ Row 3: INVALID - Agent "Nobody Travel" not found in the system'


def test_generate_validation_report(reference):
    results = {
        2: validate_amounts(make_candidate('a-1', 'y-lotus', VIP_FAMILY, paid=987.3), reference),
        5: validate_amounts(make_candidate('a-2', 'Phantom'), reference),
    }
    report = generate_validation_report(results, ['No agents loaded'])
    lines = report.split('\n')

    assert lines[0] == '=== CSV VALIDATION REPORT ==='
    assert 'Total Rows: 2' in lines
    assert 'Valid: 1' in lines
    assert 'Invalid: 1' in lines
    assert '  - No agents loaded' in lines
    assert '  Row 5:' in lines
    assert '    - Yacht "Phantom" not found in the system' in lines
    assert '  Row 2: Agent: Baseet Tourism LLC, Yacht: Lotus Royale, Amount: 987.30' in lines
    assert lines[-1] == '=== END REPORT ==='
