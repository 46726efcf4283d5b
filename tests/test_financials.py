from __future__ import annotations

import pytest

from booking_import.models import PackageQuantityLine
from booking_import.utils.financials import compute_financials, lines_total, round_money


def line(quantity, rate, package_id='p-1'):
    return PackageQuantityLine(package_id, 'Package', quantity, rate)


def test_confirmed_booking_without_payment_is_fully_paid():
    summary = compute_financials([line(2, 100.0)], 10, 'Confirmed', 0)
    assert summary.total_amount == 200.0
    assert summary.commission_percentage == 10.0
    assert summary.commission_amount == 20.0
    assert summary.net_amount == 180.0
    assert summary.paid_amount == 200.0
    assert summary.balance_amount == -20.0


def test_balance_status_keeps_zero_payment():
    summary = compute_financials([line(2, 149.0)], 0, 'Balance', 0)
    assert summary.paid_amount == 0.0
    assert summary.balance_amount == 298.0


def test_declared_payment_is_kept():
    summary = compute_financials([line(2, 399.0), line(1, 299.0, 'p-2')], 10, 'Confirmed', 500)
    assert summary.total_amount == 1097.0
    assert summary.commission_amount == 109.7
    assert summary.net_amount == 987.3
    assert summary.paid_amount == 500.0
    assert summary.balance_amount == 487.3


def test_every_step_is_rounded():
    summary = compute_financials([line(3, 33.333)], 12.5, 'Deposit Paid', 10.005)
    assert summary.total_amount == 100.0
    assert summary.commission_amount == 12.5
    assert summary.net_amount == 87.5
    assert summary.balance_amount == round_money(87.5 - summary.paid_amount)


@pytest.mark.parametrize('discount', [0, 5, 10, 33.3])
def test_invariants_hold(discount):
    lines = [line(4, 249.0), line(1, 129.0, 'p-2')]
    summary = compute_financials(lines, discount, 'Confirmed', 0)
    assert summary.total_amount == round_money(lines_total(lines))
    assert summary.net_amount == round_money(summary.total_amount - summary.commission_amount)
    assert summary.balance_amount == round_money(summary.net_amount - summary.paid_amount)


def test_no_lines_gives_zero_total():
    summary = compute_financials([], None, 'Confirmed', 0)
    assert summary.total_amount == 0.0
    assert summary.paid_amount == 0.0
    assert summary.balance_amount == 0.0
