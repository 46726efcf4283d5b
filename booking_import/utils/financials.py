"""
Financial recomputation for candidate bookings.

total      = sum(quantity * rate) over resolved package lines
commission = total * agent discount % / 100
net        = total - commission
paid       = declared paid, or total for a confirmed booking with nothing paid
balance    = net - paid

Every derived value is rounded to 2 decimals as soon as it is computed.
The separate "other charge" is never part of the total.
"""

import logging
from dataclasses import dataclass

from booking_import.config import CONFIRMED_STATUSES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinancialSummary:
    total_amount: float
    commission_percentage: float
    commission_amount: float
    net_amount: float
    paid_amount: float
    balance_amount: float


def round_money(value):
    return round(float(value or 0), 2)


def lines_total(lines):
    """Unrounded sum of quantity x rate over package lines."""
    return sum(line.quantity * line.rate for line in lines)


def compute_financials(lines, discount_percentage, status, paid_amount):
    """
    Derive the financial fields of a booking.

    Args:
        lines: Resolved PackageQuantityLine list
        discount_percentage: Agent discount in percent (0 when unknown)
        status: Canonical booking status
        paid_amount: Summed paid amount of the group (0 when none supplied)

    Returns:
        FinancialSummary

    Example:
        2 x 100.00 with a 10% agent, status Confirmed, nothing paid
        -> total 200.00, commission 20.00, net 180.00, paid 200.00, balance -20.00
    """
    discount_percentage = float(discount_percentage or 0)

    total = round_money(lines_total(lines))
    commission = round_money(total * discount_percentage / 100)
    net = round_money(total - commission)

    paid = round_money(paid_amount)
    if paid == 0 and status in CONFIRMED_STATUSES:
        logger.debug(f"Status '{status}' with no paid amount, assuming full payment of {total:.2f}")
        paid = total

    balance = round_money(net - paid)

    return FinancialSummary(
        total_amount=total,
        commission_percentage=discount_percentage,
        commission_amount=commission,
        net_amount=net,
        paid_amount=paid,
        balance_amount=balance,
    )
