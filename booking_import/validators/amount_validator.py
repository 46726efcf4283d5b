"""
Amount consistency validation.

Recomputes the expected net amount of a booking from its resolved package
lines and the agent's discount, then compares it to the paid amount
declared in the import file:

1. Resolve the agent (id, exact name, then fuzzy name; "Direct Booking" is 0%)
2. Resolve the yacht
3. Base = sum of package lines, else the declared total amount
4. Expected = base - base * discount / 100
5. Mismatch beyond AMOUNT_TOLERANCE -> validation error
"""

import logging
from dataclasses import dataclass, field

from booking_import.config import AMOUNT_TOLERANCE, DIRECT_BOOKING_AGENT
from booking_import.models import Agent
from booking_import.utils.financials import lines_total
from booking_import.utils.normalization import clean_agent_name

logger = logging.getLogger(__name__)


@dataclass
class AmountValidationResult:
    is_valid: bool = True
    calculated_total: float = 0.0
    paid_amount: float = 0.0
    discount_applied: float = 0.0
    discount_percentage: float = 0.0
    agent_name: str = ''
    yacht_name: str = ''
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


def find_agent_fuzzy(agent_ref, agents):
    """
    Find an agent by id, exact name, then normalized name containment.

    Example:
        "Baseet Tourism" matches an agent named "BASEET TOURISM L.L.C"
    """
    if not agent_ref:
        return None

    wanted = str(agent_ref).strip().lower()
    for agent in agents:
        if agent.id == agent_ref or agent.name.strip().lower() == wanted:
            return agent

    cleaned = clean_agent_name(agent_ref)
    if not cleaned:
        return None

    for agent in agents:
        candidate = clean_agent_name(agent.name)
        if not candidate:
            continue
        if candidate == cleaned or cleaned in candidate or candidate in cleaned:
            logger.debug(f"Fuzzy matched agent '{agent_ref}' -> '{agent.name}'")
            return agent

    return None


def validate_amounts(candidate, reference, declared_total=None):
    """
    Validate a candidate's paid amount against its recomputed net amount.

    Args:
        candidate: CandidateBooking with resolved package lines
        reference: ReferenceData snapshot
        declared_total: Total amount declared in the file, used as the base
            when the candidate has no package lines

    Returns:
        AmountValidationResult
    """
    result = AmountValidationResult(paid_amount=candidate.paid_amount, agent_name=candidate.agent or '')

    agent = find_agent_fuzzy(candidate.agent, reference.agents)
    if agent is None:
        if str(candidate.agent or '').strip().lower() == DIRECT_BOOKING_AGENT.lower():
            agent = Agent(id='direct-booking', name=DIRECT_BOOKING_AGENT, discount_percentage=0.0)
        else:
            result.is_valid = False
            result.errors.append(f'Agent "{candidate.agent}" not found in the system')
            return result

    result.agent_name = agent.name
    result.discount_percentage = agent.discount_percentage or 0.0

    yacht = reference.find_yacht(candidate.yacht)
    if yacht is None:
        result.is_valid = False
        result.errors.append(f'Yacht "{candidate.yacht}" not found in the system')
        return result

    result.yacht_name = yacht.name

    if candidate.packages:
        base_total = lines_total(candidate.packages)
    elif declared_total is not None:
        base_total = declared_total
    else:
        result.warnings.append('No package quantities or total amount provided. Using paid amount as base.')
        base_total = candidate.paid_amount

    discount_amount = base_total * result.discount_percentage / 100
    result.discount_applied = discount_amount
    result.calculated_total = base_total - discount_amount

    difference = abs(result.calculated_total - candidate.paid_amount)
    if difference > AMOUNT_TOLERANCE:
        result.is_valid = False
        result.errors.append(
            f"Payment mismatch: Expected {result.calculated_total:.2f} "
            f"(Base: {base_total:.2f} - Discount: {discount_amount:.2f}) "
            f"but CSV shows {candidate.paid_amount:.2f}. Difference: {difference:.2f}"
        )

    return result


def format_validation_result(row_number, result, client_name=None):
    """
    One-line summary of a validation result.

    Example:
        "✅ Row 2 (John Doe): VALID - Agent: Baseet (10% discount), Yacht: Lotus Royale, Expected: 180.00, CSV: 180.00"
    """
    prefix = f"Row {row_number} ({client_name})" if client_name else f"Row {row_number}"

    if result.is_valid:
        return (f"✅ {prefix}: VALID - Agent: {result.agent_name} ({result.discount_percentage:g}% discount), "
                f"Yacht: {result.yacht_name}, Expected: {result.calculated_total:.2f}, "
                f"CSV: {result.paid_amount:.2f}")

    return f"❌ {prefix}: INVALID - {'; '.join(result.errors)}"


def generate_validation_report(results, overall_errors=None):
    """
    Multi-line batch validation report.

    Args:
        results: Dict of row number -> AmountValidationResult (in row order)
        overall_errors: Batch level errors (e.g. no agents loaded)

    Returns:
        str: Report text
    """
    valid = [(row, r) for row, r in results.items() if r.is_valid]
    invalid = [(row, r) for row, r in results.items() if not r.is_valid]

    lines = [
        '=== CSV VALIDATION REPORT ===',
        f'Total Rows: {len(results)}',
        f'Valid: {len(valid)}',
        f'Invalid: {len(invalid)}',
        '',
    ]

    if overall_errors:
        lines.append('Overall Errors:')
        lines.extend(f'  - {error}' for error in overall_errors)
        lines.append('')

    if invalid:
        lines.append('Invalid Rows:')
        for row_number, result in invalid:
            lines.append(f'  Row {row_number}:')
            lines.extend(f'    - {error}' for error in result.errors)
        lines.append('')

    if valid:
        lines.append('Sample Valid Rows (first 5):')
        for row_number, result in valid[:5]:
            lines.append(f'  Row {row_number}: Agent: {result.agent_name}, '
                         f'Yacht: {result.yacht_name}, Amount: {result.calculated_total:.2f}')

    lines.append('=== END REPORT ===')
    return '\n'.join(lines)
