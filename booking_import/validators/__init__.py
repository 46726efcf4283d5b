"""
Validation modules for candidate bookings.

Includes:
- Duplicate detection (client name, booking reference, transaction id)
- Amount consistency (recomputed net vs declared paid amount)
- Validation report formatting
"""

from .duplicate_validator import DuplicateTracker
from .amount_validator import (
    AmountValidationResult,
    find_agent_fuzzy,
    validate_amounts,
    format_validation_result,
    generate_validation_report
)

__all__ = [
    'DuplicateTracker',
    'AmountValidationResult',
    'find_agent_fuzzy',
    'validate_amounts',
    'format_validation_result',
    'generate_validation_report'
]
