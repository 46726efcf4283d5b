"""
Hand-off of confirmed candidates to the reservation system.

Submission only starts once the whole batch has been classified, grouped
and validated. Each candidate is sent through a caller-supplied
create_booking(candidate) callable on a thread pool; failures are
collected per candidate and never abort the rest of the batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4


@dataclass
class SubmissionOutcome:
    candidate: object
    success: bool
    result: object = None
    error: Optional[str] = None


@dataclass
class SubmissionReport:
    outcomes: list = field(default_factory=list)

    @property
    def succeeded(self):
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self):
        return [o for o in self.outcomes if not o.success]

    def summary(self):
        return f"{len(self.succeeded)} bookings created, {len(self.failed)} failed"


def _submit_one(create_booking, candidate):
    try:
        return SubmissionOutcome(candidate=candidate, success=True, result=create_booking(candidate))
    except Exception as e:
        logger.error(f"Failed to create booking for '{candidate.client_name}' "
                     f"({candidate.transaction_id}): {e}")
        return SubmissionOutcome(candidate=candidate, success=False, error=str(e))


def submit_candidates(candidates, create_booking, concurrency=DEFAULT_CONCURRENCY):
    """
    Submit candidate bookings concurrently.

    Args:
        candidates: CandidateBooking list from a completed import
        create_booking: Callable persisting one candidate, raising on failure
        concurrency: Maximum number of parallel submissions

    Returns:
        SubmissionReport: One outcome per candidate, in input order
    """
    candidates = list(candidates)
    if not candidates:
        return SubmissionReport()

    logger.info(f"Submitting {len(candidates)} bookings (concurrency {concurrency})")

    outcomes = [None] * len(candidates)
    with ThreadPoolExecutor(max_workers=max(1, concurrency)) as executor:
        futures = {
            executor.submit(_submit_one, create_booking, candidate): idx
            for idx, candidate in enumerate(candidates)
        }

        for future in as_completed(futures):
            outcomes[futures[future]] = future.result()

    report = SubmissionReport(outcomes=outcomes)
    logger.info(f"Submission finished: {report.summary()}")
    return report
