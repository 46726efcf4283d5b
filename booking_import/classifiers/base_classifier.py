"""
Base classifier class defining the interface for all package classifiers.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ADULT_BUCKET = 'adult'
CHILD_BUCKET = 'child'


@dataclass(frozen=True)
class ClassificationRule:
    """
    One entry of an ordered, first-match-wins rule list.

    Attributes:
        name: Short label used in debug logs
        predicate: Callable taking the classifier's text input, returning bool
        adult_bucket: Bucket receiving the adult count
        child_bucket: Bucket receiving the child count, None keeps children
            in the base child bucket
    """
    name: str
    predicate: Callable[..., bool]
    adult_bucket: str
    child_bucket: Optional[str] = None


def first_matching_rule(rules, *args):
    """Return the first rule whose predicate accepts the arguments."""
    for rule in rules:
        if rule.predicate(*args):
            return rule
    return None


def contains_any(text, *keywords):
    return any(keyword in text for keyword in keywords)


def _leading_int(text):
    match = re.match(r'^\d+', text)
    return int(match.group(0)) if match else None


def apply_pax_complex(row):
    """
    Fold a compound passenger count cell into the adult and child buckets.

    Example:
        "8 + 1 + 0" -> adult += 8, child += 1 (infants ignored)
        "5"         -> adult += 5
    """
    pax = str(row.get('pax_count') or '').strip()
    row.fields.pop('pax_count', None)
    if not pax:
        return

    if '+' in pax:
        counts = [_leading_int(part.strip()) for part in pax.split('+')]
        if len(counts) >= 1 and counts[0] is not None:
            row.add_to_bucket(ADULT_BUCKET, counts[0])
        if len(counts) >= 2 and counts[1] is not None:
            row.add_to_bucket(CHILD_BUCKET, counts[1])
    else:
        count = _leading_int(pax)
        if count is not None:
            row.add_to_bucket(ADULT_BUCKET, count)

    logger.debug(f"Line {row.line_number}: pax '{pax}' -> {row.bucket_counts()}")


def merge_client_name(row):
    """
    Join split first/last name cells into the client name.

    Example:
        first="John", last="Doe" -> client_name="John Doe"
    """
    first = str(row.fields.pop('client_first_name', None) or '').strip()
    last = str(row.fields.pop('client_last_name', None) or '').strip()
    merged = f"{first} {last}".strip()
    if merged:
        row.set_client_name(merged)


class BaseClassifier(ABC):
    """
    Abstract base class for all package classifiers.

    Each classifier must implement:
    - classify: Redistribute a row's raw counts into package buckets
    - get_source: Return the ImportSource this classifier handles
    """

    @abstractmethod
    def classify(self, row, reference):
        """
        Classify one parsed row in place.

        Args:
            row: ParsedRow with raw adult/child counts in its buckets
            reference: ReferenceData snapshot (yacht lookup)

        Returns:
            dict: Bucket counts after classification
        """
        pass

    @abstractmethod
    def get_source(self):
        """
        Get the import source this classifier handles.

        Returns:
            ImportSource
        """
        pass

    def prepare(self, row):
        """Steps shared by every source, run before classify()."""
        apply_pax_complex(row)
        merge_client_name(row)

    def process_row(self, row, reference):
        self.prepare(row)
        return self.classify(row, reference)

    def assign(self, row, rule, adult_qty, child_qty):
        """Put adult and child counts into the buckets named by a rule."""
        row.add_to_bucket(rule.adult_bucket, adult_qty)
        row.add_to_bucket(rule.child_bucket or CHILD_BUCKET, child_qty)
        logger.debug(f"Line {row.line_number}: rule '{rule.name}' -> "
                     f"{rule.adult_bucket}={adult_qty}, {rule.child_bucket or CHILD_BUCKET}={child_qty}")

    def resolve_yacht_ref(self, name, reference):
        """Store id for a yacht name, or the name as a provisional id."""
        yacht = reference.find_yacht(name)
        return yacht.id if yacht else name
