"""
Internal master sheet classifier.

The master sheet has one fixed column per (yacht, package) pair, e.g.
"Dhow Child 89" or "Lotus VIP 499". A non-zero count in such a column both
selects the row's yacht and adds to that package bucket.

Rows without any fixed column count fall back to a keyword scan of the
free-text product, using the same keyword families as the default source.
"""

import logging

from booking_import.config import (
    DHOW_YACHT,
    LOTUS_YACHT,
    MASTER_SHEET_COLUMNS,
    OCEAN_EMPRESS_YACHT,
    SUNSET_YACHT,
)
from booking_import.utils.source_detector import ImportSource

from .base_classifier import (
    ADULT_BUCKET,
    CHILD_BUCKET,
    BaseClassifier,
    ClassificationRule,
    contains_any,
    first_matching_rule,
)

logger = logging.getLogger(__name__)


def _has_drinks(text):
    return contains_any(text, 'drinks', 'alc')


# Predicates get lowercase text
STANDARD_PACKAGE_RULES = [
    ClassificationRule('child', lambda t: 'child' in t, CHILD_BUCKET, CHILD_BUCKET),
    ClassificationRule('drinks', _has_drinks, 'adult_alc'),
]

DHOW_PACKAGE_RULES = STANDARD_PACKAGE_RULES + [
    ClassificationRule('vip', lambda t: 'vip' in t, 'vip_adult'),
]

# Product named after a yacht only
FOOD_RULE = ClassificationRule('food', lambda t: True, ADULT_BUCKET, CHILD_BUCKET)

LOTUS_TIER_RULES = [
    ClassificationRule('royal_adult_alc', lambda t: 'royale adult' in t, 'royal_alc', 'royal_child'),
    ClassificationRule('royal_child', lambda t: 'child' in t and 'royale' in t, 'royal_child', 'royal_child'),
    ClassificationRule('vip_child', lambda t: 'child' in t, 'vip_child', 'vip_child'),
    ClassificationRule('royal_alc', lambda t: 'alc' in t and 'royale' in t, 'royal_alc', 'royal_child'),
    ClassificationRule('vip_alc', lambda t: 'alc' in t, 'vip_alc', 'vip_child'),
    ClassificationRule('royal_adult', lambda t: 'royale' in t, 'royal_adult', 'royal_child'),
    ClassificationRule('vip_adult', lambda t: True, 'vip_adult', 'vip_child'),
]

# (yacht predicate, yacht name, package rules)
YACHT_KEYWORDS = [
    (lambda t: 'dhow' in t, DHOW_YACHT, DHOW_PACKAGE_RULES),
    (lambda t: t.startswith('oe') or 'oe ' in t, OCEAN_EMPRESS_YACHT, STANDARD_PACKAGE_RULES),
    (lambda t: 'sunset' in t, SUNSET_YACHT, STANDARD_PACKAGE_RULES),
    (lambda t: 'lotus' in t, LOTUS_YACHT, STANDARD_PACKAGE_RULES),
    (lambda t: t.startswith('vip') or t.startswith('royale'), LOTUS_YACHT, LOTUS_TIER_RULES),
]


class MasterSheetClassifier(BaseClassifier):
    """
    Column-driven classifier for the internal master spreadsheet.
    """

    def get_source(self):
        return ImportSource.MASTER

    def classify(self, row, reference):
        if self._classify_fixed_columns(row, reference):
            return row.bucket_counts()

        self._classify_keywords(row, reference)
        return row.bucket_counts()

    def _classify_fixed_columns(self, row, reference):
        """
        Assign buckets from the fixed (yacht, package) columns.

        Returns:
            bool: True when at least one fixed column had a count
        """
        selected_yacht = None

        for column, quantity in row.master_columns.items():
            if quantity <= 0 or column not in MASTER_SHEET_COLUMNS:
                continue

            yacht_name, bucket = MASTER_SHEET_COLUMNS[column]

            if selected_yacht is None:
                selected_yacht = yacht_name
                row.clear_buckets()
                row.set_yacht(self.resolve_yacht_ref(yacht_name, reference))
            elif yacht_name != selected_yacht:
                message = (f"Line {row.line_number}: column '{column}' belongs to {yacht_name}, "
                           f"row already assigned to {selected_yacht}; ignoring {quantity}")
                logger.warning(f"[Master] {message}")
                row.warn(message)
                continue

            row.add_to_bucket(bucket, quantity)

        if selected_yacht:
            logger.debug(f"[Master] Line {row.line_number}: {selected_yacht} -> {row.bucket_counts()}")
        return selected_yacht is not None

    def _classify_keywords(self, row, reference):
        text = (row.raw_yacht_text or row.get('package_text') or '').strip()
        lowered = text.lower()

        adult_qty = row.take_bucket(ADULT_BUCKET)
        child_qty = row.take_bucket(CHILD_BUCKET)
        if adult_qty == 0 and child_qty == 0 and not row.bucket_counts():
            adult_qty = 1

        for yacht_predicate, yacht_name, package_rules in YACHT_KEYWORDS:
            if not yacht_predicate(lowered):
                continue

            rule = first_matching_rule(package_rules, lowered) or FOOD_RULE
            row.set_yacht(self.resolve_yacht_ref(yacht_name, reference))
            self.assign(row, rule, adult_qty, child_qty)
            logger.debug(f"[Master] Line {row.line_number}: '{text}' -> {yacht_name}, {row.bucket_counts()}")
            return

        message = f"Line {row.line_number}: no master column or product keyword matched '{text}'"
        logger.warning(f"[Master] {message}")
        row.warn(message)
        self.assign(row, FOOD_RULE, adult_qty, child_qty)
