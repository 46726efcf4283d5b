"""
Reseller ticketing feed classifier.

One row per ticket. The package is named in the product text after the
yacht name, e.g.:
    "LOTUS ROYALE - VIP SOFT"
    "Ocean Empress - Food and Unlimited Alcoholic Drinks"
Classification is literal phrase containment, tested in TICKETING_RULES order.
"""

import logging

from booking_import.utils.normalization import recover_yacht_name, split_on_dash
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


def _is_royal(text):
    return contains_any(text, 'royale', 'royal')


# Predicates receive the lowercase product text
TICKETING_RULES = [
    ClassificationRule(
        'vip_alcohol',
        lambda t: contains_any(t, 'vip unlimited', 'vip premium') or ('vip' in t and 'alc' in t),
        'vip_alc', 'vip_child',
    ),
    ClassificationRule('vip_soft', lambda t: 'vip soft' in t, 'vip_adult', 'vip_child'),
    ClassificationRule('royal_alcohol', lambda t: _is_royal(t) and 'alc' in t, 'royal_alc', 'royal_child'),
    ClassificationRule('royal_standard', _is_royal, 'royal_adult', 'royal_child'),
    ClassificationRule(
        'top_deck_alcohol',
        lambda t: 'top deck' in t and 'alc' in t,
        'adult_top_deck_alc', 'child_top_deck',
    ),
    ClassificationRule('top_deck', lambda t: 'top deck' in t, 'adult_top_deck', 'child_top_deck'),
    ClassificationRule(
        'unlimited_alcohol',
        lambda t: 'unlimited alcoholic' in t or (contains_any(t, 'food', 'unlimited') and 'alc' in t),
        'adult_alc',
    ),
    ClassificationRule(
        'food_and_soft',
        lambda t: ('food' in t and 'soft' in t) or contains_any(t, 'food only', 'soft drinks'),
        ADULT_BUCKET, CHILD_BUCKET,
    ),
    ClassificationRule('child_ticket', lambda t: 'child' in t, CHILD_BUCKET, CHILD_BUCKET),
]

FALLBACK_RULE = ClassificationRule('fallback', lambda t: True, ADULT_BUCKET, CHILD_BUCKET)


class TicketingClassifier(BaseClassifier):
    """
    Phrase classifier for the reseller ticketing feed.

    A ticket row without any package count counts as one adult.
    """

    def get_source(self):
        return ImportSource.TICKETING

    def package_phrase(self, row):
        """
        Package part of the product text.

        The remainder after the yacht name is used when a separator is
        present, so a yacht called "Lotus Royale" never reads as a royal package.
        """
        package_text = row.get('package_text') or ''
        for candidate in (package_text, row.raw_yacht_text):
            if not candidate:
                continue
            _, remainder = split_on_dash(candidate)
            if remainder is not None:
                return remainder
        return package_text or row.raw_yacht_text or ''

    def classify(self, row, reference):
        text = self.package_phrase(row)
        lowered = text.lower()

        adult_qty = row.take_bucket(ADULT_BUCKET)
        child_qty = row.take_bucket(CHILD_BUCKET)
        if adult_qty == 0 and child_qty == 0 and not row.bucket_counts():
            adult_qty = 1

        rule = first_matching_rule(TICKETING_RULES, lowered) or FALLBACK_RULE
        self.assign(row, rule, adult_qty, child_qty)

        product = row.raw_yacht_text or row.get('package_text') or ''
        if not row.yacht and product:
            recovered = recover_yacht_name(product)
            row.set_yacht(self.resolve_yacht_ref(recovered, reference))
            logger.debug(f"[Ticketing] Line {row.line_number}: recovered yacht '{recovered}'")

        logger.debug(f"[Ticketing] Line {row.line_number}: '{text}' -> rule '{rule.name}', {row.bucket_counts()}")
        return row.bucket_counts()
