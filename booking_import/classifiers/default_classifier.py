"""
Default package classifier.

Used for direct bookings and any partner export without a dedicated
classifier. The package type is read from the yacht/product text:

1. Remainder after the first dash-like separator
   "Lotus Royale - VIP Soft"           -> "VIP SOFT"
2. Text inside parentheses
   "Ocean Empress (Food Only)"         -> "FOOD ONLY"
3. A known multi-word phrase anywhere in the text
   "Ocean Empress Top Deck"            -> "TOP DECK"

The type is then matched against DEFAULT_RULES, first match wins.
Rows without a recognisable package type keep their bucket columns as is.
"""

import logging
import re

from booking_import.config import KNOWN_PACKAGE_PHRASES
from booking_import.utils.normalization import split_on_dash
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


# Predicates receive (package_type, full_text), both uppercase.
# Order matters: broader predicates further down would shadow earlier ones.
# A royal package with alcohol is caught by generic_alcohol before it reaches 'royal'.
DEFAULT_RULES = [
    ClassificationRule(
        'vip_soft',
        lambda t, full: 'VIP' in t and contains_any(t, 'SOFT', 'DRINK', 'ONLY'),
        'vip_adult', 'vip_child',
    ),
    ClassificationRule(
        'vip_plain',
        lambda t, full: t in ('VIP', 'VIP ALC', 'VIP ALCOHOLIC'),
        'vip_alc', 'vip_child',
    ),
    ClassificationRule(
        'vip_alcohol',
        lambda t, full: 'VIP' in t and contains_any(t, 'PREMIUM', 'UNLIMITED', 'ALC', 'ALCOHOLIC'),
        'vip_alc', 'vip_child',
    ),
    ClassificationRule(
        'unlimited_alcohol',
        lambda t, full: contains_any(t, 'UNLIMITED', 'PREMIUM') and contains_any(t, 'ALCOHOLIC', 'ALC'),
        'adult_alc',
    ),
    ClassificationRule(
        'food_and_bar',
        lambda t, full: 'FOOD' in t and contains_any(t, 'BAR', 'ALC'),
        'adult_alc',
    ),
    ClassificationRule(
        'generic_alcohol',
        lambda t, full: contains_any(t, 'HARD', 'ALCOHOLIC', 'ALC'),
        'adult_alc',
    ),
    ClassificationRule(
        'royal',
        lambda t, full: 'ROYAL' in t,
        'royal_adult', 'royal_child',
    ),
    ClassificationRule(
        'top_deck_alcohol',
        lambda t, full: 'TOP DECK' in (full + ' ' + t) and 'ALC' in (full + ' ' + t),
        'adult_top_deck_alc', 'child_top_deck',
    ),
    ClassificationRule(
        'top_deck',
        lambda t, full: 'TOP DECK' in (full + ' ' + t),
        'adult_top_deck', 'child_top_deck',
    ),
    ClassificationRule(
        'standard',
        lambda t, full: contains_any(t, 'FOOD', 'SOFT', 'ONLY', 'STANDARD', 'REGULAR', 'DRINK'),
        ADULT_BUCKET, CHILD_BUCKET,
    ),
]

FALLBACK_RULE = ClassificationRule('fallback', lambda t, full: True, ADULT_BUCKET, CHILD_BUCKET)


def extract_package_type(text):
    """
    Extract the package type substring from yacht/product text.

    Returns:
        str: Uppercase package type, '' when none is found
    """
    if not text:
        return ''

    _, remainder = split_on_dash(text)
    if remainder is not None:
        return remainder.upper()

    match = re.search(r'\(([^)]+)\)', text)
    if match:
        return match.group(1).strip().upper()

    upper = text.upper()
    for phrase in KNOWN_PACKAGE_PHRASES:
        if phrase in upper:
            return phrase

    return ''


class DefaultClassifier(BaseClassifier):
    """
    Keyword classifier for direct and generic partner exports.
    """

    def get_source(self):
        return ImportSource.DEFAULT

    def classify(self, row, reference):
        text = row.raw_yacht_text or row.get('package_text') or ''
        package_type = extract_package_type(text)

        if not package_type:
            logger.debug(f"[Default] Line {row.line_number}: no package type in '{text}'")
            return row.bucket_counts()

        adult_qty = row.take_bucket(ADULT_BUCKET)
        child_qty = row.take_bucket(CHILD_BUCKET)

        rule = first_matching_rule(DEFAULT_RULES, package_type, text.upper()) or FALLBACK_RULE
        self.assign(row, rule, adult_qty, child_qty)

        logger.debug(f"[Default] Line {row.line_number}: '{text}' -> type '{package_type}', rule '{rule.name}'")
        return row.bucket_counts()
