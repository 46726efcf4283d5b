"""
Package classification modules.

Different classifiers for different import sources:
- DefaultClassifier: Direct bookings and generic partner exports
- TicketingClassifier: Reseller ticketing feed
- MasterSheetClassifier: Internal master spreadsheet
"""

from booking_import.utils.source_detector import ImportSource

from .base_classifier import BaseClassifier, ClassificationRule
from .default_classifier import DefaultClassifier
from .ticketing import TicketingClassifier
from .master_sheet import MasterSheetClassifier

CLASSIFIERS = {
    ImportSource.DEFAULT: DefaultClassifier,
    ImportSource.TICKETING: TicketingClassifier,
    ImportSource.MASTER: MasterSheetClassifier,
}


def get_classifier(source):
    """Instantiate the classifier for an import source."""
    return CLASSIFIERS[ImportSource.from_value(source)]()


__all__ = [
    'BaseClassifier',
    'ClassificationRule',
    'DefaultClassifier',
    'TicketingClassifier',
    'MasterSheetClassifier',
    'get_classifier'
]
