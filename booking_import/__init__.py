"""
Booking import pipeline.

Converts sales-channel export files (direct bookings, the reseller
ticketing feed, the internal master sheet) into candidate booking
records with normalized package lines, recomputed financials and
duplicate / amount diagnostics.
"""

from .data_loader import load_import_file, load_reference_data, parse_import_text
from .models import CandidateBooking, ImportResult, ReferenceData
from .processor import (
    BookingImportProcessor,
    ImportCancelledError,
    candidates_to_dataframe,
    process_import_file,
    process_import_text
)
from .submitter import SubmissionReport, submit_candidates

__version__ = '1.0.0'

__all__ = [
    'load_import_file',
    'load_reference_data',
    'parse_import_text',
    'CandidateBooking',
    'ImportResult',
    'ReferenceData',
    'BookingImportProcessor',
    'ImportCancelledError',
    'candidates_to_dataframe',
    'process_import_file',
    'process_import_text',
    'SubmissionReport',
    'submit_candidates'
]
