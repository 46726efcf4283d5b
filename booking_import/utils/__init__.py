"""
Utility functions for tokenizing, normalizing and converting import data.
"""

from .csv_tokenizer import parse_csv_line

from .normalization import (
    normalize_header,
    lookup_field,
    normalize_key,
    recover_yacht_name,
    clean_agent_name,
    split_on_dash
)

from .value_converter import (
    ConversionContext,
    convert_value,
    parse_money,
    parse_date
)

from .source_detector import (
    ImportSource,
    detect_source,
    resolve_source
)

from .package_matcher import (
    PackageProfile,
    find_catalog_entry,
    resolve_bucket_lines,
    resolve_explicit_lines
)

from .financials import FinancialSummary, compute_financials
from .transaction_ids import TransactionIdAllocator, format_transaction_id

__all__ = [
    'parse_csv_line',
    'normalize_header',
    'lookup_field',
    'normalize_key',
    'recover_yacht_name',
    'clean_agent_name',
    'split_on_dash',
    'ConversionContext',
    'convert_value',
    'parse_money',
    'parse_date',
    'ImportSource',
    'detect_source',
    'resolve_source',
    'PackageProfile',
    'find_catalog_entry',
    'resolve_bucket_lines',
    'resolve_explicit_lines',
    'FinancialSummary',
    'compute_financials',
    'TransactionIdAllocator',
    'format_transaction_id'
]
