"""
Data normalization utilities.

Handles normalization of:
- Header tokens (case, whitespace)
- Booking references and client names used as comparison keys
- Money strings (thousands separators, currency symbols)
- Yacht names embedded in ticketing product text
- Agent names for fuzzy matching
"""

import re
import logging

import pandas as pd

from booking_import.config import (
    AGENT_NAME_NOISE_PATTERN,
    DASH_SEPARATOR_PATTERN,
    FIELD_ALIAS_TABLE,
    YACHT_NAME_ALIASES,
)

logger = logging.getLogger(__name__)

BOM = '\ufeff'

# Currency symbols and codes seen in vendor exports
CURRENCY_PATTERN = r'(?i)aed|usd|eur|د\.إ|[$€£]'


def strip_bom(text):
    """Remove a leading byte-order mark."""
    if text and text.startswith(BOM):
        return text[len(BOM):]
    return text


def normalize_header(header):
    """
    Normalize a header cell for alias lookup.

    Example:
        "  Booking RefNO " -> "booking_refno"
        "Travel   Date"   -> "travel_date"
    """
    if header is None:
        return ''
    return re.sub(r'\s+', '_', str(header).strip().lower())


def lookup_field(normalized_header):
    """
    Resolve a normalized header to its canonical field name.

    Falls back to the space-separated form, because a few legacy alias
    keys were registered with spaces.

    Returns:
        str or None: Canonical field name, None for unmapped columns
    """
    field = FIELD_ALIAS_TABLE.get(normalized_header)
    if field is None:
        field = FIELD_ALIAS_TABLE.get(normalized_header.replace('_', ' '))
    return field


def normalize_key(value):
    """
    Comparison key for names and references.

    Example:
        "  John  DOE " -> "john doe"
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ''
    return re.sub(r'\s+', ' ', str(value)).strip().lower()


def clean_money(value):
    """
    Strip thousands separators, whitespace and currency markers.

    Example:
        "AED 1,200.50" -> "1200.50"
    """
    if value is None:
        return ''
    cleaned = re.sub(CURRENCY_PATTERN, '', str(value))
    cleaned = cleaned.replace(',', '')
    return re.sub(r'\s+', '', cleaned)


def split_on_dash(text):
    """
    Split text at the first dash-like separator.

    Returns:
        tuple: (head, remainder) or (text, None) when no separator is present
    """
    if not text:
        return text, None
    parts = re.split(DASH_SEPARATOR_PATTERN, text, maxsplit=1)
    if len(parts) < 2:
        return text, None
    return parts[0].strip(), parts[1].strip()


def recover_yacht_name(product_text):
    """
    Recover the canonical yacht name from ticketing product text.

    Known marketing prefixes are rewritten first, then everything after
    the first dash-like separator is dropped.

    Example:
        "Lotus Megayacht dinner cruise- Food only" -> "Lotus Royale"
        "LOTUS ROYALE - FOOD AND SOFT DRINKS"      -> "LOTUS ROYALE"
    """
    if not product_text:
        return ''

    name = str(product_text).strip()
    lowered = name.lower()

    for prefix, canonical in YACHT_NAME_ALIASES:
        if lowered.startswith(prefix):
            name = canonical + name[len(prefix):]
            break

    head, remainder = split_on_dash(name)
    if remainder is not None:
        logger.debug(f"[CSV Import] Parsed yacht from ticketing format: '{product_text}' -> '{head}'")
        name = head

    return name.strip()


def clean_agent_name(name):
    """
    Reduce an agent name to a fuzzy comparison key.

    Example:
        "Baseet Tourism L.L.C" -> "BASEETTOURISM"
    """
    if not name:
        return ''
    cleaned = re.sub(r'[^A-Z0-9]', '', str(name).upper())
    return re.sub(AGENT_NAME_NOISE_PATTERN, '', cleaned)
