"""
Value conversion for canonical fields.

Turns raw cell text into the semantic type of its canonical field:
- Money / percentage fields -> float (0 when empty or unparsable)
- Package count columns -> non-negative int
- Dates -> datetime pinned to local noon
- Enumerations -> one of the fixed options, or the documented default
- Agent / yacht / user identifiers -> store id, or the name as a provisional id
- Everything else -> verbatim text
"""

import json
import logging
import re
from datetime import datetime

import pandas as pd

from booking_import.config import (
    BOOKING_TYPE_OPTIONS,
    DATE_FIELDS,
    DATE_FORMAT_DMY_DASH,
    DATE_FORMAT_DMY_DASH_TIME,
    DATE_FORMAT_DMY_SLASH,
    ENUM_DEFAULTS,
    MASTER_COLUMN_PREFIX,
    MODE_OF_PAYMENT_ALIASES,
    MODE_OF_PAYMENT_OPTIONS,
    MONEY_FIELDS,
    NOON_HOUR,
    NULLABLE_MONEY_FIELDS,
    PACKAGE_PREFIX,
    PAYMENT_CONFIRMATION_ALIASES,
    PAYMENT_CONFIRMATION_OPTIONS,
    STATUS_ALIASES,
    STATUS_OPTIONS,
    USER_FIELDS,
)
from booking_import.utils.normalization import clean_money, recover_yacht_name

logger = logging.getLogger(__name__)


class ConversionContext:
    """
    Lookup maps and runtime parameters shared by every conversion in a batch.

    Args:
        agent_map: Dict of agent id -> agent name
        yacht_map: Dict of yacht id -> yacht name
        user_map: Dict of user id -> user name
        current_actor_id: Id of the user running the import
        now: Clock value used for missing dates (defaults to datetime.now())
    """

    def __init__(self, agent_map=None, yacht_map=None, user_map=None,
                 current_actor_id=None, now=None):
        self.agent_map = agent_map or {}
        self.yacht_map = yacht_map or {}
        self.user_map = user_map or {}
        self.current_actor_id = current_actor_id
        self.now = now
        self.warnings = []

    def current_time(self):
        return pin_to_noon(self.now or datetime.now())

    def warn(self, message):
        logger.warning(message)
        self.warnings.append(message)


def pin_to_noon(value):
    """Force the time of day to local noon, dropping any timezone."""
    return datetime(value.year, value.month, value.day, NOON_HOUR, 0, 0)


def _is_blank(value):
    if value is None:
        return True
    if not isinstance(value, str) and pd.isna(value):
        return True
    return str(value).strip() == ''


def parse_money(value):
    """
    Parse a money or percentage string.

    Returns:
        float or None: Parsed value, None if unparsable

    Example:
        "1,200.50" -> 1200.5
        "AED 99"   -> 99.0
    """
    cleaned = clean_money(value)
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_count(value):
    """Parse a package count; negatives and junk become 0."""
    match = re.match(r'^\s*(-?\d+)', str(value))
    if not match:
        return 0
    count = int(match.group(1))
    return count if count > 0 else 0


def parse_date(value):
    """
    Parse an import date.

    Formats tried in order:
    - dd-MM-yyyy          (e.g., "30-01-2026")
    - dd/MM/yyyy          (e.g., "30/01/2026", time suffix ignored)
    - ISO-8601            (e.g., "2026-01-30T18:00:00Z")
    - dd-MM-yyyy H:mm:ss  (e.g., "06-01-2026 1:56:29")

    Returns:
        datetime or None: Parsed value pinned to noon, None if no format matched
    """
    text = str(value).strip()

    try:
        return pin_to_noon(datetime.strptime(text, DATE_FORMAT_DMY_DASH))
    except ValueError:
        pass

    if re.match(r'^\d{1,2}/\d{1,2}/\d{4}', text):
        try:
            return pin_to_noon(datetime.strptime(text[:10].strip(), DATE_FORMAT_DMY_SLASH))
        except ValueError:
            pass

    if re.match(r'^\d{4}-\d{1,2}-\d{1,2}', text):
        try:
            return pin_to_noon(pd.to_datetime(text))
        except (ValueError, OverflowError):
            pass

    try:
        return pin_to_noon(datetime.strptime(text, DATE_FORMAT_DMY_DASH_TIME))
    except ValueError:
        pass

    return None


def match_option(value, options, aliases=None, case_fold=str.lower):
    """
    Case-insensitive match against a fixed option list.

    Returns:
        str or None: The canonical option, None when not recognised
    """
    key = case_fold(value.strip())
    if aliases and key in aliases:
        return aliases[key]
    for option in options:
        if case_fold(option) == key:
            return option
    return None


def resolve_identifier(value, lookup_map):
    """
    Resolve a human name to its store id by exact case-insensitive match.

    Unresolved names pass through unchanged as provisional identifiers.
    """
    wanted = value.strip().lower()
    for entity_id, name in lookup_map.items():
        if name and str(name).strip().lower() == wanted:
            return entity_id
    return value


def _convert_enum(field, value):
    if field == 'mode_of_payment':
        found = match_option(value, MODE_OF_PAYMENT_OPTIONS, MODE_OF_PAYMENT_ALIASES)
    elif field == 'status':
        found = match_option(value, STATUS_OPTIONS, STATUS_ALIASES)
    elif field == 'type':
        found = match_option(value, BOOKING_TYPE_OPTIONS)
    else:
        found = match_option(value, PAYMENT_CONFIRMATION_OPTIONS,
                             PAYMENT_CONFIRMATION_ALIASES, case_fold=str.upper)

    if found is None:
        found = ENUM_DEFAULTS[field][1]
        logger.debug(f"Unrecognised {field} value '{value}', using default '{found}'")
    return found


def _convert_package_details(value, context):
    try:
        parsed = json.loads(value)
    except ValueError as e:
        context.warn(f"[CSV Import] Could not parse package details '{value}': {e}")
        return None

    if not isinstance(parsed, list):
        context.warn(f"[CSV Import] Package details are not a list: '{value}'")
        return None

    lines = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        name = str(item.get('packageName') or 'Unknown CSV Pkg')
        try:
            quantity = int(float(item.get('quantity') or 0))
            rate = float(item.get('rate') or 0)
        except (TypeError, ValueError, OverflowError):
            context.warn(f"[CSV Import] Dropping package '{name}' with invalid quantity or rate: {item}")
            continue
        lines.append({
            'packageId': str(item.get('packageId') or ''),
            'packageName': name,
            'quantity': quantity,
            'rate': rate,
        })
    return lines


def convert_value(field, value, context):
    """
    Convert a raw cell to the typed value of a canonical field.

    Args:
        field: Canonical field name (from the alias table)
        value: Raw cell text
        context: ConversionContext with lookup maps

    Returns:
        Typed value (float, int, datetime, str, list or None)

    Example:
        convert_value('paid_amount', '1,200.50', ctx) -> 1200.5
    """
    if field.startswith(PACKAGE_PREFIX) or field.startswith(MASTER_COLUMN_PREFIX):
        return 0 if _is_blank(value) else parse_count(value)

    if _is_blank(value):
        if field in MONEY_FIELDS:
            return 0.0
        if field in NULLABLE_MONEY_FIELDS:
            return None
        if field in ENUM_DEFAULTS:
            return ENUM_DEFAULTS[field][0]
        if field in DATE_FIELDS:
            return context.current_time()
        if field in USER_FIELDS:
            return context.current_actor_id
        if field in ('notes', 'booking_ref_no', 'pax_count'):
            return ''
        return None

    text = str(value).strip()

    if field in MONEY_FIELDS or field in NULLABLE_MONEY_FIELDS:
        number = parse_money(text)
        if number is None:
            context.warn(f"[CSV Import] Could not parse amount '{text}' for field '{field}'")
            return None if field in NULLABLE_MONEY_FIELDS else 0.0
        return number

    if field in DATE_FIELDS:
        parsed = parse_date(text)
        if parsed is None:
            context.warn(f"[CSV Import] Failed to parse date '{text}' for field '{field}'. Using current date.")
            return context.current_time()
        return parsed

    if field in ENUM_DEFAULTS:
        return _convert_enum(field, text)

    if field == 'agent':
        return resolve_identifier(text, context.agent_map)

    if field in USER_FIELDS:
        return resolve_identifier(text, context.user_map)

    if field == 'yacht':
        return resolve_identifier(recover_yacht_name(text), context.yacht_map)

    if field == 'package_details':
        return _convert_package_details(text, context)

    return text
