"""
Data loading utilities.

Handles:
- Reading an uploaded export file (UTF-8, optional byte-order mark)
- Delimiter detection (tab vs comma) and header normalization
- Tokenizing data rows and discarding structurally malformed ones
- Loading the reference data snapshot (agents, yachts, existing bookings)
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field

from booking_import.models import (
    Agent,
    ExistingBooking,
    PackageCatalogEntry,
    RawRow,
    ReferenceData,
    Yacht,
)
from booking_import.utils.csv_tokenizer import parse_csv_line
from booking_import.utils.normalization import normalize_header, strip_bom

logger = logging.getLogger(__name__)


@dataclass
class ImportTable:
    """Tokenized export file ready for header mapping."""
    headers: list
    delimiter: str
    rows: list = field(default_factory=list)
    skipped_rows: int = 0
    diagnostics: list = field(default_factory=list)


def detect_delimiter(header_line):
    """
    Choose tab if the header has strictly more tabs than commas, else comma.

    Example:
        "Company Name\\tTicketNumber\\tYachtName" -> "\\t"
    """
    return '\t' if header_line.count('\t') > header_line.count(',') else ','


def read_import_file(filepath):
    """
    Read an export file as text.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid UTF-8
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Import file not found: {filepath}")

    logger.info(f"Loading import file: {filepath}")

    try:
        with open(filepath, encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ValueError(f"Import file is not valid UTF-8 text: {filepath}") from e


def parse_import_text(text):
    """
    Split export text into a header and tokenized data rows.

    Rows whose cell count differs from the header are discarded and counted,
    unless the only difference is a tail of blank cells, which is truncated.

    Args:
        text: Whole file content

    Returns:
        ImportTable: Normalized headers, delimiter, rows and skip count

    Raises:
        ValueError: If the text has no header or no data rows
    """
    numbered_lines = [
        (idx, line) for idx, line in enumerate(re.split(r'\r\n|\n', text or ''), 1)
        if line.strip() != ''
    ]

    if len(numbered_lines) < 2:
        raise ValueError("Import file must have a header and at least one data row")

    _, header_line = numbered_lines[0]
    header_line = strip_bom(header_line)
    delimiter = detect_delimiter(header_line)

    headers = [normalize_header(h) for h in parse_csv_line(header_line, delimiter)]
    # A BOM can also survive inside a quoted first cell
    headers[0] = strip_bom(headers[0])

    logger.info(f"Detected delimiter {'TAB' if delimiter == chr(9) else 'COMMA'}, "
                f"{len(headers)} columns: {headers}")

    table = ImportTable(headers=headers, delimiter=delimiter)

    for line_number, line in numbered_lines[1:]:
        cells = parse_csv_line(line, delimiter)

        if len(cells) > len(headers):
            extra = cells[len(headers):]
            if all(cell.strip() == '' for cell in extra):
                cells = cells[:len(headers)]

        if len(cells) != len(headers):
            message = (f"Line {line_number}: skipping malformed row, expected "
                       f"{len(headers)} columns, got {len(cells)}")
            logger.warning(f"[CSV Import] {message}")
            table.diagnostics.append(message)
            table.skipped_rows += 1
            continue

        table.rows.append(RawRow(line_number=line_number, cells=tuple(cells)))

    logger.info(f"Tokenized {len(table.rows)} data rows, {table.skipped_rows} malformed rows skipped")
    return table


def load_import_file(filepath):
    """Read and tokenize an export file in one step."""
    return parse_import_text(read_import_file(filepath))


def build_reference_data(payload):
    """
    Build a ReferenceData snapshot from plain dicts.

    Expected structure (camelCase keys as served by the reservation API):
        {
            'agents': [{'id', 'name', 'discountPercentage'}],
            'yachts': [{'id', 'name', 'category', 'packages': [{'id', 'name', 'rate'}]}],
            'bookings': [{'id', 'clientName', 'bookingRefNo', 'transactionId',
                          'month', 'packages', 'paidAmount'}],
            'users': {'<id>': '<name>'}
        }

    Raises:
        ValueError: If an entry lacks its id or name
    """
    try:
        agents = tuple(
            Agent(
                id=str(a['id']),
                name=str(a['name']),
                discount_percentage=float(a.get('discountPercentage', a.get('discount', 0)) or 0),
            )
            for a in payload.get('agents', [])
        )
        yachts = tuple(
            Yacht(
                id=str(y['id']),
                name=str(y['name']),
                category=str(y.get('category') or ''),
                packages=tuple(
                    PackageCatalogEntry(
                        package_id=str(p['id']),
                        name=str(p['name']),
                        rate=float(p.get('rate') or 0),
                    )
                    for p in y.get('packages', [])
                ),
            )
            for y in payload.get('yachts', [])
        )
        bookings = tuple(
            ExistingBooking(
                id=str(b['id']),
                client_name=str(b.get('clientName') or ''),
                booking_ref_no=str(b.get('bookingRefNo') or ''),
                transaction_id=str(b.get('transactionId') or ''),
                month=str(b.get('month') or ''),
                packages=tuple(b.get('packages') or b.get('packageQuantities') or ()),
                paid_amount=float(b.get('paidAmount') or 0),
            )
            for b in payload.get('bookings', [])
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed reference data: {e}") from e

    users = {str(k): str(v) for k, v in (payload.get('users') or {}).items()}

    logger.info(f"Reference data: {len(agents)} agents, {len(yachts)} yachts, "
                f"{len(bookings)} existing bookings")

    return ReferenceData(agents=agents, yachts=yachts, bookings=bookings, users=users)


def load_reference_data(filepath):
    """
    Load the reference data snapshot from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON is invalid or malformed
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Reference data file not found: {filepath}")

    logger.info(f"Loading reference data from: {filepath}")

    with open(filepath, encoding='utf-8') as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Reference data is not valid JSON: {e}") from e

    return build_reference_data(payload)
