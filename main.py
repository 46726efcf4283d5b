"""
Booking Import - Main Entry Point

Converts a sales-channel export (direct bookings, reseller ticketing feed,
internal master sheet) into candidate bookings for review.

Features:
- Source auto-detection and per-source package classification
- Grouping of multi-ticket bookings by booking reference
- Financial recomputation and transaction id allocation
- Duplicate and amount mismatch flags in the notes
- Formatted Excel review sheet

Usage:
    python main.py path/to/export.csv --reference path/to/reference.json
        [--source DEFAULT|TICKETING|MASTER] [--actor USER_ID] [--output review.xlsx]
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from booking_import.data_loader import load_import_file, load_reference_data
from booking_import.processor import BookingImportProcessor, candidates_to_dataframe
from booking_import.utils.source_detector import ImportSource

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = 'booking_import_review.xlsx'


def setup_logging(level=logging.INFO):
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler('booking_import.log'),
            logging.StreamHandler()
        ]
    )


def get_next_available_filename(base_filename):
    """
    Append the first free counter to an existing output name.

    Example:
        review.xlsx exists -> review_1.xlsx
    """
    path = Path(base_filename)
    candidate = path
    counter = 0
    while candidate.exists():
        counter += 1
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
    return str(candidate)


def save_candidates_to_excel(results_df, output_file):
    """
    Save the candidate review sheet to Excel with formatting.

    Features:
    - Blue header row with white bold text
    - Yellow highlighting for flagged candidates (duplicates, amount mismatches)
    - Wrapped notes, auto-adjusted column widths, frozen header

    Args:
        results_df: DataFrame from candidates_to_dataframe()
        output_file: Output file path
    """
    from openpyxl import load_workbook
    from openpyxl.styles import Alignment, Font, PatternFill

    logger.info("Creating formatted Excel output...")

    results_df.to_excel(output_file, index=False)

    wb = load_workbook(output_file)
    ws = wb.active

    col_indices = {cell.value: idx for idx, cell in enumerate(ws[1], 1) if cell.value}

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=11)
    for cell in ws[1]:
        if cell.value:
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal='center', vertical='center')

    flagged_col = col_indices.get('Flagged')
    notes_col = col_indices.get('Notes')
    yellow_fill = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")

    flagged_rows = 0
    for row_idx in range(2, ws.max_row + 1):
        if notes_col:
            ws.cell(row=row_idx, column=notes_col).alignment = Alignment(wrap_text=True, vertical='top')
        if flagged_col and ws.cell(row=row_idx, column=flagged_col).value == 'YES':
            flagged_rows += 1
            for col_idx in range(1, len(results_df.columns) + 1):
                ws.cell(row=row_idx, column=col_idx).fill = yellow_fill

    for col_idx, col in enumerate(results_df.columns, 1):
        max_length = max(results_df[col].fillna('').astype(str).str.len().max() if len(results_df) else 0,
                         len(str(col))) + 2
        col_letter = ws.cell(row=1, column=col_idx).column_letter
        ws.column_dimensions[col_letter].width = min(max_length, 50)

    ws.freeze_panes = 'A2'
    wb.save(output_file)
    logger.info(f"Applied Excel formatting ({flagged_rows} flagged rows highlighted)")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Import a booking export file for review.")
    parser.add_argument('file', help="Export file (CSV or tab-delimited, UTF-8)")
    parser.add_argument('--reference', required=True,
                        help="JSON snapshot of agents, yachts and existing bookings")
    parser.add_argument('--source', choices=[s.value for s in ImportSource], default=None,
                        help="Import source (auto-detected from headers when omitted)")
    parser.add_argument('--actor', default=None, help="Id of the user running the import")
    parser.add_argument('--output', default=DEFAULT_OUTPUT_FILE, help="Excel review file")
    parser.add_argument('--report', action='store_true', help="Print the amount validation report")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the booking import."""
    args = parse_args(argv)
    setup_logging()

    logger.info("=" * 80)
    logger.info("Booking Import - Starting")
    logger.info("=" * 80)

    try:
        reference = load_reference_data(args.reference)
        table = load_import_file(args.file)

        processor = BookingImportProcessor(
            table,
            reference,
            source=args.source,
            current_actor_id=args.actor,
        )
        result = processor.process()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    logger.info(f"Source: {result.source}")
    logger.info(f"Candidates: {len(result.candidates)}, skipped rows: {result.skipped_rows}")

    if result.diagnostics:
        logger.info("Diagnostics:")
        for message in result.diagnostics:
            logger.info(f"  {message}")

    if args.report:
        print(processor.validation_report())

    output_file = get_next_available_filename(args.output)
    if output_file != args.output:
        logger.info(f"{args.output} already exists, using: {output_file}")

    save_candidates_to_excel(candidates_to_dataframe(result.candidates), output_file)

    logger.info("=" * 80)
    logger.info(f"EXCEL FILE: {os.path.abspath(output_file)}")
    logger.info("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main())
