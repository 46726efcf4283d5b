"""
Main booking import processor.

Orchestrates the complete import workflow:
1. Detect the import source and map headers to canonical fields
2. Convert each row's cells to typed values
3. Classify package counts into buckets (source specific)
4. Group rows by booking reference and aggregate them
5. Resolve buckets against the yacht's package catalog
6. Compute financials and allocate missing transaction ids
7. Flag duplicates and amount mismatches in the notes
8. Return the candidate bookings with diagnostics
"""

import logging
from collections import OrderedDict

import pandas as pd

from booking_import.classifiers import get_classifier
from booking_import.config import (
    ENUM_DEFAULTS,
    NOTE_DUPLICATE_ALERT,
    NOTE_MERGED_TICKETS,
    NOTE_VALIDATION_WARNING,
    PACKAGE_BUCKET_LABELS,
)
from booking_import.data_loader import load_import_file, parse_import_text
from booking_import.models import CandidateBooking, ImportResult, ParsedRow
from booking_import.utils.financials import compute_financials
from booking_import.utils.normalization import lookup_field
from booking_import.utils.package_matcher import resolve_bucket_lines, resolve_explicit_lines
from booking_import.utils.source_detector import resolve_source
from booking_import.utils.transaction_ids import TransactionIdAllocator
from booking_import.utils.value_converter import ConversionContext, convert_value
from booking_import.validators import (
    DuplicateTracker,
    find_agent_fuzzy,
    generate_validation_report,
    validate_amounts,
)

logger = logging.getLogger(__name__)

REVIEW_COLUMNS = [
    'Source Lines', 'Client Name', 'Yacht', 'Event Date', 'Type', 'Agent', 'Status',
    'Packages', 'Transaction ID', 'Booking Ref No', 'Total Amount', 'Commission %',
    'Commission Amount', 'Net Amount', 'Paid Amount', 'Balance Amount', 'Other Charge',
    'Notes', 'Flagged',
]


class ImportCancelledError(RuntimeError):
    """Raised when the caller cancels a run between row-processing steps."""


class BookingImportProcessor:
    """
    Main processor turning one tokenized export file into candidate bookings.
    """

    def __init__(self, table, reference, source=None, current_actor_id=None,
                 now=None, cancel_event=None):
        """
        Initialize processor with data.

        Args:
            table: ImportTable from the data loader
            reference: ReferenceData snapshot (agents, yachts, existing bookings)
            source: ImportSource or its name, None to auto-detect from headers
            current_actor_id: Id of the user running the import
            now: Clock value for missing dates (defaults to the current time)
            cancel_event: Optional threading.Event checked between rows
        """
        self.table = table
        self.reference = reference
        self.requested_source = source
        self.current_actor_id = current_actor_id
        self.cancel_event = cancel_event

        self.context = ConversionContext(
            agent_map=reference.agent_map,
            yacht_map=reference.yacht_map,
            user_map=reference.users,
            current_actor_id=current_actor_id,
            now=now,
        )
        self.allocator = TransactionIdAllocator(reference.bookings)
        self.duplicates = DuplicateTracker(reference.bookings)

        self.source = None
        self.field_map = []
        self.diagnostics = list(table.diagnostics)
        self.skipped_rows = table.skipped_rows
        self.validation_results = OrderedDict()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self):
        """
        Run the complete import workflow.

        Returns:
            ImportResult: Candidates, skipped row count and diagnostics

        Raises:
            ImportCancelledError: If the cancel event is set during the run
        """
        logger.info("=" * 60)
        logger.info("Starting booking import")
        logger.info("=" * 60)

        self._check_cancelled()

        self.source = resolve_source(self.requested_source, self.table.headers)
        classifier = get_classifier(self.source)
        logger.info(f"Import source: {self.source.value} ({type(classifier).__name__})")

        self.field_map = self._map_headers(self.table.headers)

        parsed_rows = []
        for raw in self.table.rows:
            self._check_cancelled()
            row = self._parse_row(raw)
            classifier.process_row(row, self.reference)
            parsed_rows.append(row)

        logger.info(f"Parsed and classified {len(parsed_rows)} rows")

        groups = self._group_rows(parsed_rows)
        logger.info(f"Grouped into {len(groups)} bookings")

        # Ids already present in the file must never be handed out again
        for row in parsed_rows:
            self.allocator.observe(row.transaction_id)

        candidates = []
        for group in groups:
            self._check_cancelled()
            candidate = self._build_candidate(group)
            if candidate is not None:
                candidates.append(candidate)

        flagged = sum(1 for c in candidates if c.is_flagged)
        logger.info(f"Import complete: {len(candidates)} candidates ({flagged} flagged), "
                    f"{self.skipped_rows} rows skipped")

        return ImportResult(
            candidates=candidates,
            skipped_rows=self.skipped_rows,
            source=self.source.value,
            diagnostics=self.diagnostics,
        )

    def validation_report(self):
        """Batch report of the amount checks performed during process()."""
        overall = []
        if not self.reference.agents:
            overall.append('No agents found in the system')
        if not self.reference.yachts:
            overall.append('No yachts found in the system')
        return generate_validation_report(self.validation_results, overall)

    # ------------------------------------------------------------------
    # Row parsing
    # ------------------------------------------------------------------

    def _check_cancelled(self):
        if self.cancel_event is not None and self.cancel_event.is_set():
            logger.warning("Import cancelled by caller")
            raise ImportCancelledError("Booking import was cancelled")

    def _map_headers(self, headers):
        field_map = [lookup_field(h) if h else None for h in headers]
        unmapped = [h for h, f in zip(headers, field_map) if f is None and h]
        if unmapped:
            logger.info(f"Ignoring unmapped columns: {unmapped}")
        return field_map

    def _parse_row(self, raw):
        """Convert one RawRow into a ParsedRow."""
        row = ParsedRow(raw.line_number)
        warnings_before = len(self.context.warnings)

        for field, cell in zip(self.field_map, raw.cells):
            if field is None:
                continue

            blank = cell.strip() == ''
            if blank and field in row.fields and row.fields[field] not in (None, ''):
                continue

            if field == 'yacht' and not blank:
                row.raw_yacht_text = cell.strip()
            if field == 'paid_amount' and not blank:
                row.paid_declared = True

            row.set_field(field, convert_value(field, cell, self.context))

        for message in self.context.warnings[warnings_before:]:
            row.warn(f"Line {raw.line_number}: {message}")

        return row

    # ------------------------------------------------------------------
    # Grouping and aggregation
    # ------------------------------------------------------------------

    def _group_rows(self, rows):
        """
        Group rows sharing a booking reference, in first-appearance order.

        Rows without a reference stay single.
        """
        groups = OrderedDict()
        for row in rows:
            key = row.booking_ref_no or f"__line_{row.line_number}"
            groups.setdefault(key, []).append(row)
        return list(groups.values())

    def _first_value(self, group, field):
        for row in group:
            value = row.get(field)
            if value not in (None, ''):
                return value
        return None

    def _build_candidate(self, group):
        """
        Aggregate one group into a CandidateBooking.

        Returns:
            CandidateBooking or None when the group lacks a client name or yacht
        """
        first = group[0]
        lines_label = ', '.join(str(r.line_number) for r in group)
        diagnostics = [message for row in group for message in row.diagnostics]

        client_name = next((r.client_name for r in group if r.client_name), '')
        yacht_ref = first.yacht

        if not client_name or not yacht_ref:
            missing = 'client name' if not client_name else 'yacht'
            message = f"Line {lines_label}: skipping booking without {missing}"
            logger.warning(f"[CSV Import] {message}")
            self.diagnostics.extend(diagnostics)
            self.diagnostics.append(message)
            self.skipped_rows += len(group)
            return None

        buckets = {}
        for row in group:
            for bucket, quantity in row.bucket_counts().items():
                buckets[bucket] = buckets.get(bucket, 0) + quantity

        paid_total = sum(float(r.get('paid_amount') or 0) for r in group)

        transaction_ids = []
        for row in group:
            if row.transaction_id and row.transaction_id not in transaction_ids:
                transaction_ids.append(row.transaction_id)

        event_date = self._first_value(group, 'event_date') or self.context.current_time()

        lines, resolution_warnings = self._resolve_lines(group, buckets, yacht_ref)
        for warning in resolution_warnings:
            logger.warning(f"[CSV Import] Line {lines_label}: {warning}")
            diagnostics.append(f"Line {lines_label}: {warning}")

        agent_ref = self._first_value(group, 'agent') or ''
        agent = find_agent_fuzzy(agent_ref, self.reference.agents)
        discount = agent.discount_percentage if agent else 0.0

        status = self._first_value(group, 'status') or ENUM_DEFAULTS['status'][0]
        financials = compute_financials(lines, discount, status, paid_total)

        if transaction_ids:
            transaction_id = transaction_ids[0]
        else:
            transaction_id = self.allocator.allocate(event_date.year)

        other_charges = [r.get('other_charge') for r in group if r.get('other_charge') is not None]
        notes = []
        for row in group:
            note = str(row.get('notes') or '').strip()
            if note and note not in notes:
                notes.append(note)

        candidate = CandidateBooking(
            client_name=client_name,
            yacht=yacht_ref,
            event_date=event_date,
            type=self._first_value(group, 'type') or ENUM_DEFAULTS['type'][0],
            agent=agent_ref,
            status=status,
            payment_confirmation_status=(self._first_value(group, 'payment_confirmation_status')
                                         or ENUM_DEFAULTS['payment_confirmation_status'][0]),
            mode_of_payment=self._first_value(group, 'mode_of_payment') or ENUM_DEFAULTS['mode_of_payment'][0],
            packages=lines,
            free_guest_count=sum(float(r.get('free_guest_count') or 0) for r in group),
            transaction_id=transaction_id,
            booking_ref_no=first.booking_ref_no,
            total_amount=financials.total_amount,
            commission_percentage=financials.commission_percentage,
            commission_amount=financials.commission_amount,
            net_amount=financials.net_amount,
            paid_amount=financials.paid_amount,
            balance_amount=financials.balance_amount,
            other_charge=sum(other_charges) if other_charges else None,
            notes='\n'.join(notes),
            created_at=self._first_value(group, 'created_at') or self.context.current_time(),
            owner_user_id=self._first_value(group, 'owner_user_id') or self.current_actor_id,
            last_modified_by_user_id=(self._first_value(group, 'last_modified_by_user_id')
                                      or self.current_actor_id),
            customer_phone=self._first_value(group, 'customer_phone') or '',
            source_lines=[r.line_number for r in group],
            diagnostics=diagnostics,
        )

        candidate.append_note(NOTE_MERGED_TICKETS, transaction_ids[1:])

        alerts = self.duplicates.check_and_register(client_name, candidate.booking_ref_no, transaction_id)
        candidate.append_note(NOTE_DUPLICATE_ALERT, alerts)

        if any(r.paid_declared for r in group):
            self._validate_amounts(candidate, group)

        self.diagnostics.extend(candidate.diagnostics)
        logger.debug(f"Line {lines_label}: candidate '{client_name}' {transaction_id}, "
                     f"total {candidate.total_amount:.2f}, balance {candidate.balance_amount:.2f}")
        return candidate

    def _resolve_lines(self, group, buckets, yacht_ref):
        """Resolve bucket counts and explicit package details for the group's yacht."""
        yacht = self.reference.find_yacht(yacht_ref)
        if yacht is None:
            dropped = ', '.join(f"{PACKAGE_BUCKET_LABELS[b]} x{q}" for b, q in buckets.items())
            if dropped:
                return [], [f"Yacht '{yacht_ref}' is not in the system, dropping packages: {dropped}"]
            return [], []

        lines, warnings = resolve_bucket_lines(buckets, yacht)

        for row in group:
            details = row.get('package_details')
            if not details:
                continue
            explicit, explicit_warnings = resolve_explicit_lines(details, yacht)
            warnings.extend(explicit_warnings)
            for line in explicit:
                existing = next((known for known in lines if known.package_id == line.package_id), None)
                if existing:
                    existing.quantity += line.quantity
                else:
                    lines.append(line)

        return lines, warnings

    def _validate_amounts(self, candidate, group):
        totals = [float(r.get('total_amount') or 0) for r in group]
        declared_total = sum(totals) if any(totals) else None

        result = validate_amounts(candidate, self.reference, declared_total)
        self.validation_results[candidate.source_lines[0]] = result

        if not result.is_valid:
            candidate.append_note(NOTE_VALIDATION_WARNING, result.errors)
            for error in result.errors:
                logger.warning(f"[CSV Import] Line {candidate.source_lines[0]}: {error}")
        for warning in result.warnings:
            candidate.diagnostics.append(f"Line {candidate.source_lines[0]}: {warning}")


def process_import_text(text, reference, **kwargs):
    """Tokenize export text and run the processor over it."""
    return BookingImportProcessor(parse_import_text(text), reference, **kwargs).process()


def process_import_file(filepath, reference, **kwargs):
    """
    Load an export file and run the processor over it.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or has no data rows
    """
    return BookingImportProcessor(load_import_file(filepath), reference, **kwargs).process()


def candidates_to_dataframe(candidates):
    """
    Flatten candidate bookings into a review DataFrame.

    Returns:
        DataFrame: One row per candidate, package lines joined as text
    """
    records = []
    for c in candidates:
        records.append({
            'Source Lines': ', '.join(str(n) for n in c.source_lines),
            'Client Name': c.client_name,
            'Yacht': c.yacht,
            'Event Date': c.event_date.strftime('%d-%m-%Y') if c.event_date else '',
            'Type': c.type,
            'Agent': c.agent,
            'Status': c.status,
            'Packages': '; '.join(f"{line.package_name} x{line.quantity} @ {line.rate:.2f}" for line in c.packages),
            'Transaction ID': c.transaction_id,
            'Booking Ref No': c.booking_ref_no,
            'Total Amount': c.total_amount,
            'Commission %': c.commission_percentage,
            'Commission Amount': c.commission_amount,
            'Net Amount': c.net_amount,
            'Paid Amount': c.paid_amount,
            'Balance Amount': c.balance_amount,
            'Other Charge': c.other_charge,
            'Notes': c.notes,
            'Flagged': 'YES' if c.is_flagged else '',
        })
    return pd.DataFrame(records, columns=REVIEW_COLUMNS)
