"""
Data records flowing through the booking import pipeline.

Reference data (agents, yachts, existing bookings) is read-only for the
duration of a batch. RawRow and ParsedRow are working records; the
pipeline's output unit is CandidateBooking.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from booking_import.config import MASTER_COLUMN_PREFIX, PACKAGE_BUCKETS, PACKAGE_PREFIX


# =======================
# REFERENCE DATA
# =======================

@dataclass(frozen=True)
class Agent:
    id: str
    name: str
    discount_percentage: float = 0.0


@dataclass(frozen=True)
class PackageCatalogEntry:
    package_id: str
    name: str
    rate: float


@dataclass(frozen=True)
class Yacht:
    id: str
    name: str
    category: str = ''
    packages: tuple[PackageCatalogEntry, ...] = ()


@dataclass(frozen=True)
class ExistingBooking:
    """A booking already persisted by the reservation system."""
    id: str
    client_name: str = ''
    booking_ref_no: str = ''
    transaction_id: str = ''
    month: str = ''
    packages: tuple[dict, ...] = ()
    paid_amount: float = 0.0


@dataclass(frozen=True)
class ReferenceData:
    """Snapshot of the reservation system taken once before a run."""
    agents: tuple[Agent, ...] = ()
    yachts: tuple[Yacht, ...] = ()
    bookings: tuple[ExistingBooking, ...] = ()
    users: dict = field(default_factory=dict)  # user id -> display name

    @property
    def agent_map(self) -> dict[str, str]:
        return {a.id: a.name for a in self.agents}

    @property
    def yacht_map(self) -> dict[str, str]:
        return {y.id: y.name for y in self.yachts}

    def find_agent(self, agent_ref: str) -> Optional[Agent]:
        """Find an agent by id or exact case-insensitive name."""
        if not agent_ref:
            return None
        wanted = agent_ref.strip().lower()
        for agent in self.agents:
            if agent.id == agent_ref or agent.name.strip().lower() == wanted:
                return agent
        return None

    def find_yacht(self, yacht_ref: str) -> Optional[Yacht]:
        """Find a yacht by id or exact case-insensitive name."""
        if not yacht_ref:
            return None
        wanted = str(yacht_ref).strip().lower()
        for yacht in self.yachts:
            if yacht.id == yacht_ref or yacht.name.strip().lower() == wanted:
                return yacht
        return None


# =======================
# WORKING RECORDS
# =======================

@dataclass(frozen=True)
class RawRow:
    """Tokenized cells of one source line (1-based line number)."""
    line_number: int
    cells: tuple[str, ...]


class ParsedRow:
    """
    Mutable builder for one source row (or one aggregated group).

    Scalar canonical fields are set through named setters; package counts
    live in a bucket Counter keyed by bucket name without the ``pkg_`` prefix.
    """

    def __init__(self, line_number: int):
        self.line_number = line_number
        self.fields: dict[str, Any] = {}
        self.buckets: Counter = Counter()
        self.master_columns: dict[str, int] = {}
        self.raw_yacht_text = ''
        self.paid_declared = False
        self.diagnostics: list[str] = []

    # --- generic access -------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def set_field(self, name: str, value: Any) -> None:
        """Route a converted canonical field into the right slot."""
        if name.startswith(PACKAGE_PREFIX):
            self.add_to_bucket(name[len(PACKAGE_PREFIX):], value or 0)
        elif name.startswith(MASTER_COLUMN_PREFIX):
            self.master_columns[name] = int(value or 0)
        else:
            self.fields[name] = value

    # --- named setters ---------------------------------------------------

    def set_client_name(self, name: str) -> None:
        self.fields['client_name'] = name

    def set_yacht(self, yacht: str) -> None:
        self.fields['yacht'] = yacht

    def set_paid_amount(self, amount: float) -> None:
        self.fields['paid_amount'] = amount

    def set_transaction_id(self, transaction_id: str) -> None:
        self.fields['transaction_id'] = transaction_id

    def add_to_bucket(self, bucket: str, quantity: int) -> None:
        if bucket not in PACKAGE_BUCKETS:
            raise KeyError(f"Unknown package bucket: {bucket}")
        if quantity > 0:
            self.buckets[bucket] += int(quantity)

    def take_bucket(self, bucket: str) -> int:
        """Remove a bucket and return its count."""
        return self.buckets.pop(bucket, 0)

    def clear_buckets(self) -> None:
        self.buckets.clear()

    def warn(self, message: str) -> None:
        self.diagnostics.append(message)

    # --- read helpers ----------------------------------------------------

    @property
    def client_name(self) -> str:
        return self.fields.get('client_name') or ''

    @property
    def yacht(self) -> str:
        return self.fields.get('yacht') or ''

    @property
    def booking_ref_no(self) -> str:
        return (self.fields.get('booking_ref_no') or '').strip()

    @property
    def transaction_id(self) -> str:
        return (self.fields.get('transaction_id') or '').strip()

    def bucket_counts(self) -> dict[str, int]:
        return {k: v for k, v in self.buckets.items() if v > 0}


# =======================
# OUTPUT RECORDS
# =======================

@dataclass
class PackageQuantityLine:
    package_id: str
    package_name: str
    quantity: int
    rate: float

    @property
    def amount(self) -> float:
        return self.quantity * self.rate


@dataclass
class CandidateBooking:
    """Fully computed booking awaiting human review and persistence."""
    client_name: str
    yacht: str
    event_date: datetime
    type: str
    agent: str = ''
    status: str = 'Confirmed'
    payment_confirmation_status: str = 'CONFIRMED'
    mode_of_payment: str = 'CARD'
    packages: list[PackageQuantityLine] = field(default_factory=list)
    free_guest_count: float = 0
    transaction_id: str = ''
    booking_ref_no: str = ''
    total_amount: float = 0.0
    commission_percentage: float = 0.0
    commission_amount: float = 0.0
    net_amount: float = 0.0
    paid_amount: float = 0.0
    balance_amount: float = 0.0
    other_charge: Optional[float] = None
    notes: str = ''
    created_at: Optional[datetime] = None
    owner_user_id: Optional[str] = None
    last_modified_by_user_id: Optional[str] = None
    customer_phone: str = ''
    source_lines: list[int] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    def append_note(self, block: str, entries: list[str]) -> None:
        """Append a structured ``[BLOCK]: a; b`` section to the notes."""
        if not entries:
            return
        section = f"{block}: {'; '.join(entries)}"
        self.notes = f"{self.notes}\n{section}" if self.notes else section

    @property
    def is_flagged(self) -> bool:
        return '[DUPLICATE ALERT]' in self.notes or '[VALIDATION WARNING]' in self.notes

    def to_dict(self) -> dict:
        """Payload for the create-booking collaborator."""
        return {
            'clientName': self.client_name,
            'agent': self.agent,
            'yacht': self.yacht,
            'status': self.status,
            'month': self.event_date.isoformat() if self.event_date else None,
            'type': self.type,
            'paymentConfirmationStatus': self.payment_confirmation_status,
            'modeOfPayment': self.mode_of_payment,
            'packageQuantities': [
                {
                    'packageId': line.package_id,
                    'packageName': line.package_name,
                    'quantity': line.quantity,
                    'rate': line.rate,
                }
                for line in self.packages
            ],
            'freeGuestCount': self.free_guest_count,
            'transactionId': self.transaction_id,
            'bookingRefNo': self.booking_ref_no,
            'perTicketRate': self.other_charge,
            'totalAmount': self.total_amount,
            'commissionPercentage': self.commission_percentage,
            'commissionAmount': self.commission_amount,
            'netAmount': self.net_amount,
            'paidAmount': self.paid_amount,
            'balanceAmount': self.balance_amount,
            'notes': self.notes,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'ownerUserId': self.owner_user_id,
            'lastModifiedByUserId': self.last_modified_by_user_id,
            'customerPhone': self.customer_phone,
        }


@dataclass
class ImportResult:
    """Output of one pipeline run."""
    candidates: list[CandidateBooking] = field(default_factory=list)
    skipped_rows: int = 0
    source: str = ''
    diagnostics: list[str] = field(default_factory=list)
