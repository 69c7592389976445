"""
Transaction Ledger Module

Append-only, per-account log of textual transaction records. Entries are
SHA-256 hash-chained to their predecessor so that any rewrite of history
can be detected.
"""

import hashlib
import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple


class LedgerEventType(Enum):
    """Types of ledger events"""
    ACCOUNT_CREATED = "account_created"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    BALANCE_INQUIRY = "balance_inquiry"
    PASSWORD_CHANGED = "password_changed"
    PIN_CHANGED = "pin_changed"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    ACCOUNT_LOCKED = "account_locked"
    INTEREST_APPLIED = "interest_applied"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(timestamp: datetime) -> str:
    """Timestamp as it appears inside ledger messages"""
    return timestamp.isoformat(timespec="seconds")


@dataclass(frozen=True)
class LedgerEntry:
    """
    Immutable ledger record with hash chaining for tamper detection
    """
    sequence: int
    event_type: LedgerEventType
    message: str
    timestamp: datetime
    amount: Optional[Decimal] = None
    previous_hash: str = ""
    current_hash: str = ""

    def calculate_hash(self) -> str:
        """
        Calculate SHA-256 hash of this entry
        Hash includes all fields except current_hash
        """
        hash_data = {
            'sequence': self.sequence,
            'event_type': self.event_type.value,
            'message': self.message,
            'timestamp': self.timestamp.isoformat(),
            'amount': str(self.amount) if self.amount is not None else None,
            'previous_hash': self.previous_hash,
        }
        json_data = json.dumps(hash_data, sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(json_data.encode('utf-8')).hexdigest()

    def verify_hash(self) -> bool:
        return self.current_hash == self.calculate_hash()

    def __str__(self) -> str:
        return self.message


class TransactionLedger:
    """
    Ordered, append-only sequence of ledger entries for one account
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._entries: List[LedgerEntry] = []
        self._clock = clock or _utc_now

    def now(self) -> datetime:
        """Current time according to the ledger's clock"""
        return self._clock()

    def record(
        self,
        event_type: LedgerEventType,
        message: str,
        amount: Optional[Decimal] = None,
        timestamp: Optional[datetime] = None
    ) -> LedgerEntry:
        """
        Append an entry to the ledger

        Args:
            event_type: Kind of event being recorded
            message: Textual record shown in transaction history
            amount: Monetary amount involved, if any
            timestamp: Event time (defaults to the ledger clock)

        Returns:
            The appended LedgerEntry
        """
        previous_hash = self._entries[-1].current_hash if self._entries else ""
        entry = LedgerEntry(
            sequence=len(self._entries) + 1,
            event_type=event_type,
            message=message,
            timestamp=timestamp or self.now(),
            amount=amount,
            previous_hash=previous_hash,
        )
        entry = replace(entry, current_hash=entry.calculate_hash())
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> Tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def messages(self) -> List[str]:
        return [entry.message for entry in self._entries]

    def last(self, n: int) -> List[LedgerEntry]:
        """Most recent min(n, size) entries, oldest first"""
        if n <= 0:
            return []
        return self._entries[-n:]

    def of_type(self, event_type: LedgerEventType) -> List[LedgerEntry]:
        return [entry for entry in self._entries if entry.event_type == event_type]

    def verify_integrity(self) -> bool:
        """Check every entry's hash and its link to the previous entry"""
        previous_hash = ""
        for expected_sequence, entry in enumerate(self._entries, start=1):
            if entry.sequence != expected_sequence:
                return False
            if entry.previous_hash != previous_hash or not entry.verify_hash():
                return False
            previous_hash = entry.current_hash
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(list(self._entries))


@dataclass
class TransactionHistory:
    """Projection of the most recent ledger entries"""
    requested: int
    entries: List[LedgerEntry] = field(default_factory=list)
    ledger_size: int = 0

    @property
    def is_empty(self) -> bool:
        """True when the account has no ledger entries at all"""
        return self.ledger_size == 0

    def messages(self) -> List[str]:
        return [entry.message for entry in self.entries]

    def lines(self) -> List[str]:
        lines = [f"=== Last {self.requested} Transactions ==="]
        if self.is_empty:
            lines.append("No transactions yet.")
        else:
            lines.extend(self.messages())
        return lines
