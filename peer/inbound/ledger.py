"""
Received-item ledgers.

A ledger is the ordered list of records received during the session. Records
are only ever appended; when a capacity is set the oldest record is evicted
to make room, and the eviction callback lets the owner release whatever the
record holds.
"""

import uuid
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Tuple, TypeVar


@dataclass(frozen=True)
class ReceivedFileRecord:
    name: str
    size: int
    published_reference: str
    content_type: str
    identifier: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith('image/')


@dataclass(frozen=True)
class ReceivedTextRecord:
    content: str
    timestamp: str
    identifier: str = field(default_factory=lambda: uuid.uuid4().hex)
    sent_at: str = ''


RecordT = TypeVar('RecordT', ReceivedFileRecord, ReceivedTextRecord)


class Ledger(Generic[RecordT]):
    """Append-only ordered records with an optional capacity."""

    def __init__(self, max_size: Optional[int] = None,
                 on_evict: Optional[Callable[[RecordT], None]] = None):
        self._records: List[RecordT] = []
        self._max_size = max_size
        self._on_evict = on_evict

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self.records)

    def __getitem__(self, index: int) -> RecordT:
        return self._records[index]

    @property
    def records(self) -> Tuple[RecordT, ...]:
        return tuple(self._records)

    def get(self, identifier: str) -> Optional[RecordT]:
        for record in self._records:
            if record.identifier == identifier:
                return record
        return None

    def append(self, record: RecordT) -> Tuple[RecordT, ...]:
        """Append a record and return the new ordered snapshot."""
        if self.get(record.identifier) is not None:
            raise ValueError(f"duplicate record identifier {record.identifier}")
        if self._max_size:
            while len(self._records) >= self._max_size:
                self._evict(self._records[0])
        self._records.append(record)
        return self.records

    def _evict(self, record: RecordT):
        self._records.remove(record)
        if self._on_evict:
            self._on_evict(record)

    def clear(self):
        """Evict every record, oldest first."""
        while self._records:
            self._evict(self._records[0])
