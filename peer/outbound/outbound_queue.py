"""
Outbound queue module.

Ordered collection of files picked by the user and waiting to be sent.
"""

import mimetypes
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from common.constants import DEFAULT_CONTENT_TYPE

FileHandle = Union[str, os.PathLike]


@dataclass(frozen=True)
class OutboundItem:
    """A queued file handle plus the identifier it was given at enqueue time."""
    raw_content: Path
    identifier: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def name(self) -> str:
        return self.raw_content.name

    @property
    def content_type(self) -> str:
        guessed, _ = mimetypes.guess_type(self.raw_content.name)
        return guessed or DEFAULT_CONTENT_TYPE


class OutboundQueue:
    """Pending send items, in enqueue order."""

    def __init__(self):
        self._items: List[OutboundItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, identifier: str) -> bool:
        return any(item.identifier == identifier for item in self._items)

    def enqueue(self, handles: Iterable[FileHandle]) -> List[OutboundItem]:
        """Append each handle under a fresh identifier; duplicates are allowed."""
        added = [OutboundItem(raw_content=Path(handle)) for handle in handles]
        self._items.extend(added)
        return added

    def remove(self, identifier: str):
        """Remove the entry with this identifier, if any."""
        self._items = [item for item in self._items if item.identifier != identifier]

    def drain_snapshot(self) -> Tuple[OutboundItem, ...]:
        """Current contents, without clearing them."""
        return tuple(self._items)

    def clear(self):
        self._items = []
