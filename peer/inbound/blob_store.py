"""
Blob store module.

Owns the binary objects behind received files. Each object is published under
a reference string that stays valid until it is released.
"""

import asyncio
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from common.constants import BLOB_REFERENCE_SCHEME, DEFAULT_CONTENT_TYPE
from peer.errors import BlobNotFound
from peer.utils.logger import logger


@dataclass(frozen=True)
class Blob:
    """An in-memory binary object tagged with its content type."""
    data: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.data)


class BlobStore:
    """Table of published binary objects keyed by reference."""

    def __init__(self):
        self._blobs: Dict[str, Blob] = {}
        self._spilled: Dict[str, List[Path]] = {}

    def __len__(self) -> int:
        return len(self._blobs)

    def __contains__(self, reference: str) -> bool:
        return reference in self._blobs

    def publish(self, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> str:
        """Store data and return the reference that resolves to it."""
        reference = f"{BLOB_REFERENCE_SCHEME}:{uuid.uuid4()}"
        self._blobs[reference] = Blob(bytes(data), content_type or DEFAULT_CONTENT_TYPE)
        return reference

    def resolve(self, reference: str) -> Blob:
        try:
            return self._blobs[reference]
        except KeyError:
            raise BlobNotFound(reference) from None

    async def fetch(self, reference: str) -> bytes:
        """Bytes behind a reference; raises BlobNotFound once released."""
        await asyncio.sleep(0)
        return self.resolve(reference).data

    def save(self, reference: str, directory, filename: str) -> Path:
        """
        Write the blob into directory under filename.

        An existing file is never overwritten; a ' (n)' suffix is added
        instead. Only the base name of filename is used.
        """
        blob = self.resolve(reference)
        safe_name = os.path.basename(filename)
        if not safe_name or safe_name in ('.', '..') or '\x00' in safe_name:
            safe_name = reference.split(':', 1)[-1]

        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = _unique_path(target_dir / safe_name)
        target.write_bytes(blob.data)
        return target

    def spill(self, reference: str, directory, filename: str) -> Path:
        """Save a copy for an external viewer; it is deleted on release."""
        path = self.save(reference, directory, filename)
        self._spilled.setdefault(reference, []).append(path)
        return path

    def release(self, reference: str) -> bool:
        """Drop a blob and any viewer copies. Returns False if it was unknown."""
        blob = self._blobs.pop(reference, None)
        for path in self._spilled.pop(reference, []):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove viewer copy {path}: {e}")
        return blob is not None

    def release_all(self):
        for reference in list(self._blobs):
            self.release(reference)


def _unique_path(path: Path) -> Path:
    """Get a path that does not exist yet by appending ' (n)' to the stem."""
    if not path.exists():
        return path

    counter = 1
    candidate = path
    while candidate.exists():
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        counter += 1
    return candidate
