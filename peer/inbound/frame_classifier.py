"""
Inbound frame classifier.

Turns frames arriving from the channel into file and text records.
"""

from typing import Any, Callable, Dict, Optional, Union

from common.constants import TIMESTAMP_DISPLAY_FORMAT
from common.protocol_definitions import FileFrame, TextFrame, FrameDecodeError, parse_frame
from peer.inbound.blob_store import BlobStore
from peer.inbound.ledger import Ledger, ReceivedFileRecord, ReceivedTextRecord
from peer.utils.formatting import format_file_size, format_timestamp
from peer.utils.logger import logger

ReceivedRecord = Union[ReceivedFileRecord, ReceivedTextRecord]


class FrameClassifier:
    """Sorts inbound frames into the file and text ledgers."""

    def __init__(self, blobs: BlobStore,
                 files: Optional[Ledger] = None,
                 texts: Optional[Ledger] = None,
                 timestamp_format: str = TIMESTAMP_DISPLAY_FORMAT):
        self.blobs = blobs
        self.files = files if files is not None else Ledger(on_evict=self._release_record)
        self.texts = texts if texts is not None else Ledger()
        self.timestamp_format = timestamp_format
        self.on_record: Optional[Callable[[ReceivedRecord], None]] = None

    def _release_record(self, record: ReceivedFileRecord):
        self.blobs.release(record.published_reference)

    def on_frame(self, message: Dict[str, Any]) -> Optional[ReceivedRecord]:
        """
        Classify one inbound frame.

        Unknown kinds and malformed frames are dropped without raising.
        Returns the record that was appended, or None.
        """
        if not isinstance(message, dict):
            logger.log_frame_ignored(f"expected an object, got {type(message).__name__}")
            return None

        try:
            frame = parse_frame(message)
        except FrameDecodeError as e:
            logger.log_frame_ignored(str(e))
            return None

        if isinstance(frame, FileFrame):
            record = self._accept_file(frame)
        elif isinstance(frame, TextFrame):
            record = self._accept_text(frame)
        else:
            logger.debug(f"[RECV] Unknown frame kind {message.get('kind')!r}")
            return None

        if self.on_record:
            self.on_record(record)
        return record

    def _accept_file(self, frame: FileFrame) -> ReceivedFileRecord:
        reference = self.blobs.publish(frame.payload, frame.content_type)
        record = ReceivedFileRecord(
            name=frame.name,
            size=frame.size,
            published_reference=reference,
            content_type=frame.content_type
        )
        self.files.append(record)
        logger.log_frame_received("file", f"{record.name} ({format_file_size(record.size)}, {record.content_type})")
        return record

    def _accept_text(self, frame: TextFrame) -> ReceivedTextRecord:
        record = ReceivedTextRecord(
            content=frame.content,
            timestamp=format_timestamp(frame.timestamp, self.timestamp_format),
            sent_at=frame.timestamp
        )
        self.texts.append(record)
        logger.log_frame_received("text", f"{len(record.content)} chars sent {record.timestamp}")
        return record
