"""
PeerDrop session.

Integrates the outbound queue, the transfer executor, the inbound classifier
and the clipboard exporter around one channel, and exposes the state and
entry points a user interface works with.
"""

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from common.constants import ConnectionStatus
from peer.clipboard.exporter import ClipboardExporter, ExportOutcome, IMAGE_NOTICES
from peer.inbound.blob_store import BlobStore
from peer.inbound.frame_classifier import FrameClassifier
from peer.inbound.ledger import Ledger, ReceivedFileRecord, ReceivedTextRecord
from peer.outbound.outbound_queue import OutboundQueue, OutboundItem, FileHandle
from peer.outbound.transfer_executor import TransferExecutor, TransferResult, TransferState
from peer.utils.config import PeerConfig
from peer.utils.logger import logger

# Change events passed to subscribers
EVENT_QUEUE = 'queue'
EVENT_PROGRESS = 'progress'
EVENT_FILES = 'files'
EVENT_TEXTS = 'texts'
EVENT_NOTICE = 'notice'


class TransferSession:
    """State and entry points for one peer link."""

    def __init__(self, channel, config: Optional[PeerConfig] = None, clipboard_backend=None,
                 notifier: Optional[Callable[[str, bool], None]] = None):
        self.config = config or PeerConfig()
        self.channel = channel
        self.notifier = notifier
        self._subscribers: List[Callable[[str, 'TransferSession'], None]] = []

        # Outbound
        self.queue = OutboundQueue()
        self.executor = TransferExecutor(self.queue, channel)

        # Inbound
        self.blobs = BlobStore()
        self.file_ledger: Ledger = Ledger(self.config.max_received_files, on_evict=self._release_file)
        self.text_ledger: Ledger = Ledger(self.config.max_received_texts)
        self.classifier = FrameClassifier(self.blobs, self.file_ledger, self.text_ledger,
                                          self.config.timestamp_format)

        self.exporter = ClipboardExporter(self.blobs, clipboard_backend)

        self._setup_modules()

    def _setup_modules(self):
        """Set up connections between modules."""
        self.executor.on_notice = self._notice
        self.executor.on_progress = self._on_progress
        self.exporter.on_notice = self._notice
        self.classifier.on_record = self._on_record
        self.channel.on_frame(self.classifier.on_frame)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[str, 'TransferSession'], None]) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _emit(self, event: str):
        for callback in list(self._subscribers):
            callback(event, self)

    def _notice(self, message: str, is_error: bool = False):
        if self.notifier:
            self.notifier(message, is_error)
        self._emit(EVENT_NOTICE)

    def _on_progress(self, state: TransferState):
        self._emit(EVENT_PROGRESS)

    def _on_record(self, record):
        self._emit(EVENT_FILES if isinstance(record, ReceivedFileRecord) else EVENT_TEXTS)

    def _release_file(self, record: ReceivedFileRecord):
        self.blobs.release(record.published_reference)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def connection_status(self) -> str:
        return self.channel.connection_status

    @property
    def is_connected(self) -> bool:
        return self.connection_status == ConnectionStatus.CONNECTED

    @property
    def queued(self) -> Tuple[OutboundItem, ...]:
        return self.queue.drain_snapshot()

    @property
    def progress(self) -> float:
        return self.executor.progress

    @property
    def in_flight(self) -> bool:
        return self.executor.in_flight

    @property
    def received_files(self) -> Tuple[ReceivedFileRecord, ...]:
        return self.file_ledger.records

    @property
    def received_texts(self) -> Tuple[ReceivedTextRecord, ...]:
        return self.text_ledger.records

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def enqueue_files(self, handles: Iterable[FileHandle]) -> List[OutboundItem]:
        added = self.queue.enqueue(handles)
        if added:
            logger.log_files_queued(len(added), len(self.queue))
            self._emit(EVENT_QUEUE)
        return added

    def remove_queued(self, identifier: str):
        before = len(self.queue)
        self.queue.remove(identifier)
        if len(self.queue) != before:
            self._emit(EVENT_QUEUE)

    async def start_transfer(self) -> TransferResult:
        before = len(self.queue)
        result = await self.executor.start()
        if len(self.queue) != before:
            self._emit(EVENT_QUEUE)
        return result

    async def send_text(self, content: str) -> bool:
        """Send trimmed text; blank input is not sent."""
        text = content.strip()
        if not text:
            return False
        return await self.executor.send_text(text)

    def _file_record(self, reference: str) -> Optional[ReceivedFileRecord]:
        for record in self.file_ledger:
            if record.published_reference == reference:
                return record
        return None

    async def export_image(self, reference: str, display_name: str) -> ExportOutcome:
        """Copy a received image; received files that are not images are refused."""
        record = self._file_record(reference)
        if record is not None and not record.is_image:
            logger.warning(f"[CLIPBOARD] {display_name} is not an image ({record.content_type})")
            message, is_error = IMAGE_NOTICES[ExportOutcome.FAILED]
            self._notice(message, is_error)
            return ExportOutcome.FAILED
        return await self.exporter.export_image(reference, display_name)

    def open_file(self, record: ReceivedFileRecord) -> bool:
        """Open a received file in the desktop viewer."""
        opened = self.exporter.open_in_viewer(record.published_reference, record.name)
        if not opened:
            self._notice(f"Could not open {record.name}, please download it instead", True)
        return opened

    async def export_text(self, content: str) -> ExportOutcome:
        return await self.exporter.export_text(content)

    def save_file(self, record: ReceivedFileRecord, directory: Optional[str] = None) -> Path:
        """Write a received file to disk (default: the download directory)."""
        path = self.blobs.save(record.published_reference, directory or self.config.download_dir, record.name)
        logger.info(f"[RECV] Saved {record.name} to {path}")
        return path

    async def close(self):
        """Close the channel and release every received file."""
        await self.channel.close()
        self.file_ledger.clear()
        self.text_ledger.clear()
        self.blobs.release_all()
        self._emit(EVENT_FILES)
        self._emit(EVENT_TEXTS)
