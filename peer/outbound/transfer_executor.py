"""
Transfer executor module.

Drains the outbound queue one file at a time over the channel, keeps the
progress counters, and stops at the first failure.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Callable

from common.protocol_definitions import create_file_frame, create_text_frame
from peer.errors import TransferError, ReadError, SendRejected, ChannelClosed
from peer.outbound.outbound_queue import OutboundQueue, OutboundItem
from peer.utils.logger import logger


class TransferStatus(Enum):
    COMPLETED = "Completed"
    ABORTED = "Aborted"
    SKIPPED = "Skipped"


@dataclass
class TransferResult:
    """Outcome of one start() call."""
    status: TransferStatus
    sent: int = 0
    total: int = 0
    error: Optional[TransferError] = None


@dataclass(frozen=True)
class TransferState:
    """Snapshot handed to progress observers."""
    in_flight: bool
    completed_count: int
    total_count: int

    @property
    def progress(self) -> float:
        if self.total_count > 0:
            return (self.completed_count / self.total_count) * 100
        return 0.0


# Notices shown to the user
NOTICE_SENDING = "Sending: {name}"
NOTICE_FILES_SENT = "Files sent"
NOTICE_READ_FAILED = "File send failed: {name} could not be read"
NOTICE_SEND_REJECTED = "Send failed, please check the connection"
NOTICE_TEXT_SENT = "Text sent"


class TransferExecutor:
    """Sequential sender for the outbound queue."""

    def __init__(self, queue: OutboundQueue, channel):
        self.queue = queue
        self.channel = channel
        self._in_flight = False
        self._completed_count = 0
        self._total_count = 0

        # Callbacks
        self.on_progress: Optional[Callable[[TransferState], None]] = None
        self.on_notice: Optional[Callable[[str, bool], None]] = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def state(self) -> TransferState:
        return TransferState(self._in_flight, self._completed_count, self._total_count)

    @property
    def progress(self) -> float:
        return self.state.progress

    def _notify_progress(self):
        if self.on_progress:
            self.on_progress(self.state)

    def _notify(self, message: str, is_error: bool = False):
        if self.on_notice:
            self.on_notice(message, is_error)

    async def _read(self, item: OutboundItem) -> bytes:
        """Read the whole file into memory."""
        try:
            return await asyncio.to_thread(item.raw_content.read_bytes)
        except OSError as e:
            raise ReadError(item.name, str(e)) from e

    async def _send_item(self, item: OutboundItem):
        payload = await self._read(item)
        frame = create_file_frame(item.name, len(payload), item.content_type, payload)
        try:
            accepted = await self.channel.send(frame)
        except ChannelClosed:
            accepted = False
        if not accepted:
            raise SendRejected(item.name, "channel rejected the frame")
        return len(payload)

    async def start(self) -> TransferResult:
        """
        Send every queued file in enqueue order.

        A call made while a pass is already running does nothing. The pass
        stops at the first file that cannot be read or that the channel
        refuses; that file and everything after it stay queued. Files are
        removed from the queue as they are handed to the channel.
        """
        if self._in_flight:
            logger.debug("[SEND] Transfer already in progress, ignoring start")
            return TransferResult(TransferStatus.SKIPPED)

        items = self.queue.drain_snapshot()
        if not items:
            return TransferResult(TransferStatus.SKIPPED)

        self._in_flight = True
        self._completed_count = 0
        self._total_count = len(items)
        self._notify_progress()

        result = TransferResult(TransferStatus.COMPLETED, total=len(items))
        try:
            for item in items:
                size = await self._send_item(item)
                self.queue.remove(item.identifier)
                self._completed_count += 1
                logger.log_file_sent(item.name, size, self._completed_count, self._total_count)
                self._notify(NOTICE_SENDING.format(name=item.name))
                self._notify_progress()
        except ReadError as e:
            result = TransferResult(TransferStatus.ABORTED, self._completed_count, len(items), e)
            logger.log_transfer_aborted(e.filename, str(e), len(self.queue))
            self._notify(NOTICE_READ_FAILED.format(name=e.filename), True)
        except SendRejected as e:
            result = TransferResult(TransferStatus.ABORTED, self._completed_count, len(items), e)
            logger.log_transfer_aborted(e.filename, str(e), len(self.queue))
            self._notify(NOTICE_SEND_REJECTED, True)
        else:
            result.sent = self._completed_count
            logger.log_transfer_complete(self._completed_count)
            self._notify(NOTICE_FILES_SENT)
        finally:
            self._in_flight = False
            self._completed_count = 0
            self._total_count = 0
            self._notify_progress()

        return result

    async def send_text(self, content: str) -> bool:
        """Send one text frame right away; the queue and progress are untouched."""
        frame = create_text_frame(content)
        try:
            accepted = await self.channel.send(frame)
        except ChannelClosed:
            accepted = False
        logger.log_text_sent(len(content), accepted)
        if accepted:
            self._notify(NOTICE_TEXT_SENT)
        else:
            self._notify(NOTICE_SEND_REJECTED, True)
        return accepted
