"""
Exceptions raised inside the peer engine.

ReadError and SendRejected stop a send pass. The clipboard errors never leave
the exporter; they are turned into export outcomes there.
"""


class TransferError(Exception):
    """Base class for failures that end a send pass."""

    def __init__(self, filename: str, message: str):
        super().__init__(message)
        self.filename = filename


class ReadError(TransferError):
    """A queued file could not be read into memory."""


class SendRejected(TransferError):
    """The channel refused a frame (not open, or the peer is unreachable)."""


class ChannelClosed(Exception):
    """Raised when a channel is used after it was closed."""


class BlobNotFound(KeyError):
    """A published reference does not resolve to a stored binary object."""


class ClipboardWriteError(Exception):
    """The structured clipboard write is unavailable or failed."""
