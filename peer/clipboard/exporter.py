"""
Clipboard exporter module.

Copies received images and texts to the clipboard. When an image cannot be
written directly it is opened in a viewer so the user can copy it by hand.
"""

import tempfile
from enum import Enum
from typing import Callable, Optional

from peer.errors import BlobNotFound
from peer.inbound.blob_store import BlobStore
from peer.utils.logger import logger


class ExportOutcome(Enum):
    OK = "Ok"
    UNSUPPORTED = "Unsupported"
    DEGRADED_FALLBACK = "DegradedFallback"
    FAILED = "Failed"


IMAGE_NOTICES = {
    ExportOutcome.OK: ("Copied image {name}", False),
    ExportOutcome.UNSUPPORTED: ("Clipboard is not available here, please download the image instead", True),
    ExportOutcome.DEGRADED_FALLBACK: ("Could not copy the image directly; it was opened in a viewer, copy it from there", True),
    ExportOutcome.FAILED: ("Copy failed, please download the image instead", True),
}

TEXT_NOTICES = {
    ExportOutcome.OK: ("Text copied to clipboard", False),
    ExportOutcome.FAILED: ("Copy failed, please select and copy the text manually", True),
}


class ClipboardExporter:
    """Best-effort export of received content to the clipboard."""

    def __init__(self, blobs: BlobStore, backend=None, viewer_dir: Optional[str] = None):
        self.blobs = blobs
        self.backend = backend
        self.viewer_dir = viewer_dir or tempfile.gettempdir()
        self.on_notice: Optional[Callable[[str, bool], None]] = None

    def _report(self, notices: dict, outcome: ExportOutcome, target: str) -> ExportOutcome:
        logger.log_clipboard_outcome(target, outcome.value)
        if self.on_notice:
            message, is_error = notices[outcome]
            self.on_notice(message.format(name=target), is_error)
        return outcome

    def _has_clipboard(self) -> bool:
        return self.backend is not None and self.backend.is_available()

    async def export_image(self, reference: str, display_name: str) -> ExportOutcome:
        """
        Copy the blob behind reference to the clipboard.

        UNSUPPORTED: there is no clipboard at all; nothing is fetched.
        FAILED: the bytes could not be fetched.
        DEGRADED_FALLBACK: the direct write was unavailable or failed, and the
        file was opened in a viewer instead.
        """
        if not self._has_clipboard():
            return self._report(IMAGE_NOTICES, ExportOutcome.UNSUPPORTED, display_name)

        try:
            data = await self.blobs.fetch(reference)
            content_type = self.blobs.resolve(reference).content_type
        except BlobNotFound as e:
            logger.log_error("clipboard fetch", e)
            return self._report(IMAGE_NOTICES, ExportOutcome.FAILED, display_name)

        try:
            if not self.backend.supports_binary():
                raise RuntimeError("structured clipboard write is not supported")
            await self.backend.write_binary(data, content_type)
            return self._report(IMAGE_NOTICES, ExportOutcome.OK, display_name)
        except Exception as e:
            logger.log_error("clipboard write", e)

        self.open_in_viewer(reference, display_name)
        return self._report(IMAGE_NOTICES, ExportOutcome.DEGRADED_FALLBACK, display_name)

    def open_in_viewer(self, reference: str, display_name: str) -> bool:
        """Open a copy of the blob with the desktop's default viewer."""
        if self.backend is None:
            return False
        try:
            path = self.blobs.spill(reference, self.viewer_dir, display_name)
        except (OSError, BlobNotFound) as e:
            logger.log_error("viewer fallback", e)
            return False
        return bool(self.backend.open_external(path))

    async def export_text(self, content: str) -> ExportOutcome:
        """Copy plain text; there is no fallback since text can be selected by hand."""
        if not self._has_clipboard():
            return self._report(TEXT_NOTICES, ExportOutcome.FAILED, "text")
        try:
            await self.backend.write_text(content)
        except Exception as e:
            logger.log_error("clipboard text write", e)
            return self._report(TEXT_NOTICES, ExportOutcome.FAILED, "text")
        return self._report(TEXT_NOTICES, ExportOutcome.OK, "text")
