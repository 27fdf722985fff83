"""
Qt clipboard backend.

Writes received images and text to the system clipboard through PyQt6 and
opens files in the desktop's default viewer when a direct copy is not
possible.
"""

import os
from io import BytesIO

# Optional GUI imports
try:
    from PyQt6.QtCore import QByteArray, QMimeData, QUrl
    from PyQt6.QtGui import QDesktopServices, QGuiApplication, QImage
    HAS_PYQT6 = True
except ImportError:
    HAS_PYQT6 = False

from PIL import Image as PILImage

from peer.errors import ClipboardWriteError
from peer.utils.logger import logger


def _to_png(data: bytes) -> bytes:
    """Re-encode an image Qt cannot decode (e.g. some WebP/TIFF variants) as PNG."""
    try:
        with PILImage.open(BytesIO(data)) as img:
            if img.mode not in ('RGB', 'RGBA'):
                img = img.convert('RGBA')
            buffer = BytesIO()
            img.save(buffer, format='PNG')
            return buffer.getvalue()
    except (OSError, ValueError) as e:
        raise ClipboardWriteError(f"unreadable image data: {e}") from e


class QtClipboardBackend:
    """System clipboard access for a running Qt application."""

    def _clipboard(self):
        if not HAS_PYQT6 or QGuiApplication.instance() is None:
            return None
        return QGuiApplication.clipboard()

    def is_available(self) -> bool:
        return self._clipboard() is not None

    def supports_binary(self) -> bool:
        return HAS_PYQT6

    def _decode_image(self, data: bytes):
        image = QImage.fromData(data)
        if image.isNull():
            image = QImage.fromData(_to_png(data))
        if image.isNull():
            raise ClipboardWriteError("image data could not be decoded")
        return image

    async def write_binary(self, data: bytes, content_type: str):
        """Place binary content on the clipboard, as an image when it is one."""
        clipboard = self._clipboard()
        if clipboard is None:
            raise ClipboardWriteError("no clipboard")

        mime = QMimeData()
        if content_type.startswith('image/'):
            mime.setImageData(self._decode_image(data))
        mime.setData(content_type, QByteArray(data))
        clipboard.setMimeData(mime)

    async def write_text(self, text: str):
        clipboard = self._clipboard()
        if clipboard is None:
            raise ClipboardWriteError("no clipboard")
        clipboard.setText(text)

    def open_external(self, path) -> bool:
        """Open a local file with the desktop's default application."""
        if not HAS_PYQT6:
            return False
        opened = QDesktopServices.openUrl(QUrl.fromLocalFile(os.path.abspath(str(path))))
        if not opened:
            logger.warning(f"[CLIPBOARD] No viewer could open {path}")
        return opened
