"""
Peer logging module.

This module handles peer-side logging functionality.
"""

import logging
import sys


class PeerLogger:
    """Peer logging class."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger('peerdrop')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)

        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        self.logger.addHandler(console_handler)

    def set_level(self, log_level: int):
        """Change the level of the logger and all of its handlers."""
        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, host: str, port: int, success: bool):
        """Log connection attempt."""
        status = "Connected" if success else "Failed to connect"
        self.info(f"{status} to {host}:{port}")

    def log_files_queued(self, count: int, queue_length: int):
        self.debug(f"[QUEUE] Added {count} file(s), {queue_length} pending")

    def log_file_sent(self, filename: str, size: int, completed: int, total: int):
        """Log a file handed to the channel."""
        self.info(f"[SEND] {filename} ({size} bytes) [{completed}/{total}]")

    def log_transfer_complete(self, total: int):
        self.info(f"[SEND] Transfer complete: {total} file(s) sent")

    def log_transfer_aborted(self, filename: str, reason: str, remaining: int):
        """Log a send pass that stopped on its first failure."""
        self.error(f"[SEND] Aborted at {filename}: {reason} ({remaining} file(s) left in queue)")

    def log_text_sent(self, length: int, success: bool):
        status = "Text sent" if success else "Text rejected by channel"
        self.info(f"[SEND] {status} ({length} chars)")

    def log_frame_received(self, kind: str, details: str):
        """Log an inbound frame accepted into a ledger."""
        self.info(f"[RECV] {kind}: {details}")

    def log_frame_ignored(self, reason: str):
        self.warning(f"[RECV] Ignored frame: {reason}")

    def log_clipboard_outcome(self, target: str, outcome: str):
        """Log the result of a clipboard export."""
        self.info(f"[CLIPBOARD] {target}: {outcome}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = PeerLogger()
