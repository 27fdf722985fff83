"""
Peer configuration module.

This module handles peer-side configuration settings.
"""

import logging
from typing import Optional

from common.constants import (
    DEFAULT_HOST, DEFAULT_PORT, DOWNLOAD_DIR, DEFAULT_CONTENT_TYPE, TIMESTAMP_DISPLAY_FORMAT,
    MAX_FRAME_SIZE, MAX_RECEIVED_FILES, MAX_RECEIVED_TEXTS
)


class PeerConfig:
    """Peer configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, download_dir: str = DOWNLOAD_DIR):
        self.host = host
        self.port = port
        self.download_dir = download_dir

        # Outbound settings
        self.default_content_type = DEFAULT_CONTENT_TYPE

        # Inbound settings
        self.timestamp_format = TIMESTAMP_DISPLAY_FORMAT
        self.max_received_files: Optional[int] = MAX_RECEIVED_FILES
        self.max_received_texts: Optional[int] = MAX_RECEIVED_TEXTS
        self.max_frame_size = MAX_FRAME_SIZE

        # Logging
        self.log_level = logging.INFO

    def update_ledger_limits(self, max_files: Optional[int] = None, max_texts: Optional[int] = None):
        """Bound the received ledgers; oldest records are evicted past the limit."""
        if max_files is not None:
            self.max_received_files = max_files
        if max_texts is not None:
            self.max_received_texts = max_texts

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }
