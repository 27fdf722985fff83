"""
Shared constants for PeerDrop.

This module contains all constants used by both ends of a peer link.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_LISTEN_HOST = '0.0.0.0'
DEFAULT_PORT = 9400

# Frame limits
MAX_FRAME_SIZE = 256 * 1024 * 1024  # Largest encoded line accepted from a peer
STREAM_READ_LIMIT = MAX_FRAME_SIZE

# File Transfer
DEFAULT_CONTENT_TYPE = 'application/octet-stream'
DOWNLOAD_DIR = 'downloads'
BLOB_REFERENCE_SCHEME = 'blob'

# Display
TIMESTAMP_DISPLAY_FORMAT = '%Y-%m-%d %H:%M:%S'

# Received ledgers (None = unbounded for the session)
MAX_RECEIVED_FILES = None
MAX_RECEIVED_TEXTS = None


# Frame kinds
class FrameKinds:
    FILE = 'file'
    TEXT = 'text'


# Connection status values reported by a channel
class ConnectionStatus:
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    CONNECTED = 'connected'
    CLOSED = 'closed'
