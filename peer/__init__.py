"""
Peer package for PeerDrop.

This package contains the peer-side engine:
- Outbound file queue and sequential sender
- Inbound frame classification and received-item ledgers
- Clipboard export of received content
- Channel implementations and utilities
"""
