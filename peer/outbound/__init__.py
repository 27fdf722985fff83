"""
Outbound module for sending files and text to the connected peer.

Handles:
- Queueing picked files
- Sequential sending with progress tracking
- Abort on the first failed file
"""
