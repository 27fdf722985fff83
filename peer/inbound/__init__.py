"""
Inbound module for frames arriving from the connected peer.

Handles:
- Frame classification into file and text records
- Binary object storage behind published references
- Received-item ledgers
"""
