"""
Common package for PeerDrop.

Holds the constants and frame definitions shared by both ends of a peer link.
"""
