"""
Channel implementations that carry frames between two peers.
"""
