"""
Clipboard module for exporting received content.
"""
