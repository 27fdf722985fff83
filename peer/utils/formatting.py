"""
Display helpers shared by the queue view, the ledgers and log lines.
"""

from datetime import datetime, timezone
from typing import Optional

from common.constants import TIMESTAMP_DISPLAY_FORMAT


def format_file_size(size: int) -> str:
    """Format a byte count for display, e.g. 1536 -> '1.5 KB'."""
    if size <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB", "TB"]
    order = 0
    value = float(size)
    while value >= 1024 and order < len(sizes) - 1:
        order += 1
        value /= 1024
    text = f"{value:.2f}".rstrip('0').rstrip('.')
    return f"{text} {sizes[order]}"


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: str, fmt: str = TIMESTAMP_DISPLAY_FORMAT) -> str:
    """
    Render a sender-supplied ISO-8601 timestamp in local time.

    Unparseable values are returned unchanged so the record stays renderable.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.astimezone().strftime(fmt)
