"""
Protocol definitions for PeerDrop.

This module defines the frame structures exchanged between two peers and the
line encoding used when frames travel over a byte stream.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Union

from common.constants import FrameKinds, DEFAULT_CONTENT_TYPE


class FrameDecodeError(ValueError):
    """Raised when an encoded frame cannot be turned back into a frame dict."""


@dataclass
class FileFrame:
    """File frame structure."""
    name: str
    size: int
    content_type: str
    payload: bytes

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'FileFrame':
        payload = data.get('payload')
        if isinstance(payload, (bytearray, memoryview)):
            payload = bytes(payload)
        if not isinstance(payload, bytes):
            raise FrameDecodeError("file frame has no binary payload")
        name = data.get('name')
        if not isinstance(name, str) or not name:
            raise FrameDecodeError("file frame has no name")
        size = data.get('size')
        if not isinstance(size, int) or size < 0:
            size = len(payload)
        return FileFrame(
            name=name,
            size=size,
            content_type=data.get('contentType') or DEFAULT_CONTENT_TYPE,
            payload=payload
        )


@dataclass
class TextFrame:
    """Text frame structure."""
    content: str
    timestamp: str

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'TextFrame':
        content = data.get('content')
        if not isinstance(content, str):
            raise FrameDecodeError("text frame has no content")
        timestamp = data.get('timestamp')
        if not isinstance(timestamp, str):
            timestamp = ''
        return TextFrame(content=content, timestamp=timestamp)


TransferFrame = Union[FileFrame, TextFrame]


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string with a trailing 'Z'."""
    now = datetime.now(timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"


def create_file_frame(name: str, size: int, content_type: str, payload: bytes) -> Dict[str, Any]:
    """Create a file frame."""
    return {
        "kind": FrameKinds.FILE,
        "name": name,
        "size": size,
        "contentType": content_type or DEFAULT_CONTENT_TYPE,
        "payload": payload
    }


def create_text_frame(content: str, timestamp: Optional[str] = None) -> Dict[str, Any]:
    """Create a text frame."""
    return {
        "kind": FrameKinds.TEXT,
        "content": content,
        "timestamp": timestamp or utc_timestamp()
    }


def parse_frame(data: Dict[str, Any]) -> Optional[TransferFrame]:
    """
    Turn a frame dict into a typed frame.

    Returns None for kinds this peer does not understand. Raises
    FrameDecodeError when a known kind is missing required fields.
    """
    kind = data.get('kind')
    if kind == FrameKinds.FILE:
        return FileFrame.from_dict(data)
    if kind == FrameKinds.TEXT:
        return TextFrame.from_dict(data)
    return None


def encode_frame(frame: Dict[str, Any]) -> bytes:
    """Encode a frame dict as one newline-terminated JSON line."""
    message = dict(frame)
    payload = message.get('payload')
    if isinstance(payload, (bytes, bytearray, memoryview)):
        message['payload'] = base64.b64encode(bytes(payload)).decode('ascii')
    return json.dumps(message).encode('utf-8') + b'\n'


def decode_frame(line: bytes) -> Dict[str, Any]:
    """Decode one JSON line produced by encode_frame."""
    try:
        message = json.loads(line.decode('utf-8').strip())
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FrameDecodeError(f"malformed frame: {e}") from e

    if not isinstance(message, dict):
        raise FrameDecodeError("frame is not an object")

    if message.get('kind') == FrameKinds.FILE:
        payload = message.get('payload')
        if not isinstance(payload, str):
            raise FrameDecodeError("file frame payload is not base64 text")
        try:
            message['payload'] = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise FrameDecodeError(f"bad file payload: {e}") from e

    return message
