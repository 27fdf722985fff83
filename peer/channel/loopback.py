"""
In-memory channel pair.

Both ends live in the same process; a frame sent on one end is delivered to
the other end's frame handler immediately and in order.
"""

from typing import Any, Callable, Dict, Optional, Tuple

from common.constants import ConnectionStatus


class LoopbackChannel:
    """One end of an in-process peer link."""

    def __init__(self):
        self.peer: Optional['LoopbackChannel'] = None
        self.status = ConnectionStatus.DISCONNECTED
        self.frame_handler: Optional[Callable[[Dict[str, Any]], None]] = None
        self.sent_count = 0

    @classmethod
    def pair(cls) -> Tuple['LoopbackChannel', 'LoopbackChannel']:
        """Create two connected ends."""
        left, right = cls(), cls()
        left.peer, right.peer = right, left
        left.status = right.status = ConnectionStatus.CONNECTED
        return left, right

    @property
    def connection_status(self) -> str:
        return self.status

    def on_frame(self, callback: Callable[[Dict[str, Any]], None]):
        """Set the handler for incoming frames."""
        self.frame_handler = callback

    async def send(self, frame: Dict[str, Any]) -> bool:
        if self.status != ConnectionStatus.CONNECTED or self.peer is None:
            return False
        if self.peer.status != ConnectionStatus.CONNECTED:
            return False
        self.sent_count += 1
        if self.peer.frame_handler:
            self.peer.frame_handler(dict(frame))
        return True

    async def close(self):
        self.status = ConnectionStatus.CLOSED
        if self.peer is not None:
            self.peer.status = ConnectionStatus.DISCONNECTED
