"""
Stream channel module.

Carries frames between two peers over a TCP connection as newline-delimited
JSON. File payloads are base64-encoded on the wire.
"""

import asyncio
from typing import Any, Callable, Dict, Optional, Tuple

from common.constants import ConnectionStatus, DEFAULT_LISTEN_HOST, STREAM_READ_LIMIT
from common.protocol_definitions import FrameDecodeError, encode_frame, decode_frame
from peer.utils.logger import logger


class StreamChannel:
    """Peer link over an asyncio stream pair."""

    def __init__(self, reader: Optional[asyncio.StreamReader] = None,
                 writer: Optional[asyncio.StreamWriter] = None):
        self.reader = reader
        self.writer = writer
        self.status = ConnectionStatus.CONNECTED if writer else ConnectionStatus.DISCONNECTED
        self.frame_handler: Optional[Callable[[Dict[str, Any]], None]] = None
        self._server: Optional[asyncio.AbstractServer] = None
        self._connected: Optional[asyncio.Event] = None

    @property
    def connection_status(self) -> str:
        return self.status

    def on_frame(self, callback: Callable[[Dict[str, Any]], None]):
        """Set the handler for incoming frames."""
        self.frame_handler = callback

    @classmethod
    async def connect(cls, host: str, port: int, timeout: float = 10.0,
                      limit: int = STREAM_READ_LIMIT) -> 'StreamChannel':
        """Open a connection to a listening peer."""
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port, limit=limit),
            timeout=timeout
        )
        logger.log_connection(host, port, True)
        return cls(reader, writer)

    @classmethod
    async def listen(cls, host: str = DEFAULT_LISTEN_HOST, port: int = 0,
                     limit: int = STREAM_READ_LIMIT) -> Tuple['StreamChannel', int]:
        """
        Start listening for one peer.

        Returns the channel and the bound port; the channel switches to
        connected once wait_connected() sees a peer.
        """
        channel = cls()
        channel.status = ConnectionStatus.CONNECTING
        channel._connected = asyncio.Event()

        async def handle_peer(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
            if channel.writer is not None:
                # Only one peer per channel
                writer.close()
                await writer.wait_closed()
                return
            channel.reader, channel.writer = reader, writer
            channel.status = ConnectionStatus.CONNECTED
            addr = writer.get_extra_info('peername')
            logger.info(f"Peer connected from {addr}")
            channel._connected.set()

        channel._server = await asyncio.start_server(handle_peer, host, port, limit=limit)
        bound_port = channel._server.sockets[0].getsockname()[1]
        logger.info(f"Listening for a peer on {host}:{bound_port}")
        return channel, bound_port

    async def wait_connected(self):
        if self._connected is not None:
            await self._connected.wait()

    async def send(self, frame: Dict[str, Any]) -> bool:
        """Hand a frame to the transport. False if the link is not usable."""
        if self.status != ConnectionStatus.CONNECTED or not self.writer:
            logger.error("[ERROR] Not connected to peer")
            return False

        try:
            self.writer.write(encode_frame(frame))
            await self.writer.drain()
            return True
        except (ConnectionError, OSError, RuntimeError) as e:
            logger.error(f"[ERROR] Failed to send frame: {e}")
            self.status = ConnectionStatus.DISCONNECTED
            return False

    async def listen_for_frames(self):
        """Read frames until the peer goes away, handing each to the frame handler."""
        if not self.reader:
            return

        try:
            while self.status == ConnectionStatus.CONNECTED:
                try:
                    data = await self.reader.readline()
                except ValueError as e:
                    # Line longer than the stream limit; the connection cannot resync
                    logger.error(f"[RECV] Frame too large: {e}")
                    break
                if not data:
                    logger.info("[RECV] Peer closed the connection")
                    break

                try:
                    message = decode_frame(data)
                except FrameDecodeError as e:
                    logger.log_frame_ignored(str(e))
                    continue

                if self.frame_handler:
                    try:
                        self.frame_handler(message)
                    except Exception as e:
                        # A failing handler must not drop the link
                        logger.log_error("frame handler", e)
        except asyncio.CancelledError:
            logger.info("[RECV] Listener cancelled")
            raise
        except (ConnectionError, OSError) as e:
            logger.error(f"[RECV] Connection error: {e}")
        finally:
            if self.status == ConnectionStatus.CONNECTED:
                self.status = ConnectionStatus.DISCONNECTED

    async def close(self):
        """Close the connection and stop listening."""
        self.status = ConnectionStatus.CLOSED
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass
        if self._server:
            self._server.close()
            await self._server.wait_closed()
