#!/usr/bin/env python3
"""
PeerDrop - Main Entry Point

Sends files and text snippets to a directly connected peer, and receives
them from it.

Usage:
    python main_peer.py --listen PORT [--download-dir DIR]
    python main_peer.py --connect HOST:PORT [--send FILE ...] [--text TEXT] [--stay]

Received files are saved to the download directory; received texts are
written to the log.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Tuple

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from common.constants import DEFAULT_LISTEN_HOST, DOWNLOAD_DIR
from peer.channel.stream_channel import StreamChannel
from peer.outbound.transfer_executor import TransferStatus
from peer.session import TransferSession, EVENT_FILES, EVENT_TEXTS
from peer.utils.config import PeerConfig
from peer.utils.formatting import format_file_size
from peer.utils.logger import logger


def parse_address(value: str) -> Tuple[str, int]:
    """Split 'host:port' into its parts."""
    host, sep, port = value.rpartition(':')
    if not sep or not host:
        raise argparse.ArgumentTypeError(f"expected HOST:PORT, got {value!r}")
    try:
        return host, int(port)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port in {value!r}") from None


def print_notice(message: str, is_error: bool):
    if is_error:
        logger.error(f"[NOTICE] {message}")
    else:
        logger.info(f"[NOTICE] {message}")


class ReceivedItemWriter:
    """Saves each newly received file and logs each newly received text."""

    def __init__(self, session: TransferSession):
        self.session = session
        self.seen = set()

    def __call__(self, event: str, session: TransferSession):
        if event == EVENT_FILES:
            for record in session.received_files:
                if record.identifier not in self.seen:
                    self.seen.add(record.identifier)
                    try:
                        path = session.save_file(record)
                    except (OSError, ValueError) as e:
                        logger.log_error("save received file", e)
                        continue
                    logger.info(f"[FILE] {record.name} ({format_file_size(record.size)}) -> {path}")
        elif event == EVENT_TEXTS:
            for record in session.received_texts:
                if record.identifier not in self.seen:
                    self.seen.add(record.identifier)
                    logger.info(f"[TEXT] [{record.timestamp}] {record.content}")


async def run_peer(args) -> int:
    """Connect or listen, send what was asked, then keep receiving if needed."""
    config = PeerConfig(download_dir=args.download_dir)

    if args.listen is not None:
        channel, port = await StreamChannel.listen(args.host, args.listen, limit=config.max_frame_size)
        logger.info(f"[INFO] Waiting for a peer on port {port}...")
        await channel.wait_connected()
    else:
        host, port = args.connect
        try:
            channel = await StreamChannel.connect(host, port, limit=config.max_frame_size)
        except (OSError, asyncio.TimeoutError) as e:
            logger.log_connection(host, port, False)
            logger.log_error("connection", e)
            return 1

    session = TransferSession(channel, config, notifier=print_notice)
    session.subscribe(ReceivedItemWriter(session))
    listener = asyncio.create_task(channel.listen_for_frames())

    exit_code = 0
    try:
        if args.send:
            session.enqueue_files(args.send)
            result = await session.start_transfer()
            if result.status == TransferStatus.ABORTED:
                exit_code = 1

        if args.text and not await session.send_text(args.text):
            exit_code = 1

        sender_only = bool(args.send or args.text) and not args.stay
        if not sender_only:
            await listener
    except KeyboardInterrupt:
        logger.info("[INFO] Interrupted by user")
    finally:
        listener.cancel()
        await asyncio.gather(listener, return_exceptions=True)
        await session.close()

    return exit_code


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='PeerDrop peer-to-peer file and text transfer')
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('--listen', type=int, metavar='PORT',
                      help='Wait for a peer to connect on this port (0 picks a free port)')
    mode.add_argument('--connect', type=parse_address, metavar='HOST:PORT',
                      help='Connect to a listening peer')
    parser.add_argument('--host', type=str, default=DEFAULT_LISTEN_HOST,
                        help=f'Address to listen on (default: {DEFAULT_LISTEN_HOST})')
    parser.add_argument('--send', nargs='+', metavar='FILE', default=[],
                        help='Files to send, in order')
    parser.add_argument('--text', type=str, default=None,
                        help='Text snippet to send')
    parser.add_argument('--stay', action='store_true',
                        help='Keep receiving after sending')
    parser.add_argument('--download-dir', type=str, default=DOWNLOAD_DIR,
                        help=f'Where received files are saved (default: {DOWNLOAD_DIR})')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()

    if args.verbose:
        logger.set_level(logging.DEBUG)

    try:
        sys.exit(asyncio.run(run_peer(args)))
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")


if __name__ == "__main__":
    main()
