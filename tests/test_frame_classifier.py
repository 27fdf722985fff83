#!/usr/bin/env python3
"""
Unit tests for inbound frame classification.

Tests the file/text split, arrival ordering, display timestamps, and the
permissive handling of unknown or malformed frames.
"""

import asyncio
import unittest
from datetime import datetime, timezone
from unittest.mock import Mock

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.protocol_definitions import create_file_frame, create_text_frame
from peer.inbound.blob_store import BlobStore
from peer.inbound.frame_classifier import FrameClassifier
from peer.inbound.ledger import Ledger, ReceivedFileRecord, ReceivedTextRecord


class TestFrameClassifier(unittest.TestCase):
    """Test cases for FrameClassifier.on_frame."""

    def setUp(self):
        self.blobs = BlobStore()
        self.classifier = FrameClassifier(self.blobs)

    def test_file_frame_creates_file_record(self):
        """A file frame yields one record whose reference resolves to the payload."""
        frame = create_file_frame("a.txt", 5, "text/plain", bytes(5))

        record = self.classifier.on_frame(frame)

        self.assertIsInstance(record, ReceivedFileRecord)
        self.assertEqual(len(self.classifier.files), 1)
        self.assertEqual(len(self.classifier.texts), 0)
        self.assertEqual(record.name, "a.txt")
        self.assertEqual(record.size, 5)
        self.assertEqual(record.content_type, "text/plain")
        data = asyncio.run(self.blobs.fetch(record.published_reference))
        self.assertEqual(data, bytes(5))

    def test_text_frame_creates_text_record(self):
        """A text frame keeps its content and shows the sender's time."""
        frame = create_text_frame("hello", "2024-01-01T00:00:00Z")

        record = self.classifier.on_frame(frame)

        expected = datetime(2024, 1, 1, tzinfo=timezone.utc).astimezone().strftime('%Y-%m-%d %H:%M:%S')
        self.assertIsInstance(record, ReceivedTextRecord)
        self.assertEqual(len(self.classifier.texts), 1)
        self.assertEqual(len(self.classifier.files), 0)
        self.assertEqual(record.content, "hello")
        self.assertEqual(record.timestamp, expected)
        self.assertEqual(record.sent_at, "2024-01-01T00:00:00Z")

    def test_text_content_kept_verbatim(self):
        record = self.classifier.on_frame(create_text_frame("  spaced\n  out  ", "2024-01-01T00:00:00Z"))
        self.assertEqual(record.content, "  spaced\n  out  ")

    def test_unparseable_timestamp_shown_as_is(self):
        record = self.classifier.on_frame(create_text_frame("hi", "yesterday"))
        self.assertEqual(record.timestamp, "yesterday")

    def test_arrival_order_preserved(self):
        """Back-to-back frames land in arrival order regardless of size."""
        big = create_file_frame("big.bin", 100000, "application/octet-stream", b"b" * 100000)
        small = create_file_frame("small.bin", 1, "application/octet-stream", b"s")

        self.classifier.on_frame(big)
        self.classifier.on_frame(small)

        self.assertEqual(self.classifier.files[0].name, "big.bin")
        self.assertEqual(self.classifier.files[1].name, "small.bin")

    def test_same_name_twice_gets_distinct_identifiers(self):
        first = self.classifier.on_frame(create_file_frame("a.txt", 1, "text/plain", b"1"))
        second = self.classifier.on_frame(create_file_frame("a.txt", 1, "text/plain", b"2"))

        self.assertNotEqual(first.identifier, second.identifier)
        self.assertNotEqual(first.published_reference, second.published_reference)

    def test_unknown_kind_ignored(self):
        """Frames of unknown kind create nothing and raise nothing."""
        result = self.classifier.on_frame({"kind": "video", "data": b"..."})

        self.assertIsNone(result)
        self.assertEqual(len(self.classifier.files), 0)
        self.assertEqual(len(self.classifier.texts), 0)
        self.assertEqual(len(self.blobs), 0)

    def test_missing_kind_ignored(self):
        self.assertIsNone(self.classifier.on_frame({"content": "no kind"}))

    def test_non_object_message_ignored(self):
        """Lists, strings and other non-object messages are dropped quietly."""
        self.assertIsNone(self.classifier.on_frame(["x"]))
        self.assertIsNone(self.classifier.on_frame("text"))
        self.assertIsNone(self.classifier.on_frame(None))
        self.assertEqual(len(self.classifier.files), 0)
        self.assertEqual(len(self.classifier.texts), 0)

    def test_malformed_file_frame_ignored(self):
        """A file frame without a binary payload is dropped."""
        result = self.classifier.on_frame({"kind": "file", "name": "x", "size": 1, "payload": "not bytes"})

        self.assertIsNone(result)
        self.assertEqual(len(self.blobs), 0)

    def test_missing_content_type_defaults(self):
        frame = {"kind": "file", "name": "x.bin", "size": 2, "payload": b"ab"}
        record = self.classifier.on_frame(frame)
        self.assertEqual(record.content_type, "application/octet-stream")

    def test_image_detection(self):
        image = self.classifier.on_frame(create_file_frame("p.png", 3, "image/png", b"png"))
        doc = self.classifier.on_frame(create_file_frame("d.pdf", 3, "application/pdf", b"pdf"))

        self.assertTrue(image.is_image)
        self.assertFalse(doc.is_image)

    def test_each_frame_notifies_once(self):
        callback = Mock()
        self.classifier.on_record = callback

        self.classifier.on_frame(create_text_frame("a"))
        self.classifier.on_frame({"kind": "unknown"})

        callback.assert_called_once()

    def test_eviction_releases_blob(self):
        """When a bounded ledger evicts a file record its blob is released."""
        classifier = FrameClassifier(self.blobs)
        classifier.files = Ledger(max_size=2, on_evict=classifier._release_record)

        first = classifier.on_frame(create_file_frame("1", 1, "text/plain", b"1"))
        classifier.on_frame(create_file_frame("2", 1, "text/plain", b"2"))
        classifier.on_frame(create_file_frame("3", 1, "text/plain", b"3"))

        self.assertEqual([r.name for r in classifier.files], ["2", "3"])
        self.assertNotIn(first.published_reference, self.blobs)
        self.assertEqual(len(self.blobs), 2)


if __name__ == '__main__':
    unittest.main()
