#!/usr/bin/env python3
"""
Unit tests for the outbound queue.
"""

import unittest
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from peer.outbound.outbound_queue import OutboundQueue, OutboundItem


class TestOutboundQueue(unittest.TestCase):
    """Test cases for queue membership."""

    def setUp(self):
        self.queue = OutboundQueue()

    def test_enqueue_keeps_order_and_wraps_paths(self):
        """Handles are appended in order and wrapped as Paths."""
        self.queue.enqueue(["a.txt", "b.png"])
        self.queue.enqueue([Path("c.bin")])

        names = [item.name for item in self.queue.drain_snapshot()]
        self.assertEqual(names, ["a.txt", "b.png", "c.bin"])
        self.assertIsInstance(self.queue.drain_snapshot()[0].raw_content, Path)

    def test_duplicate_names_are_not_deduplicated(self):
        """The same file picked twice is queued twice under different identifiers."""
        added = self.queue.enqueue(["same.txt", "same.txt"])

        self.assertEqual(len(self.queue), 2)
        self.assertNotEqual(added[0].identifier, added[1].identifier)

    def test_identifiers_unique_for_large_batch(self):
        added = self.queue.enqueue([f"f{i}" for i in range(500)])
        self.assertEqual(len({item.identifier for item in added}), 500)

    def test_remove_by_identifier(self):
        added = self.queue.enqueue(["a", "b", "c"])

        self.queue.remove(added[1].identifier)

        self.assertEqual([i.name for i in self.queue.drain_snapshot()], ["a", "c"])
        self.assertNotIn(added[1].identifier, self.queue)

    def test_remove_unknown_identifier_is_noop(self):
        """Removing an identifier that is not queued does nothing."""
        self.queue.enqueue(["a"])
        self.queue.remove("missing")
        self.assertEqual(len(self.queue), 1)

    def test_drain_snapshot_does_not_clear(self):
        self.queue.enqueue(["a", "b"])

        snapshot = self.queue.drain_snapshot()

        self.assertEqual(len(snapshot), 2)
        self.assertEqual(len(self.queue), 2)

    def test_snapshot_is_detached_from_later_changes(self):
        self.queue.enqueue(["a"])
        snapshot = self.queue.drain_snapshot()
        self.queue.enqueue(["b"])
        self.assertEqual(len(snapshot), 1)

    def test_content_type_guess(self):
        """Known extensions map to a MIME type, unknown ones to the binary default."""
        self.assertEqual(OutboundItem(Path("photo.png")).content_type, "image/png")
        self.assertEqual(OutboundItem(Path("blob.zzzunknown")).content_type, "application/octet-stream")

    def test_items_are_immutable(self):
        item = OutboundItem(Path("a.txt"))
        with self.assertRaises(Exception):
            item.identifier = "other"


if __name__ == '__main__':
    unittest.main()
