"""Utility functions for testing merkle tree invariants."""

import logging
from merkle_trees.merkle_tree_base import (
    MerkleTreeBase,
    Stats
)

TREE_FLAGS = (
    "data_in_bottom_level",
    "data_in_order",
    "pairs_have_children",
    "terminals_childless",
)

def assert_tree_invariants_tc(tc, t: MerkleTreeBase, stats: Stats) -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False"
        )

    tc.assertGreater(
        stats.node_count, 0,
        f"Invariant failed: node_count={stats.node_count} ≤ 0"
    )
    tc.assertEqual(
        stats.data_count, t.payload_count,
        f"Invariant failed: data_count={stats.data_count} ≠ payload_count={t.payload_count}"
    )
    tc.assertLessEqual(
        stats.bottom_padding_count, 1,
        f"Invariant failed: {stats.bottom_padding_count} padding nodes in the bottom level"
    )
    tc.assertEqual(
        stats.height, (t.payload_count - 1).bit_length(),
        f"Invariant failed: height={stats.height} ≠ ceil(log2({t.payload_count}))"
    )
    if t.payload_count == 1:
        tc.assertEqual(stats.node_count, 1, "Single payload tree must be a single node")
        tc.assertTrue(t.root.is_data(), "Single payload tree root must be the data block")


class InvariantError(Exception):
    """Raised when a merkle tree invariant is violated."""
    pass

def assert_tree_invariants_raise(t: MerkleTreeBase, stats: Stats) -> None:
    """Check all invariants, raising on the first failure."""
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logging.error(f"Invariant failed: {flag} is False")
            raise InvariantError(f"{flag} is False")

    if stats.data_count != t.payload_count:
        logging.error(f"Invariant failed: data_count={stats.data_count} ≠ payload_count={t.payload_count}")
        raise InvariantError("data block count does not match payload count")
    if stats.bottom_padding_count > 1:
        logging.error(f"Invariant failed: {stats.bottom_padding_count} padding nodes in the bottom level")
        raise InvariantError("more than one padding node in the bottom level")
    if stats.height != (t.payload_count - 1).bit_length():
        logging.error(f"Invariant failed: height={stats.height} for {t.payload_count} payloads")
        raise InvariantError("height is not ceil(log2(n))")
