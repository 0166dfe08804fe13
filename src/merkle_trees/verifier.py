"""Integrity verification of built merkle trees"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

from merkle_trees.base import Digest, Mismatch, NodeKind
from merkle_trees.profiling import track_performance

if TYPE_CHECKING:
    from merkle_trees.merkle_tree_base import MerkleTreeBase

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class Verifier:
    """
    Recomputes stored hashes and compares them against the recorded values.

    Traversal is depth-first post-order, left before right, and stops at the
    first mismatch. Pair nodes are rechecked against their children's stored
    hashes; padding nodes always pass.
    """
    __slots__ = ("digest",)

    def __init__(self, digest: Digest):
        self.digest = digest

    @track_performance("Verifier.verify", "nodes", lambda _result, _verifier, tree: len(tree))
    def verify(self, tree: MerkleTreeBase) -> Optional[Mismatch]:
        """
        Verify the whole tree.

        Returns:
            Optional[Mismatch]: None if every reachable node checks out,
                otherwise the first mismatch found.
        """
        mismatch = self._verify_at(tree, 0)
        if mismatch is None:
            logger.debug("Verified tree with root %s", tree.root.short_hash())
        return mismatch

    def verify_node(self, tree: MerkleTreeBase, position: int) -> Optional[Mismatch]:
        """
        Verify only the subtree rooted at `position`.

        Raises:
            IndexError: If no node exists at `position`.
        """
        if not 0 <= position < len(tree):
            raise IndexError(f"position {position} out of range for tree of {len(tree)} nodes")
        return self._verify_at(tree, position)

    def _verify_at(self, tree: MerkleTreeBase, position: int) -> Optional[Mismatch]:
        node = tree.nodes[position]
        kind = node.kind

        if kind is NodeKind.PADDING:
            return None

        if kind is NodeKind.DATA:
            expected = self.digest.hash(node.payload)
        elif kind is NodeKind.PAIR:
            left_pos = 2 * position + 1
            right_pos = left_pos + 1

            mismatch = self._verify_at(tree, left_pos)
            if mismatch is not None:
                return mismatch
            mismatch = self._verify_at(tree, right_pos)
            if mismatch is not None:
                return mismatch

            expected = self.digest.hash_pair(
                tree.nodes[left_pos].hash, tree.nodes[right_pos].hash
            )
        else:
            raise ValueError(f"unknown node kind {kind!r} at position {position}")

        if expected != node.hash:
            logger.debug(
                "Hash mismatch at position %d (%s): expected %s, found %s",
                position, kind.value, expected.hex(), node.hash.hex()
            )
            return Mismatch(position, expected, node.hash)
        return None
