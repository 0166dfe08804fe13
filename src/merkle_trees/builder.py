"""Bottom-up construction of merkle trees"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Iterable, List, Type

from merkle_trees.base import (
    Digest,
    EmptyInputError,
    Node,
    Payload,
    to_payload_bytes,
)
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


class TreeBuilderBase:
    """
    Builds a merkle tree from an ordered sequence of payloads by repeated
    pairwise hashing. Factory will set:
      - TreeClass : the tree class to instantiate
      - digest    : the Digest used for every node
    """

    TreeClass: Type[MerkleTreeBase]
    digest: Digest

    @track_performance("TreeBuilder.build", "payloads",
                       lambda tree, _builder, _payloads: tree.payload_count)
    def build(self, payloads: Iterable[Payload]) -> MerkleTreeBase:
        """
        Build a tree over `payloads`, preserving their order.

        Args:
            payloads: Any finite iterable of bytes-like objects or strings.

        Returns:
            MerkleTreeBase: The fully built, immutable tree.

        Raises:
            EmptyInputError: If `payloads` yields nothing.
            TypeError: If a payload is neither bytes-like nor a string.
        """
        digest = self.digest
        bottom = [Node.data(to_payload_bytes(p), digest) for p in payloads]
        if not bottom:
            raise EmptyInputError("a merkle tree cannot be built from zero payloads")

        payload_count = len(bottom)
        levels = self._reduce_levels(bottom)
        height = len(levels) - 1
        nodes = self._flatten(levels)

        first_data = (1 << height) - 1
        data_positions = range(first_data, first_data + payload_count)

        logger.debug(
            "Built tree over %d payloads: height=%d, nodes=%d, digest=%s",
            payload_count, height, len(nodes), digest.name
        )
        return self.TreeClass(nodes, data_positions)

    def _reduce_levels(self, bottom: List[Node]) -> List[List[Node]]:
        """
        Pair each level into the next one up until a single root remains.

        An odd level gets one padding node appended on its right before
        pairing. Returns the levels root first.
        """
        digest = self.digest
        levels = [bottom]
        current = bottom
        while len(current) > 1:
            if len(current) % 2 == 1:
                current.append(Node.padding(digest))
            current = [
                Node.pair(current[i], current[i + 1], digest)
                for i in range(0, len(current), 2)
            ]
            levels.append(current)
        levels.reverse()
        return levels

    def _flatten(self, levels: List[List[Node]]) -> List[Node]:
        """
        Lay the levels out breadth-first, root first.

        Every level above the bottom is widened to 2**depth with padding so
        that children of position i always sit at 2i+1 and 2i+2. The bottom
        level is not widened; the array ends with its last node.
        """
        digest = self.digest
        nodes: List[Node] = []
        last = len(levels) - 1
        for depth, level in enumerate(levels):
            nodes.extend(level)
            if depth < last:
                fill = (1 << depth) - len(level)
                if fill:
                    logger.debug("Filling level %d with %d padding nodes", depth, fill)
                nodes.extend(Node.padding(digest) for _ in range(fill))
        return nodes
