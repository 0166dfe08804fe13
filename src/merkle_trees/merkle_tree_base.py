"""Merkle tree base implementation"""

from __future__ import annotations
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Type
from dataclasses import dataclass

from merkle_trees.base import (
    Digest,
    EmptyInputError,
    Mismatch,
    Node,
    NodeKind,
    NodeRef,
    Payload,
)
from merkle_trees.navigator import Navigator
from merkle_trees.verifier import Verifier
from merkle_trees.profiling import PerformanceTracker

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class MerkleTreeBase:
    """
    A merkle tree stored as an implicit complete binary tree.

    The root is at position 0 and the children of position i are at 2i+1 and
    2i+2. Data blocks fill the bottom level in insertion order, optionally
    followed by a single padding node. `data_positions[i]` is the array
    position of the i-th original payload.

    Trees are immutable once constructed; building over new payloads is the
    only way to obtain a different tree. Factory will set:
      - digest       : the Digest every node was hashed with
      - BuilderClass : the builder producing instances of this class
    """
    __slots__ = ("nodes", "data_positions", "_navigator")

    digest: Digest
    BuilderClass: Type

    def __init__(self, nodes: Iterable[Node], data_positions: Iterable[int]):
        if getattr(type(self), "digest", None) is None:
            raise TypeError(
                f"{type(self).__name__} has no digest; create tree classes with "
                "make_merkle_tree_classes()"
            )
        self.nodes: Tuple[Node, ...] = tuple(nodes)
        self.data_positions: Tuple[int, ...] = tuple(data_positions)
        if not self.nodes:
            raise EmptyInputError("a merkle tree must contain at least one node")
        self._check_layout()
        self._navigator = Navigator(self)

    def _check_layout(self) -> None:
        size = len(self.nodes)
        filler = Node.padding(self.digest)
        # nodes below a non-pair are never hashed into the root
        reachable = [False] * size
        for position, node in enumerate(self.nodes):
            reachable[position] = position == 0 or (
                reachable[(position - 1) // 2]
                and self.nodes[(position - 1) // 2].kind is NodeKind.PAIR
            )
            if not reachable[position] and node != filler:
                raise ValueError(
                    f"node at position {position} is outside the hashed tree "
                    "and must be plain padding"
                )
            if node.kind is NodeKind.PAIR and 2 * position + 2 >= size:
                raise ValueError(f"pair node at position {position} is missing a child")
        for index, position in enumerate(self.data_positions):
            if not 0 <= position < size or not self.nodes[position].is_data():
                raise ValueError(
                    f"data position {position} for payload {index} does not hold a data block"
                )

    @classmethod
    def from_payloads(cls, payloads: Iterable[Payload]) -> MerkleTreeBase:
        """Build a tree of this class over `payloads`."""
        return cls.BuilderClass().build(payloads)

    # Aggregate properties
    @property
    def root(self) -> Node:
        return self.nodes[0]

    def root_hash(self) -> bytes:
        return self.nodes[0].hash

    @property
    def height(self) -> int:
        """Number of pair levels above the data blocks; 0 for a single payload."""
        return Navigator.depth(len(self.nodes) - 1)

    @property
    def payload_count(self) -> int:
        return len(self.data_positions)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MerkleTreeBase):
            return NotImplemented
        return self.nodes == other.nodes and self.data_positions == other.data_positions

    __hash__ = None

    def __str__(self):
        return (f"{self.__class__.__name__}(root={self.root.short_hash()}, "
                f"payloads={self.payload_count}, height={self.height})")

    __repr__ = __str__

    # Navigation
    def node_at(self, position: int) -> Optional[Node]:
        return self._navigator.node_at(position)

    def parent_of(self, position: int) -> Optional[NodeRef]:
        return self._navigator.parent(position)

    def left_of(self, position: int) -> Optional[NodeRef]:
        return self._navigator.left(position)

    def right_of(self, position: int) -> Optional[NodeRef]:
        return self._navigator.right(position)

    def lookup_data(self, index: int) -> Optional[Node]:
        """
        Data block of the `index`-th original payload in O(1).

        Returns:
            Optional[Node]: None if `index` is outside [0, payload_count).
        """
        if 0 <= index < len(self.data_positions):
            return self.nodes[self.data_positions[index]]
        return None

    def iter_data_blocks(self) -> Iterator[Node]:
        """Yield the data blocks in insertion order."""
        for position in self.data_positions:
            yield self.nodes[position]

    def payloads(self) -> List[bytes]:
        return [node.payload for node in self.iter_data_blocks()]

    def levels(self) -> Iterator[Tuple[Node, ...]]:
        """Yield the nodes of each level, root level first."""
        start = 0
        width = 1
        while start < len(self.nodes):
            yield self.nodes[start:start + width]
            start += width
            width *= 2

    # Verification
    def verify(self) -> Optional[Mismatch]:
        return Verifier(self.digest).verify(self)

    def verify_node(self, position: int) -> Optional[Mismatch]:
        return Verifier(self.digest).verify_node(self, position)

    def verify_integrity(self) -> bool:
        """
        Verify the integrity of the entire tree by recomputing hashes.

        Returns:
            bool: True if tree integrity is intact, False otherwise
        """
        return self.verify() is None

    # Profiling
    @classmethod
    def get_performance_report(cls, sort_by: str = 'total_time') -> str:
        return PerformanceTracker.get_instance().report(sort_by)

    @classmethod
    def reset_performance_metrics(cls) -> None:
        PerformanceTracker.get_instance().reset()

    def print_structure(self, indent: int = 0, max_depth: Optional[int] = None) -> str:
        """
        Render the tree depth-first as indented text, one node per line.

        Args:
            indent: Spaces to prefix the root line with.
            max_depth: Stop descending below this level; None renders all.
        """
        result = []

        def _render(position: int, depth: int) -> None:
            prefix = ' ' * (indent + 4 * depth)
            if max_depth is not None and depth > max_depth:
                result.append(f"{prefix}... (max depth reached)")
                return
            node = self.nodes[position]
            line = f"{prefix}[{position}] {node.kind.value} {node.short_hash()}"
            if node.is_data():
                line += f" payload={node.payload!r}"
            result.append(line)
            for child in (self.left_of(position), self.right_of(position)):
                if child is not None:
                    _render(child.position, depth + 1)

        _render(0, 0)
        return "\n".join(result)


@dataclass
class Stats:
    height: int
    node_count: int
    data_count: int
    pair_count: int
    padding_count: int
    bottom_padding_count: int
    data_in_bottom_level: bool
    data_in_order: bool
    pairs_have_children: bool
    terminals_childless: bool


def tree_stats_(tree: MerkleTreeBase) -> Stats:
    """
    Returns aggregated statistics and layout flags for a tree in O(n) time.
    """
    nodes = tree.nodes
    size = len(nodes)
    height = tree.height
    bottom_start = (1 << height) - 1

    data_count = pair_count = padding_count = bottom_padding_count = 0
    data_in_bottom_level = True
    pairs_have_children = True
    terminals_childless = True

    for position, node in enumerate(nodes):
        kind = node.kind
        if kind is NodeKind.DATA:
            data_count += 1
            if position < bottom_start:
                data_in_bottom_level = False
        elif kind is NodeKind.PAIR:
            pair_count += 1
            if tree.left_of(position) is None or tree.right_of(position) is None:
                pairs_have_children = False
        elif kind is NodeKind.PADDING:
            padding_count += 1
            if position >= bottom_start:
                bottom_padding_count += 1

        if kind is not NodeKind.PAIR and (
            tree.left_of(position) is not None or tree.right_of(position) is not None
        ):
            terminals_childless = False

    positions = list(tree.data_positions)
    data_in_order = (
        positions == list(range(bottom_start, bottom_start + len(positions)))
        and len(positions) == data_count
    )

    return Stats(
        height=height,
        node_count=size,
        data_count=data_count,
        pair_count=pair_count,
        padding_count=padding_count,
        bottom_padding_count=bottom_padding_count,
        data_in_bottom_level=data_in_bottom_level,
        data_in_order=data_in_order,
        pairs_have_children=pairs_have_children,
        terminals_childless=terminals_childless,
    )
