"""Index arithmetic over the implicit binary tree layout"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Tuple

from merkle_trees.base import Node, NodeRef

if TYPE_CHECKING:
    from merkle_trees.merkle_tree_base import MerkleTreeBase


class Navigator:
    """
    Read-only parent/child navigation over a tree's flat node array.

    The root sits at position 0, the children of position i at 2i+1 and 2i+2
    and the parent of position i at (i-1)//2. Every lookup is O(1) and
    reports absence with None instead of raising.
    """
    __slots__ = ("nodes",)

    def __init__(self, tree: MerkleTreeBase):
        self.nodes: Tuple[Node, ...] = tree.nodes

    def _ref(self, position: int) -> Optional[NodeRef]:
        if 0 <= position < len(self.nodes):
            return NodeRef(position, self.nodes[position])
        return None

    def node_at(self, position: int) -> Optional[Node]:
        ref = self._ref(position)
        return ref.node if ref is not None else None

    def parent(self, position: int) -> Optional[NodeRef]:
        """
        Parent of the node at `position`.

        Returns:
            Optional[NodeRef]: None for the root or for a position that holds
                no node.
        """
        if position <= 0 or position >= len(self.nodes):
            return None
        return self._ref((position - 1) // 2)

    def left(self, position: int) -> Optional[NodeRef]:
        """Left child of the node at `position`, or None if it has none."""
        return self._child(position, 1)

    def right(self, position: int) -> Optional[NodeRef]:
        """Right child of the node at `position`, or None if it has none."""
        return self._child(position, 2)

    def children(self, position: int) -> Tuple[Optional[NodeRef], Optional[NodeRef]]:
        return self.left(position), self.right(position)

    def _child(self, position: int, offset: int) -> Optional[NodeRef]:
        ref = self._ref(position)
        # data blocks and padding are terminal
        if ref is None or not ref.node.has_children():
            return None
        return self._ref(2 * position + offset)

    @staticmethod
    def depth(position: int) -> int:
        """Level of `position` in the layout, the root being level 0."""
        if position < 0:
            raise ValueError(f"position must be non-negative, got {position}")
        return (position + 1).bit_length() - 1
