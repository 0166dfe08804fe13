"""Functional interface to merkle trees"""

from typing import Iterable, Optional

from merkle_trees.base import Mismatch, Node, NodeRef, Payload
from merkle_trees.factory import DEFAULT_DIGEST, make_merkle_tree_classes
from merkle_trees.merkle_tree_base import MerkleTreeBase

MerkleTree, TreeBuilder = make_merkle_tree_classes(DEFAULT_DIGEST)


def build(payloads: Iterable[Payload], digest: str = DEFAULT_DIGEST) -> MerkleTreeBase:
    """
    Build a merkle tree over an ordered sequence of payloads.

    >>> tree = build([b"alpha", b"bravo", b"charlie"])
    >>> tree.height
    2

    Raises:
        EmptyInputError: If `payloads` is empty.
    """
    _, builder_cls = make_merkle_tree_classes(digest)
    return builder_cls().build(payloads)


def root_hash(tree: MerkleTreeBase) -> bytes:
    return tree.root_hash()


def verify(tree: MerkleTreeBase) -> Optional[Mismatch]:
    """Return None if the tree is intact, otherwise the first Mismatch found."""
    return tree.verify()


def parent(tree: MerkleTreeBase, position: int) -> Optional[NodeRef]:
    return tree.parent_of(position)


def left(tree: MerkleTreeBase, position: int) -> Optional[NodeRef]:
    return tree.left_of(position)


def right(tree: MerkleTreeBase, position: int) -> Optional[NodeRef]:
    return tree.right_of(position)


def lookup_data(tree: MerkleTreeBase, original_index: int) -> Optional[Node]:
    return tree.lookup_data(original_index)
