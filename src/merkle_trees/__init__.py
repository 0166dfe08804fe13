"""
Merkle trees over an array-based binary tree layout.

A tree is built once from an ordered sequence of payloads, stored as a flat
node array whose positions imply parent/child relations, and can then be
navigated and verified without mutation.
"""

from merkle_trees.base import (
    Blake3Digest,
    Digest,
    EmptyInputError,
    Mismatch,
    Node,
    NodeKind,
    NodeRef,
    Sha256Digest,
)

from merkle_trees.merkle_tree_base import (
    MerkleTreeBase,
    Stats,
    tree_stats_,
)

from merkle_trees.factory import (
    DEFAULT_DIGEST,
    create_merkle_tree,
    get_digest,
    make_merkle_tree_classes,
)

from merkle_trees.merkle_tree import (
    MerkleTree,
    TreeBuilder,
    build,
    left,
    lookup_data,
    parent,
    right,
    root_hash,
    verify,
)

__all__ = [
    'Blake3Digest',
    'Digest',
    'EmptyInputError',
    'Mismatch',
    'Node',
    'NodeKind',
    'NodeRef',
    'Sha256Digest',
    'MerkleTreeBase',
    'Stats',
    'tree_stats_',
    'DEFAULT_DIGEST',
    'create_merkle_tree',
    'get_digest',
    'make_merkle_tree_classes',
    'MerkleTree',
    'TreeBuilder',
    'build',
    'left',
    'lookup_data',
    'parent',
    'right',
    'root_hash',
    'verify',
]
