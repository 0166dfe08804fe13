"""Tests for digest-bound tree class creation"""
# pylint: skip-file

import unittest

from merkle_trees import (
    DEFAULT_DIGEST,
    MerkleTree,
    MerkleTreeBase,
    TreeBuilder,
    build,
    create_merkle_tree,
    get_digest,
    make_merkle_tree_classes,
)
from merkle_trees.base import Blake3Digest, Sha256Digest
from merkle_trees.builder import TreeBuilderBase

PAYLOADS = [b"foxtrot", b"uniform", b"charlie", b"kilo"]


class TestFactory(unittest.TestCase):

    def test_classes_are_cached(self):
        first = make_merkle_tree_classes("sha256")
        second = make_merkle_tree_classes("sha256")
        self.assertIs(first[0], second[0])
        self.assertIs(first[1], second[1])

    def test_class_wiring(self):
        TreeD, BuilderD = make_merkle_tree_classes("sha256")
        self.assertTrue(issubclass(TreeD, MerkleTreeBase))
        self.assertTrue(issubclass(BuilderD, TreeBuilderBase))
        self.assertEqual(TreeD.__name__, "MerkleTree_Sha256")
        self.assertEqual(BuilderD.__name__, "TreeBuilder_Sha256")
        self.assertIs(TreeD.BuilderClass, BuilderD)
        self.assertIs(BuilderD.TreeClass, TreeD)
        self.assertIsInstance(TreeD.digest, Sha256Digest)

    def test_default_classes(self):
        self.assertEqual(DEFAULT_DIGEST, "blake3")
        self.assertEqual((MerkleTree, TreeBuilder), make_merkle_tree_classes())
        self.assertIsInstance(MerkleTree.digest, Blake3Digest)

    def test_get_digest(self):
        self.assertIsInstance(get_digest("blake3"), Blake3Digest)
        self.assertIsInstance(get_digest("sha256"), Sha256Digest)

    def test_unknown_digest(self):
        with self.assertRaises(ValueError):
            get_digest("md5")
        with self.assertRaises(ValueError):
            make_merkle_tree_classes("md5")
        with self.assertRaises(ValueError):
            build(PAYLOADS, digest="md5")

    def test_create_merkle_tree(self):
        tree = create_merkle_tree(PAYLOADS, "sha256")
        self.assertIsInstance(tree, make_merkle_tree_classes("sha256")[0])
        self.assertEqual(tree, build(PAYLOADS, digest="sha256"))
        self.assertTrue(tree.verify_integrity())

    def test_digests_give_different_roots(self):
        blake = create_merkle_tree(PAYLOADS)
        sha = create_merkle_tree(PAYLOADS, "sha256")
        self.assertNotEqual(blake.root_hash(), sha.root_hash())
        self.assertNotEqual(blake, sha)

    def test_from_payloads(self):
        tree = MerkleTree.from_payloads(PAYLOADS)
        self.assertIsInstance(tree, MerkleTree)
        self.assertEqual(tree, build(PAYLOADS))


if __name__ == "__main__":
    unittest.main()
