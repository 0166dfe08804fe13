"""Factory for merkle tree classes bound to a digest"""

from typing import Dict, Iterable, Tuple, Type
import logging

from merkle_trees.base import Blake3Digest, Digest, Payload, Sha256Digest
from merkle_trees.builder import TreeBuilderBase
from merkle_trees.merkle_tree_base import MerkleTreeBase

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

DEFAULT_DIGEST = "blake3"

DIGESTS: Dict[str, Type[Digest]] = {
    Blake3Digest.name: Blake3Digest,
    Sha256Digest.name: Sha256Digest,
}

# Cache for previously created classes to avoid recreating them
_class_cache: Dict[str, Tuple[Type[MerkleTreeBase], Type[TreeBuilderBase]]] = {}


def get_digest(name: str = DEFAULT_DIGEST) -> Digest:
    """
    Instantiate the digest registered under `name`.

    Raises:
        ValueError: If no digest is registered under `name`.
    """
    try:
        return DIGESTS[name]()
    except KeyError:
        raise ValueError(
            f"unknown digest {name!r}, expected one of {sorted(DIGESTS)}"
        ) from None


def make_merkle_tree_classes(digest_name: str = DEFAULT_DIGEST) -> Tuple[
    Type[MerkleTreeBase],
    Type[TreeBuilderBase]
]:
    """
    Factory function to generate tree and builder classes bound to one digest.

    Returns:
        MerkleTreeD  – subclass of MerkleTreeBase with digest and BuilderClass set.
        TreeBuilderD – subclass of TreeBuilderBase with digest and TreeClass set.
    """
    if digest_name in _class_cache:
        logger.debug("Using cached classes for digest=%s", digest_name)
        return _class_cache[digest_name]

    digest = get_digest(digest_name)
    suffix = digest_name.capitalize()
    logger.debug("Creating new classes for digest=%s", digest_name)

    # 1) Tree class carries the digest; BuilderClass is set once the builder exists
    MerkleTreeD = type(
        f"MerkleTree_{suffix}",
        (MerkleTreeBase,),
        {
            "digest": digest,
            "__slots__": ()
        }
    )

    # 2) Builder class references the already created tree class
    TreeBuilderD = type(
        f"TreeBuilder_{suffix}",
        (TreeBuilderBase,),
        {
            "digest": digest,
            "TreeClass": MerkleTreeD,
        }
    )

    # 3) Close the loop so trees can be built from the tree class directly
    setattr(MerkleTreeD, "BuilderClass", TreeBuilderD)
    logger.debug("Created %s and %s", MerkleTreeD.__name__, TreeBuilderD.__name__)

    _class_cache[digest_name] = (MerkleTreeD, TreeBuilderD)
    return MerkleTreeD, TreeBuilderD


def create_merkle_tree(payloads: Iterable[Payload],
                       digest_name: str = DEFAULT_DIGEST) -> MerkleTreeBase:
    """
    Build a new merkle tree over `payloads` using the named digest.

    Raises:
        EmptyInputError: If `payloads` is empty.
        ValueError: If `digest_name` is not registered.
    """
    _, TreeBuilderD = make_merkle_tree_classes(digest_name)
    return TreeBuilderD().build(payloads)
