from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from typing import NamedTuple, Optional, Union
import hashlib

import blake3

Payload = Union[bytes, bytearray, memoryview, str]


class EmptyInputError(ValueError):
    """Raised when a merkle tree is requested for zero payloads."""
    pass


class Digest(ABC):
    """
    Abstract base class for the fixed-output hash function a tree commits with.

    Implementations must be deterministic and stateless: hashing the same
    bytes twice always yields the same digest.
    """
    name: str
    digest_size: int

    @abstractmethod
    def hash(self, data: bytes) -> bytes:
        """
        Hash a byte sequence.

        Parameters:
            data (bytes): The bytes to hash.

        Returns:
            bytes: A digest of exactly `digest_size` bytes.
        """
        pass

    def hash_pair(self, left: bytes, right: bytes) -> bytes:
        """Hash the concatenation of two child digests, used for pair nodes."""
        return self.hash(left + right)

    @property
    def padding_hash(self) -> bytes:
        """The fixed sentinel digest carried by padding nodes (all zero bytes)."""
        return bytes(self.digest_size)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, digest_size={self.digest_size})"


class Blake3Digest(Digest):
    name = "blake3"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return blake3.blake3(data).digest()


class Sha256Digest(Digest):
    name = "sha256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()


class NodeKind(Enum):
    """The closed set of node variants stored in a tree."""
    DATA = "data"
    PAIR = "pair"
    PADDING = "padding"


@dataclass(frozen=True)
class Node:
    """
    Represents a single position of a merkle tree.

    Attributes:
        kind (NodeKind): Which variant this node is.
        hash (bytes): The digest stored for this node.
        payload (Optional[bytes]): The original bytes for data blocks; None for
            pair and padding nodes.
    """
    __slots__ = ("kind", "hash", "payload")

    kind: NodeKind
    hash: bytes
    payload: Optional[bytes]

    @classmethod
    def data(cls, payload: bytes, digest: Digest) -> "Node":
        """Create a data block whose hash is the digest of `payload`."""
        return cls(NodeKind.DATA, digest.hash(payload), payload)

    @classmethod
    def pair(cls, left: "Node", right: "Node", digest: Digest) -> "Node":
        """Create an interior node committing to the hashes of `left` and `right`."""
        return cls(NodeKind.PAIR, digest.hash_pair(left.hash, right.hash), None)

    @classmethod
    def padding(cls, digest: Digest) -> "Node":
        """Create a padding sentinel carrying the digest's fixed padding hash."""
        return cls(NodeKind.PADDING, digest.padding_hash, None)

    def get_hash(self) -> bytes:
        return self.hash

    def is_data(self) -> bool:
        return self.kind is NodeKind.DATA

    def is_pair(self) -> bool:
        return self.kind is NodeKind.PAIR

    def is_padding(self) -> bool:
        return self.kind is NodeKind.PADDING

    def has_children(self) -> bool:
        """Only pair nodes have children; data blocks and padding are terminal."""
        return self.kind is NodeKind.PAIR

    def hex(self) -> str:
        return self.hash.hex()

    def short_hash(self) -> str:
        """Create a short representation of the hash for display purposes."""
        s = self.hash.hex()
        return s if len(s) <= 10 else f"{s[:4]}...{s[-4:]}"

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return f"{cls}(kind={self.kind.value}, hash={self.short_hash()}, payload={self.payload!r})"


class NodeRef(NamedTuple):
    """
    A node found by navigation together with its array position.

    Attributes:
        position (int): The node's index in the tree's node array.
        node (Node): The node stored at that index.
    """
    position: int
    node: Node


class Mismatch(NamedTuple):
    """
    The first integrity failure found while verifying a tree.

    Attributes:
        position (int): Array position of the node whose stored hash is wrong.
        expected (bytes): The hash recomputed from the node's content or children.
        found (bytes): The hash actually stored at that position.
    """
    position: int
    expected: bytes
    found: bytes

    def __str__(self) -> str:
        return (f"Mismatch at position {self.position}: "
                f"expected {self.expected.hex()}, found {self.found.hex()}")


def to_payload_bytes(payload: Payload) -> bytes:
    """
    Normalize a payload to bytes.

    Strings are encoded as UTF-8; bytes-like objects are copied into an
    immutable bytes object.

    Raises:
        TypeError: If the payload is neither bytes-like nor a string.
    """
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, (bytearray, memoryview)):
        return bytes(payload)
    if isinstance(payload, str):
        return payload.encode("utf-8")
    raise TypeError(f"payload must be bytes-like or str, got {type(payload).__name__}")
