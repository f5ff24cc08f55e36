"""Shared primitives: leaf and pair hashing, proofs and the tree interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from eth_utils import encode_hex, keccak

# Keccak-256 output, compared as unsigned big-endian integers
Digest = bytes

DIGEST_SIZE = 32

_RECORD_TYPES = (bytes, bytearray, memoryview)


def leaf_digest(record: bytes) -> Digest:
    """Keccak-256 digest of a raw record."""
    if not isinstance(record, _RECORD_TYPES):
        raise TypeError(f"leaf record must be bytes-like, got {type(record).__name__}")
    return keccak(bytes(record))


def pair_digest(a: Digest, b: Digest) -> Digest:
    """
    Parent digest of two siblings.

    The siblings are concatenated in ascending byte order before hashing, so
    the result does not depend on which side of the pair each one came from.
    """
    if a <= b:
        return keccak(a + b)
    return keccak(b + a)


def leaf_digests(records: Iterable[bytes]) -> List[Digest]:
    """Hash every record into the bottom level of the tree."""
    return [leaf_digest(record) for record in records]


@dataclass(frozen=True)
class Proof:
    """A record together with the sibling digests linking it to the root.

    ``leaf`` holds the bytes of the record as supplied by the caller; ``path``
    is ordered bottom-up, the leaf-adjacent sibling first.
    """

    leaf: bytes
    path: Tuple[Digest, ...]

    def __len__(self) -> int:
        return len(self.path)

    @property
    def leaf_hash(self) -> Digest:
        return leaf_digest(self.leaf)

    def compute_root(self) -> Digest:
        """Fold the leaf digest through the path."""
        from balanced_merkle.verify import fold_path

        return fold_path(self.leaf_hash, self.path)

    def hex_path(self) -> List[str]:
        return [encode_hex(sibling) for sibling in self.path]


class AbstractMerkleTree(ABC):
    """Interface of a stateless Merkle tree builder.

    Implementations recompute the tree from the full leaf set on every call;
    no tree object is kept between calls.
    """

    @classmethod
    @abstractmethod
    def generate_tree_root(cls, leaves_data: Sequence[bytes]) -> Digest:
        """Return the root digest of the tree over ``leaves_data``."""

    @classmethod
    @abstractmethod
    def generate_merkle_path(cls, leaf: bytes, leaves_data: Sequence[bytes]) -> List[Digest]:
        """Return the sibling path from ``leaf`` to the root."""

    @classmethod
    @abstractmethod
    def merkle_proof(cls, leaf: bytes, leaves_data: Sequence[bytes]) -> Proof:
        """Return ``leaf`` packaged with its sibling path."""
