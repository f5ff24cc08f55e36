"""Balanced Merkle tree: root and authentication path construction.

The tree over ``n`` leaves is reduced level by level. With
``t = floor(log2(n))``, only the first ``m`` leaves of the bottom level are
paired (see :func:`count_last_level_leaves`); the remaining ``n - m`` leaves
are carried forward unchanged. The resulting level holds a power of two of
digests (``2**t``, or ``n // 2`` when ``n`` is itself a power of two), so
every following level is paired completely until one digest remains.

Both the root and the path computation walk the same levels in the same
order, which keeps their tree shapes identical for a given leaf sequence.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from eth_utils import encode_hex

from balanced_merkle.base import (
    AbstractMerkleTree,
    Digest,
    Proof,
    leaf_digest,
    leaf_digests,
    pair_digest,
)
from balanced_merkle.errors import EmptyTreeError, InvalidLeafError
from balanced_merkle.logging_config import get_logger
from balanced_merkle.utils import count_last_level_leaves

logger = get_logger(__name__)


def _pair_level(level: Sequence[Digest]) -> List[Digest]:
    """Hash a level two-at-a-time in sequence order."""
    _pair = pair_digest
    return [_pair(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]


def _pair_level_for_path(
    level: Sequence[Digest],
    current: Digest,
    path: List[Digest],
) -> Tuple[List[Digest], Digest]:
    """
    Hash a level like :func:`_pair_level` while following one branch.

    ``current`` is the digest that represents the target's subtree on this
    level. When it is one member of a pair, the other member is appended to
    ``path`` and the parent becomes the new representative.

    Returns:
        (parents, current): the next level and the updated representative.
    """
    _pair = pair_digest
    parents: List[Digest] = []
    append = parents.append
    for i in range(0, len(level) - 1, 2):
        left = level[i]
        right = level[i + 1]
        parent = _pair(left, right)
        if current == left:
            path.append(right)
            current = parent
        elif current == right:
            path.append(left)
            current = parent
        append(parent)
    return parents, current


def build_root_from_digests(digests: Sequence[Digest]) -> Digest:
    """
    Reduce a sequence of leaf digests to the root digest.

    A single digest is returned unchanged; no hashing happens at the top.

    Raises:
        EmptyTreeError: If ``digests`` is empty.
    """
    n = len(digests)
    if n == 0:
        raise EmptyTreeError()
    if n == 1:
        return digests[0]

    m = count_last_level_leaves(n)
    level = _pair_level(digests[:m])
    level.extend(digests[m:])
    # len(level) is now a power of two
    while len(level) > 1:
        level = _pair_level(level)

    logger.debug("Built root over %d leaves (%d paired at the bottom level)", n, m)
    return level[0]


def build_path_from_digests(target: Digest, digests: Sequence[Digest]) -> List[Digest]:
    """
    Collect the siblings of ``target`` from the bottom level up to the root.

    The path is empty for a single-leaf tree. If ``target`` does not occur in
    ``digests`` no sibling is ever matched and the returned path does not fold
    to the root.

    Raises:
        EmptyTreeError: If ``digests`` is empty.
    """
    n = len(digests)
    if n == 0:
        raise EmptyTreeError()

    path: List[Digest] = []
    if n == 1:
        if target != digests[0]:
            logger.warning("Leaf %s is not part of the leaf set", encode_hex(target))
        return path

    m = count_last_level_leaves(n)
    level, current = _pair_level_for_path(digests[:m], target, path)
    level.extend(digests[m:])
    while len(level) > 1:
        level, current = _pair_level_for_path(level, current, path)

    if current != level[0]:
        logger.warning(
            "Leaf %s is not part of the leaf set; returning a path of %d siblings that does not reach the root",
            encode_hex(target), len(path),
        )
    return path


def build_root(leaves: Iterable[bytes]) -> Digest:
    """
    Build the Merkle root over raw records.

    Raises:
        EmptyTreeError: If ``leaves`` is empty.
    """
    return build_root_from_digests(leaf_digests(leaves))


def build_path(leaf: bytes, leaves: Iterable[bytes]) -> List[Digest]:
    """
    Build the authentication path for the record ``leaf``.

    Raises:
        InvalidLeafError: If ``leaf`` is empty.
        EmptyTreeError: If ``leaves`` is empty.
    """
    if len(leaf) == 0:
        raise InvalidLeafError()
    digests = leaf_digests(leaves)
    if not digests:
        raise EmptyTreeError()
    return build_path_from_digests(leaf_digest(leaf), digests)


def build_proof(leaf: bytes, leaves: Iterable[bytes]) -> Proof:
    """Build the path for ``leaf`` and package it with the record itself."""
    path = build_path(leaf, leaves)
    # copy so a later change to a mutable caller buffer cannot alter the proof
    return Proof(leaf=bytes(leaf), path=tuple(path))


class BalancedMerkleTree(AbstractMerkleTree):
    """Stateless balanced Merkle tree over raw records."""

    @classmethod
    def generate_tree_root(cls, leaves_data: Sequence[bytes]) -> Digest:
        return build_root(leaves_data)

    @classmethod
    def generate_merkle_path(cls, leaf: bytes, leaves_data: Sequence[bytes]) -> List[Digest]:
        return build_path(leaf, leaves_data)

    @classmethod
    def merkle_proof(cls, leaf: bytes, leaves_data: Sequence[bytes]) -> Proof:
        return build_proof(leaf, leaves_data)
