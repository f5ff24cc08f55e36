"""Verification of authentication paths against a published root.

These helpers perform the same fold an external verifier (for example a
sorted-pair Merkle proof check in a smart contract) runs: the running digest
is combined with each sibling in path order using :func:`pair_digest`.
"""

from __future__ import annotations

from typing import Iterable

from balanced_merkle.base import DIGEST_SIZE, Digest, Proof, leaf_digest, pair_digest


def _check_digest(value: bytes, what: str) -> None:
    if len(value) != DIGEST_SIZE:
        raise ValueError(f"{what} must be {DIGEST_SIZE} bytes, got {len(value)}")


def fold_path(leaf_hash: Digest, path: Iterable[Digest]) -> Digest:
    """Recompute the root from a leaf digest and its sibling path.

    An empty path yields ``leaf_hash`` itself, matching a single-leaf tree.
    """
    _check_digest(leaf_hash, "leaf digest")
    acc = leaf_hash
    for sibling in path:
        _check_digest(sibling, "path entry")
        acc = pair_digest(acc, sibling)
    return acc


def verify_path(leaf: bytes, path: Iterable[Digest], root: Digest) -> bool:
    """Check that the record ``leaf`` is included under ``root``."""
    _check_digest(root, "root")
    return fold_path(leaf_digest(leaf), path) == root


def verify_proof(proof: Proof, root: Digest) -> bool:
    return verify_path(proof.leaf, proof.path, root)
