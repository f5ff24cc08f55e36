"""
balanced_merkle — Keccak-256 Merkle roots and inclusion proofs over balanced trees.

Quick-start imports::

    from balanced_merkle import build_root, build_proof, verify_proof
"""

# Primitives
from balanced_merkle.base import (
    DIGEST_SIZE,
    AbstractMerkleTree,
    Digest,
    Proof,
    leaf_digest,
    leaf_digests,
    pair_digest,
)
from balanced_merkle.errors import EmptyTreeError, InvalidLeafError, MerkleTreeError

# Invariants & stats
from balanced_merkle.invariants import InvariantError, assert_balanced_shape, check_proofs

# Tree construction
from balanced_merkle.tree import (
    BalancedMerkleTree,
    build_path,
    build_path_from_digests,
    build_proof,
    build_root,
    build_root_from_digests,
)
from balanced_merkle.tree_stats import Stats, expected_path_length, tree_stats
from balanced_merkle.utils import count_last_level_leaves

# Verification
from balanced_merkle.verify import fold_path, verify_path, verify_proof

__all__ = [
    # Primitives
    "DIGEST_SIZE",
    "AbstractMerkleTree",
    # Tree construction
    "BalancedMerkleTree",
    "Digest",
    # Errors
    "EmptyTreeError",
    # Invariants & stats
    "InvariantError",
    "InvalidLeafError",
    "MerkleTreeError",
    "Proof",
    "Stats",
    "assert_balanced_shape",
    "build_path",
    "build_path_from_digests",
    "build_proof",
    "build_root",
    "build_root_from_digests",
    "check_proofs",
    "count_last_level_leaves",
    "expected_path_length",
    # Verification
    "fold_path",
    "leaf_digest",
    "leaf_digests",
    "pair_digest",
    "tree_stats",
    "verify_path",
    "verify_proof",
]
