"""Correctness verification for benchmark trees."""

import logging
from typing import List, Sequence

from balanced_merkle.base import Digest, leaf_digest
from balanced_merkle.invariants import InvariantError, assert_balanced_shape
from balanced_merkle.tree import build_path
from balanced_merkle.tree_stats import Stats, expected_path_length
from balanced_merkle.verify import fold_path


def verify_invariants(
    records: Sequence[bytes],
    root: Digest,
    stats: Stats,
    indices: List[int],
) -> bool:
    """
    Check shape invariants and the paths of the sampled leaves.

    This is the verify phase - not timed in benchmarks.

    Args:
        records: Leaf records the tree was built over (assumed distinct)
        root: Root computed during measurement
        stats: Shape statistics of the tree
        indices: Leaf indices whose paths are checked

    Returns:
        True if all invariants pass, False otherwise
    """
    all_passed = True
    n = len(records)

    try:
        assert_balanced_shape(n)
    except InvariantError as e:
        logging.error("%s", e)
        all_passed = False

    if stats.leaf_count != n:
        logging.error("Invariant failed: stats.leaf_count=%d ≠ n=%d", stats.leaf_count, n)
        all_passed = False

    for index in indices:
        path = build_path(records[index], records)
        if fold_path(leaf_digest(records[index]), path) != root:
            logging.error("Invariant failed: path of leaf %d does not fold to the root", index)
            all_passed = False
        expected = expected_path_length(n, index)
        if len(path) != expected:
            logging.error(
                "Invariant failed: path of leaf %d has %d siblings, expected %d",
                index, len(path), expected
            )
            all_passed = False
        if not stats.min_path_length <= len(path) <= stats.max_path_length:
            logging.error(
                "Invariant failed: path length %d outside [%d, %d]",
                len(path), stats.min_path_length, stats.max_path_length
            )
            all_passed = False

    return all_passed
