"""Shared invariant-checking utilities.

Used by both the stats scripts and the test suite to validate the
balancing rule and the agreement between roots and authentication paths.
"""

from __future__ import annotations

from typing import Sequence

from balanced_merkle.base import Digest, leaf_digest
from balanced_merkle.logging_config import get_logger
from balanced_merkle.tree import build_path, build_root
from balanced_merkle.tree_stats import expected_path_length
from balanced_merkle.utils import count_last_level_leaves, floor_log2, is_power_of_two, level_sizes
from balanced_merkle.verify import fold_path

logger = get_logger(__name__)


class InvariantError(Exception):
    """Raised when a balanced Merkle tree invariant is violated."""


def assert_balanced_shape(n: int) -> None:
    """Check the level sizes of the tree over ``n`` leaves, raising :class:`InvariantError` on the first failure."""
    m = count_last_level_leaves(n)
    if m > n:
        raise InvariantError(f"Invariant failed: m={m} > n={n}")
    if not is_power_of_two(n) and m % 2 != 0:
        raise InvariantError(f"Invariant failed: m={m} is odd for n={n}")

    sizes = level_sizes(n)
    if sizes[0] != n:
        raise InvariantError(f"Invariant failed: bottom level has {sizes[0]} digests, expected {n}")
    if sizes[-1] != 1:
        raise InvariantError(f"Invariant failed: top level has {sizes[-1]} digests, expected 1")
    if n == 1:
        return

    # a power of two pairs every leaf, otherwise the carried leaves fill the level up to 2**t
    expected = n // 2 if is_power_of_two(n) else 1 << floor_log2(n)
    if sizes[1] != expected:
        raise InvariantError(f"Invariant failed: level after first reduction has {sizes[1]} digests, expected {expected}")
    for lower, upper in zip(sizes[1:], sizes[2:]):
        if lower != 2 * upper:
            raise InvariantError(f"Invariant failed: level of {lower} digests reduced to {upper}")


def check_proofs(records: Sequence[bytes]) -> Digest:
    """
    Build the path of every record and check it against the root.

    Every path must fold to the root. For distinct records the path length
    must also match the depth predicted by the balancing rule.

    Returns:
        The root of the tree over ``records``.

    Raises:
        InvariantError: On the first record whose path violates an invariant.
    """
    root = build_root(records)
    n = len(records)
    distinct = len(set(bytes(r) for r in records)) == n
    assert_balanced_shape(n)

    for index, record in enumerate(records):
        path = build_path(record, records)
        if fold_path(leaf_digest(record), path) != root:
            raise InvariantError(f"Invariant failed: path of leaf {index} does not fold to the root")
        if distinct:
            expected = expected_path_length(n, index)
            if len(path) != expected:
                raise InvariantError(
                    f"Invariant failed: path of leaf {index} has {len(path)} siblings, expected {expected}"
                )

    logger.debug("Checked %d proofs against root %s", n, root.hex())
    return root
