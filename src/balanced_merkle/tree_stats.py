"""Shape statistics for balanced Merkle trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from balanced_merkle.utils import (
    count_last_level_leaves,
    floor_log2,
    is_power_of_two,
    level_sizes,
)


@dataclass
class Stats:
    """Aggregated shape statistics for a tree over ``leaf_count`` leaves."""

    leaf_count: int
    height: int
    last_level_leaves: int
    carried_leaves: int
    level_sizes: List[int]
    min_path_length: int
    max_path_length: int


def expected_path_length(n: int, index: int) -> int:
    """
    Number of siblings on the path of the leaf at ``index``.

    Leaves paired at the bottom level sit one level deeper than the leaves
    carried forward, unless ``n`` is a power of two and every leaf is paired.
    """
    if not 0 <= index < n:
        raise IndexError(f"leaf index {index} out of range for {n} leaves")
    t = floor_log2(n)
    if is_power_of_two(n):
        return t
    return t + 1 if index < count_last_level_leaves(n) else t


def tree_stats(n: int) -> Stats:
    """
    Returns the shape of the tree over ``n`` leaves in **O(log n)** time.

    No digests are computed.
    """
    m = count_last_level_leaves(n)
    sizes = level_sizes(n)
    t = floor_log2(n)
    balanced = is_power_of_two(n)
    return Stats(
        leaf_count=n,
        height=len(sizes) - 1,
        last_level_leaves=m,
        carried_leaves=n - m,
        level_sizes=sizes,
        min_path_length=t,
        max_path_length=t if balanced else t + 1,
    )
