"""
Utility functions for the balancing rule of the Merkle reduction.
"""
from typing import List


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def floor_log2(n: int) -> int:
    """
    Exact floor(log2(n)) for a positive integer.

    Raises:
        ValueError: If n is not positive.
    """
    if n <= 0:
        raise ValueError("n must be a positive integer")
    return n.bit_length() - 1


def count_last_level_leaves(n: int) -> int:
    """
    Calculate how many of ``n`` leaves are paired at the bottom level.

    With ``t = floor(log2(n))`` this is ``n`` when ``n == 2**t`` and
    ``2n - 2**(t + 1)`` otherwise. Pairing that many leaves and carrying
    the remaining ``n - m`` forward unchanged yields a power-of-two level:
    ``2**t`` digests, or ``n // 2`` when every leaf is paired.

    Parameters:
        n (int): Number of leaves, must be at least 1.

    Returns:
        int: The number of leaves ``m`` eligible for pairing.

    Raises:
        ValueError: If n is smaller than 1.
    """
    if n < 1:
        raise ValueError("n must be at least 1")
    if is_power_of_two(n):
        return n
    t = floor_log2(n)
    return 2 * n - (1 << (t + 1))


def level_sizes(n: int) -> List[int]:
    """Sizes of all levels from the leaves (first) to the root (last)."""
    m = count_last_level_leaves(n)
    sizes = [n]
    if n == 1:
        return sizes
    size = m // 2 + (n - m)
    sizes.append(size)
    while size > 1:
        size //= 2
        sizes.append(size)
    return sizes
