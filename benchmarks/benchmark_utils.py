"""
Benchmarking utilities for balanced Merkle trees.

This module provides common utilities and base classes for ASV benchmarking
that work optimally with ASV's built-in timing and stabilization mechanisms.

Reproducibility:
    All random data generation uses deterministic seeds by default.
    The default seed can be overridden via the BENCHMARK_SEED environment variable.

Logging:
    Benchmarks should be run with logging at INFO level or higher to avoid
    performance contamination from verbose debug output.
"""

import gc
import logging
import os
from typing import List

import numpy as np

# Default seed for deterministic benchmarking - can be overridden via environment variable
DEFAULT_BENCHMARK_SEED = int(os.environ.get('BENCHMARK_SEED', '42'))


class BenchmarkUtils:
    """Utility class for ASV benchmarking operations.

    This class provides methods for generating deterministic leaf records
    while ensuring reproducibility.
    """

    @staticmethod
    def check_logging_level():
        """
        Check if logging level is appropriate for benchmarking.

        Raises if DEBUG or lower (more verbose) logging is enabled, as the
        per-tree debug output contaminates benchmark results with I/O overhead.
        """
        merkle_logger = logging.getLogger("balanced_merkle")
        effective_level = merkle_logger.getEffectiveLevel()
        if effective_level <= logging.DEBUG:
            raise ValueError(
                f"Logging level is set to {logging.getLevelName(effective_level)}. "
                "Benchmarks require logging to be at INFO level or higher to avoid "
                "performance contamination from verbose debug output."
            )

    @staticmethod
    def generate_deterministic_records(size: int,
                                       seed: int = None,
                                       record_size: int = 32,
                                       distribution: str = 'random') -> List[bytes]:
        """
        Generate deterministic leaf records for benchmarking.

        Args:
            size: Number of records to generate
            seed: Random seed for reproducibility. If None, uses DEFAULT_BENCHMARK_SEED.
            record_size: Length of each record in bytes ('random' only)
            distribution: Record pattern ('random', 'sequential', 'repeating')

        Returns:
            List of records

        Note:
            'sequential' records are distinct big-endian counters; 'repeating'
            records are single bytes wrapping at 256, so digests repeat.
        """
        if seed is None:
            seed = DEFAULT_BENCHMARK_SEED

        if distribution == 'random':
            rng = np.random.default_rng(seed)
            data = rng.integers(0, 256, size=(size, record_size), dtype=np.uint8)
            return [row.tobytes() for row in data]
        elif distribution == 'sequential':
            width = max(1, (size.bit_length() + 7) // 8)
            return [i.to_bytes(width, 'big') for i in range(size)]
        elif distribution == 'repeating':
            return [bytes([i % 256]) for i in range(size)]
        else:
            raise ValueError(f"Unknown distribution: {distribution}")

    @staticmethod
    def sample_indices(size: int, count: int, seed: int = None) -> List[int]:
        """Pick ``count`` distinct leaf indices (all of them if ``count >= size``)."""
        if seed is None:
            seed = DEFAULT_BENCHMARK_SEED
        if count >= size:
            return list(range(size))
        rng = np.random.default_rng(seed)
        return sorted(rng.choice(size, size=count, replace=False).tolist())


class BaseBenchmark:
    """Base class for ASV benchmarks optimized for ASV's built-in timing.

    This class provides a standard setup/teardown pattern that ensures:
    - Garbage collection is disabled during timed sections
    - Logging level is appropriate for benchmarking
    """

    params = []
    param_names = []

    # Let ASV handle timing optimization automatically
    warmup_time = 0.1
    sample_time = 0.4

    def setup(self, *params):
        """Setup method called before each benchmark.

        Subclasses should:
        1. Call super().setup(*params) first
        2. Prepare test data
        3. Call gc.collect() to clean up setup overhead
        4. Call gc.disable() to prevent GC during measurement
        """
        BenchmarkUtils.check_logging_level()

    def teardown(self, *params):
        """Re-enable garbage collection after measurement completes."""
        if not gc.isenabled():
            gc.enable()
