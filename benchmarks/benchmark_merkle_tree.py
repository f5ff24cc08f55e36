"""
ASV benchmarks for balanced Merkle tree operations.

Covers root construction from raw records and from precomputed digests,
path construction for individual leaves, and peak memory of the reduction.
"""

import gc

from balanced_merkle.base import leaf_digests
from balanced_merkle.tree import build_path, build_path_from_digests, build_proof, build_root, build_root_from_digests
from benchmarks.benchmark_utils import BaseBenchmark, BenchmarkUtils


class BuildRootBenchmarks(BaseBenchmark):
    """Benchmarks for build_root() over raw records."""

    # powers of two and sizes just above them, where most leaves are carried
    params = [
        [1_024, 1_025, 65_536, 65_537],
        ['random', 'repeating'],
    ]
    param_names = ['size', 'distribution']

    min_run_count = 5

    def setup(self, size, distribution):
        super().setup(size, distribution)
        self.records = BenchmarkUtils.generate_deterministic_records(
            size=size,
            seed=42 + size % 1000,
            distribution=distribution,
        )
        gc.collect()
        gc.disable()

    def time_build_root(self, size, distribution):
        build_root(self.records)

    def peakmem_build_root(self, size, distribution):
        build_root(self.records)


class ReduceDigestsBenchmarks(BaseBenchmark):
    """Benchmarks for the reduction alone, with leaf hashing done in setup."""

    params = [[1_024, 65_536, 1_000_000]]
    param_names = ['size']

    min_run_count = 3

    def setup(self, size):
        super().setup(size)
        records = BenchmarkUtils.generate_deterministic_records(size=size, distribution='sequential')
        self.digests = leaf_digests(records)
        self.target = self.digests[size // 3]
        gc.collect()
        gc.disable()

    def time_build_root_from_digests(self, size):
        build_root_from_digests(self.digests)

    def time_build_path_from_digests(self, size):
        build_path_from_digests(self.target, self.digests)


class BuildPathBenchmarks(BaseBenchmark):
    """Benchmarks for build_path() and build_proof()."""

    params = [
        [1_000, 10_000],
        [0.0, 0.5, 1.0],  # relative position of the target leaf
    ]
    param_names = ['size', 'position']

    min_run_count = 5

    def setup(self, size, position):
        super().setup(size, position)
        self.records = BenchmarkUtils.generate_deterministic_records(size=size, distribution='sequential')
        self.leaf = self.records[min(int(position * size), size - 1)]
        gc.collect()
        gc.disable()

    def time_build_path(self, size, position):
        build_path(self.leaf, self.records)

    def time_build_proof(self, size, position):
        build_proof(self.leaf, self.records)
