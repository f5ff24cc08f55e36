"""
Benchmarks package for balanced Merkle trees.

This package contains ASV benchmarks for performance testing of:
- Root construction over raw records and over precomputed leaf digests
- Authentication path and proof construction
- Memory usage of the level-by-level reduction

The benchmarks are designed to be robust against CPU and memory load variations
by using multiple iterations, deterministic test data, and proper statistical analysis.
"""

from .benchmark_utils import BaseBenchmark, BenchmarkUtils

__all__ = ["BaseBenchmark", "BenchmarkUtils"]
