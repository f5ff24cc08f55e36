"""Core benchmark runner for balanced Merkle tree performance measurements."""

import logging
import time
from dataclasses import dataclass
from statistics import mean
from typing import List, Tuple

from balanced_merkle.base import Digest
from balanced_merkle.tree import build_path, build_root
from balanced_merkle.tree_stats import Stats, tree_stats

from .benchmark_utils import BenchmarkUtils
from .config import BenchmarkConfig, BenchmarkMetadata, get_git_commit_hash
from .verify import verify_invariants


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    stats: Stats
    root: Digest
    root_time: float
    path_time: float
    paths_built: int


class BenchmarkRunner:
    """
    Manages the benchmark lifecycle with proper phase separation.

    Phases:
    1. Setup (not timed): Configuration and record generation
    2. Warmup (not timed): Optional warmup iterations
    3. Run (timed): Actual measurement
    4. Verify (not timed): Correctness checks
    """

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self._check_logging_level()

    def _check_logging_level(self) -> None:
        """Warn if verbose logging is enabled during measurement."""
        current_level = logging.getLogger("balanced_merkle").getEffectiveLevel()
        if current_level < logging.INFO:
            logging.warning(
                "Verbose logging (%s) is enabled. This may affect benchmark timing! "
                "Set log level to INFO or higher for accurate measurements.",
                logging.getLevelName(current_level)
            )

    def setup(self, size: int, repetitions: int) -> List[List[bytes]]:
        """
        Setup phase: Generate one record set per repetition.

        NOT TIMED.
        """
        base_seed = self.config.seed
        return [
            BenchmarkUtils.generate_deterministic_records(
                size=size,
                seed=base_seed + i,
                record_size=self.config.record_size,
            )
            for i in range(repetitions)
        ]

    def warmup(self, record_sets: List[List[bytes]]) -> None:
        """
        Warmup phase: Run operations to warm caches.

        NOT TIMED.
        """
        if self.config.skip_warmup:
            return
        for records in record_sets[:min(3, len(record_sets))]:
            build_root(records)

    def run_single(self, records: List[bytes], indices: List[int]) -> BenchmarkResult:
        """
        Run measurement on a single record set.

        TIMED - only the actual operations are measured.
        """
        t0 = time.perf_counter()
        root = build_root(records)
        root_time = time.perf_counter() - t0

        t0 = time.perf_counter()
        for index in indices:
            build_path(records[index], records)
        path_time = time.perf_counter() - t0

        return BenchmarkResult(
            stats=tree_stats(len(records)),
            root=root,
            root_time=root_time,
            path_time=path_time,
            paths_built=len(indices),
        )

    def run_benchmark(self, size: int, repetitions: int) -> Tuple[List[BenchmarkResult], BenchmarkMetadata]:
        """
        Run complete benchmark with proper phase separation.

        Returns:
            (results, metadata)
        """
        metadata = BenchmarkMetadata(
            commit_hash=get_git_commit_hash(),
            config=self.config,
            size=size,
            repetitions=repetitions,
        )

        # === SETUP PHASE (not timed) ===
        logging.debug("Setup: Generating %d record sets...", repetitions)
        record_sets = self.setup(size, repetitions)
        indices = BenchmarkUtils.sample_indices(size, self.config.paths_per_tree, seed=self.config.seed)

        # === WARMUP PHASE (not timed) ===
        if not self.config.skip_warmup:
            logging.debug("Warmup: Running warmup iterations...")
            self.warmup(record_sets)

        # === MEASUREMENT PHASE (timed) ===
        results = []
        all_verified = True

        for records in record_sets:
            result = self.run_single(records, indices)
            results.append(result)

            # === VERIFY PHASE (not timed) ===
            if self.config.verify_only or logging.getLogger().isEnabledFor(logging.DEBUG):
                if not verify_invariants(records, result.root, result.stats, indices):
                    all_verified = False

        if self.config.verify_only:
            if all_verified:
                logging.info("✓ All verifications passed for n=%d", size)
            else:
                logging.error("✗ Some verifications failed for n=%d", size)

        return results, metadata

    def aggregate_and_report(
        self,
        results: List[BenchmarkResult],
        metadata: BenchmarkMetadata,
    ) -> None:
        """
        Aggregate results and report statistics.

        NOT TIMED.
        """
        stats = results[0].stats

        avg_root_time = mean(r.root_time for r in results)
        avg_path_time = mean(r.path_time / r.paths_built for r in results if r.paths_built)
        var_root_time = mean((r.root_time - avg_root_time) ** 2 for r in results)
        var_path_time = mean(((r.path_time / r.paths_built) - avg_path_time) ** 2 for r in results if r.paths_built)

        # === OUTPUT: Metadata ===
        logging.info("")
        logging.info("=== METADATA ===")
        for line in str(metadata).split('\n'):
            logging.info(line)

        # === OUTPUT: Shape ===
        logging.info("")
        logging.info("=== SHAPE ===")
        logging.info(f"{'Height':<24}{stats.height:>12}")
        logging.info(f"{'Paired at bottom (m)':<24}{stats.last_level_leaves:>12}")
        logging.info(f"{'Carried leaves':<24}{stats.carried_leaves:>12}")
        logging.info(f"{'Path length range':<24}{f'{stats.min_path_length}..{stats.max_path_length}':>12}")

        # === OUTPUT: Performance Table ===
        header = f"{'Metric':<24}{'Avg(s)':>13}{'Var(s)':>13}"
        sep = "-" * len(header)

        logging.info("")
        logging.info("=== PERFORMANCE ===")
        logging.info(header)
        logging.info(sep)
        logging.info(f"{'Root time':<24}{avg_root_time:13.6f}{var_root_time:13.6f}")
        logging.info(f"{'Path time (per leaf)':<24}{avg_path_time:13.6f}{var_path_time:13.6f}")
        logging.info(sep)
