"""Statistics for balanced Merkle trees."""

import argparse
import logging
import os
import time
from datetime import datetime

import numpy as np
from tqdm import tqdm

from balanced_merkle.base import leaf_digests
from balanced_merkle.invariants import assert_balanced_shape, check_proofs
from balanced_merkle.tree import build_path_from_digests, build_root_from_digests
from balanced_merkle.tree_stats import expected_path_length, tree_stats
from balanced_merkle.verify import fold_path

logger = logging.getLogger(__name__)

# check_proofs builds every path, O(n^2) hashing
FULL_CHECK_LIMIT = 512


def random_records(n: int, record_size: int, rng: np.random.Generator) -> list[bytes]:
    """Draw ``n`` distinct random records of ``record_size`` bytes."""
    data = rng.integers(0, 256, size=(n, record_size), dtype=np.uint8)
    records = [row.tobytes() for row in data]
    if len(set(records)) != n:
        raise ValueError(f"Record space too small for {n} distinct records of {record_size} bytes")
    return records


def repeated_experiment(
    size: int,
    repetitions: int,
    record_size: int,
    paths: int,
    rng: np.random.Generator,
) -> None:
    """
    Repeatedly builds trees over random records and times each phase.

    Leaf hashing, the reduction to the root and the path construction for a
    sample of leaves are measured separately. Every sampled path is checked
    against the root and the depth predicted by the balancing rule.
    """
    t_all_0 = time.perf_counter()

    assert_balanced_shape(size)
    stats = tree_stats(size)

    times_hash = []
    times_root = []
    times_path = []

    for _ in tqdm(range(repetitions), desc=f"n={size}", leave=False):
        records = random_records(size, record_size, rng)

        t0 = time.perf_counter()
        digests = leaf_digests(records)
        times_hash.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        root = build_root_from_digests(digests)
        times_root.append(time.perf_counter() - t0)

        indices = rng.choice(size, size=min(paths, size), replace=False)
        built = []
        t0 = time.perf_counter()
        for index in indices:
            built.append(build_path_from_digests(digests[index], digests))
        times_path.append((time.perf_counter() - t0) / len(indices))

        for index, path in zip(indices, built):
            if fold_path(digests[index], path) != root:
                raise AssertionError(f"Path of leaf {index} does not fold to the root")
            if len(path) != expected_path_length(size, int(index)):
                raise AssertionError(f"Path of leaf {index} has unexpected length {len(path)}")

        if size <= FULL_CHECK_LIMIT:
            check_proofs(records)

    # Shape summary
    logger.info(f"{'Height':<24}{stats.height:>15}")
    logger.info(f"{'Paired at bottom (m)':<24}{stats.last_level_leaves:>15}")
    logger.info(f"{'Carried leaves':<24}{stats.carried_leaves:>15}")
    logger.info(f"{'Min path length':<24}{stats.min_path_length:>15}")
    logger.info(f"{'Max path length':<24}{stats.max_path_length:>15}")
    logger.info(f"{'Level sizes':<24}{' '.join(str(s) for s in stats.level_sizes[:8]):>15}")

    perf_rows = [
        ("Leaf hashing (s)", np.array(times_hash)),
        ("Reduction (s)", np.array(times_root)),
        ("Path per leaf (s)", np.array(times_path)),
    ]
    total_sum = sum(float(t.sum()) for _, t in perf_rows)

    header = f"{'Metric':<20}{'Avg(s)':>13}{'Var(s)':>13}{'Total(s)':>13}{'%Total':>10}"
    sep = "-" * len(header)

    logger.info("")
    logger.info("Performance summary:")
    logger.info(header)
    logger.info(sep)
    for name, t in perf_rows:
        total = float(t.sum())
        pct = (total / total_sum * 100) if total_sum else 0
        logger.info(f"{name:<20}{t.mean():13.6f}{t.var():13.6f}{total:13.6f}{pct:10.2f}%")

    logger.info(sep)
    t_all_1 = time.perf_counter() - t_all_0
    logger.info("Execution time: %.3f seconds", t_all_1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run statistics experiments for balanced Merkle trees.")
    parser.add_argument(
        "--sizes", type=int, nargs="+", default=[10, 100, 1000, 10_000, 100_000], help="List of leaf counts to test."
    )
    parser.add_argument("--record-size", type=int, default=32, help="Length of each random record in bytes.")
    parser.add_argument("--paths", type=int, default=32, help="Number of leaf paths built per tree.")
    parser.add_argument("--repetitions", type=int, default=3, help="Number of repetitions for each experiment.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)",
    )

    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)

    log_dir = os.path.join(os.getcwd(), "stats/logs/merkle_tree_logs")
    os.makedirs(log_dir, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"run_{ts}.log")

    log_level = getattr(logging, args.log_level)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="w"),
            logging.StreamHandler(),
        ],
        force=True,  # Override any existing logging configuration
    )

    # Also apply the chosen level to the library logger so that
    # log records from balanced_merkle.* are emitted at the requested level.
    logging.getLogger("balanced_merkle").setLevel(log_level)

    for n in args.sizes:
        logger.info("")
        logger.info(
            f"---------------- NOW RUNNING EXPERIMENT: n = {n}, repetitions = {args.repetitions} ----------------"
        )
        t0 = time.perf_counter()
        repeated_experiment(
            size=n,
            repetitions=args.repetitions,
            record_size=args.record_size,
            paths=args.paths,
            rng=rng,
        )
        elapsed = time.perf_counter() - t0
        logger.info(f"Total experiment time: {elapsed:.3f} seconds")
