#!/usr/bin/env python3
"""
Time root and path construction for balanced Merkle trees.

Settings come from ``BENCHMARK_*`` environment variables (see
:meth:`BenchmarkConfig.from_env`); command-line flags override them.

Examples:
    python -m benchmarks.run_benchmarks --sizes 1000 65537
    BENCHMARK_VERIFY_ONLY=true python -m benchmarks.run_benchmarks
"""

import argparse
import logging
import os
import sys
import time
from datetime import datetime

from .config import BenchmarkConfig
from .runner import BenchmarkRunner

# argparse dest -> BenchmarkConfig field
_OVERRIDES = {
    "seed": "seed",
    "sizes": "sizes",
    "record_size": "record_size",
    "paths": "paths_per_tree",
    "repetitions": "repetitions",
    "log_level": "log_level",
}


def setup_logging(config: BenchmarkConfig, log_dir: str = None) -> None:
    """Log to stderr and, when ``log_dir`` is given, to a timestamped file in it."""
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        handlers.append(logging.FileHandler(os.path.join(log_dir, f"merkle_{ts}.log"), mode="w"))

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )
    logging.getLogger("balanced_merkle").setLevel(level)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark balanced Merkle root and path construction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--seed", type=int, help="Seed for record generation")
    parser.add_argument("--sizes", type=int, nargs="+", help="Leaf counts to benchmark")
    parser.add_argument("--record-size", type=int, help="Bytes per generated record")
    parser.add_argument("--paths", type=int, help="Leaf paths built per tree")
    parser.add_argument("--repetitions", type=int, help="Trees built per leaf count")
    parser.add_argument("--verify-only", action="store_true", help="Check correctness without timing")
    parser.add_argument("--skip-warmup", action="store_true", help="Skip the warmup tree")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-dir", help="Directory for log files (default: benchmarks/logs)")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BenchmarkConfig:
    """Environment configuration with the flags given on the command line applied."""
    config = BenchmarkConfig.from_env()
    for dest, name in _OVERRIDES.items():
        value = getattr(args, dest)
        if value is not None:
            setattr(config, name, value)
    config.verify_only = config.verify_only or args.verify_only
    config.skip_warmup = config.skip_warmup or args.skip_warmup
    return config


def main(argv=None) -> int:
    args = parse_args(argv)
    config = build_config(args)

    log_dir = args.log_dir or os.path.join(os.path.dirname(__file__), "logs")
    setup_logging(config, None if config.verify_only else log_dir)

    mode = "verify-only" if config.verify_only else "timed"
    logging.info("Balanced Merkle benchmarks (%s) over sizes %s", mode, config.sizes)

    runner = BenchmarkRunner(config)
    overall_start = time.perf_counter()

    for size in config.sizes:
        logging.info("")
        logging.info("n=%d, repetitions=%d", size, config.repetitions)
        run_start = time.perf_counter()
        results, metadata = runner.run_benchmark(size=size, repetitions=config.repetitions)
        if not config.verify_only:
            runner.aggregate_and_report(results, metadata)
        logging.info("n=%d finished in %.3f seconds", size, time.perf_counter() - run_start)

    logging.info("")
    logging.info("Total: %.3f seconds", time.perf_counter() - overall_start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
