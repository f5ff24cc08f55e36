"""Benchmark configuration and run metadata."""

import os
import subprocess
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_SIZES = [1_000, 10_000, 100_000]


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, default))


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def _env_sizes(name: str) -> List[int]:
    raw = os.environ.get(name)
    if not raw:
        return list(DEFAULT_SIZES)
    return [int(part) for part in raw.replace(",", " ").split()]


@dataclass
class BenchmarkConfig:
    """Leaf counts, record shape and sampling used by a benchmark run."""

    seed: int = 42
    sizes: List[int] = field(default_factory=lambda: list(DEFAULT_SIZES))
    record_size: int = 32
    # paths built and checked per tree
    paths_per_tree: int = 16
    repetitions: int = 20
    verify_only: bool = False
    skip_warmup: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "BenchmarkConfig":
        """
        Read overrides from ``BENCHMARK_*`` environment variables.

        ``BENCHMARK_SIZES`` takes leaf counts separated by commas or spaces.
        """
        return cls(
            seed=_env_int("BENCHMARK_SEED", 42),
            sizes=_env_sizes("BENCHMARK_SIZES"),
            record_size=_env_int("BENCHMARK_RECORD_SIZE", 32),
            paths_per_tree=_env_int("BENCHMARK_PATHS", 16),
            repetitions=_env_int("BENCHMARK_REPETITIONS", 20),
            verify_only=_env_flag("BENCHMARK_VERIFY_ONLY"),
            skip_warmup=_env_flag("BENCHMARK_SKIP_WARMUP"),
            log_level=os.environ.get("BENCHMARK_LOG_LEVEL", "INFO"),
        )


def get_git_commit_hash() -> Optional[str]:
    """Commit of the checkout the benchmarks run from, if it is a git repository."""
    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True, text=True, check=True, cwd=repo_root,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None
    return result.stdout.strip()


@dataclass
class BenchmarkMetadata:
    commit_hash: Optional[str]
    config: BenchmarkConfig
    size: int
    repetitions: int

    def __str__(self) -> str:
        return "\n".join([
            f"Commit: {self.commit_hash or 'unknown'}",
            f"Seed: {self.config.seed}",
            f"Leaves (n): {self.size}",
            f"Record size (bytes): {self.config.record_size}",
            f"Paths per tree: {self.config.paths_per_tree}",
            f"Repetitions: {self.repetitions}",
        ])
