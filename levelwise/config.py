from __future__ import annotations

import numbers
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from levelwise.errors import ConfigurationError

STRATEGIES = ("sequential", "threads", "distributed", "mpi")
MODES = ("run", "sweep")
DEFAULT_SWEEP_WORKERS = (1, 2, 4, 8, 16)


def check_min_support(value) -> int:
    """Return ``value`` as an ``int`` if it is a usable absolute support count.

    Raises
    ------
    ConfigurationError
        If ``value`` is not an integer or is not positive.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"Minimum support must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError("Minimum support must be positive")
    return int(value)


def resolve_workers(value: Optional[int]) -> int:
    """Return the worker count, defaulting to the hardware concurrency."""
    if value is None:
        return os.cpu_count() or 1
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"Worker count must be a positive integer, got {value!r}")
    return value


@dataclass
class MinerConfig:
    """Settings for one invocation of the miner.

    Attributes
    ----------
    file : str
        Transaction file, one comma-separated transaction per line.
    min_support : int
        Absolute support threshold (inclusive).
    strategy : str
        One of ``sequential``, ``threads``, ``distributed`` or ``mpi``.
    workers : int, optional
        Threads or processes to use. Defaults to ``os.cpu_count()``.
    mode : str
        ``run`` for a single run, ``sweep`` for a performance sweep.
    sweep_workers : tuple[int, ...]
        Worker counts tried in sweep mode. Counts above the hardware
        concurrency are skipped.
    log_dir : str
        Directory holding the append-only timing logs.
    output : str, optional
        If given, the mined patterns are saved there.
    separator : str
        Item separator of the input file.
    quiet : bool
        Only print the summary, not every pattern.
    """

    file: str
    min_support: int
    strategy: str = "sequential"
    workers: Optional[int] = None
    mode: str = "run"
    sweep_workers: Tuple[int, ...] = DEFAULT_SWEEP_WORKERS
    log_dir: str = "."
    output: Optional[str] = None
    separator: str = ","
    quiet: bool = False

    def __post_init__(self) -> None:
        self.min_support = check_min_support(self.min_support)
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown strategy {self.strategy!r}, expected one of {', '.join(STRATEGIES)}"
            )
        if self.mode not in MODES:
            raise ConfigurationError(f"Unknown mode {self.mode!r}, expected 'run' or 'sweep'")
        if self.workers is not None:
            resolve_workers(self.workers)
        for count in self.sweep_workers:
            resolve_workers(count)

    def sweepWorkerCounts(self) -> Tuple[int, ...]:
        """Worker counts to try in sweep mode, capped at the CPU count."""
        if self.strategy == "sequential":
            return (1,)
        limit = os.cpu_count() or 1
        counts = tuple(count for count in self.sweep_workers if count <= limit)
        return counts or (1,)
