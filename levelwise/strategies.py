"""Counting and aggregation strategies.

The level-wise loop in :mod:`levelwise.levels` never counts anything
itself. It asks a strategy for the global item counts of level 1 and for
the global support of every later candidate list, and the strategy
decides where the transactions are scanned and how partial counts are
reduced.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from multiprocessing.pool import ThreadPool
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from levelwise.config import resolve_workers
from levelwise.partition import block_ranges
from levelwise.store import Itemset, TransactionStore

logger = logging.getLogger(__name__)


class CountingStrategy(ABC):
    """Base class for the execution strategies.

    A strategy is used as a context manager around one mining run so it
    can hold resources (threads, worker processes) for the run's length.
    """

    #: Stem of the timing log files written for this strategy.
    log_name = "sequential"
    workers = 1

    def __enter__(self) -> "CountingStrategy":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        return False

    @property
    def is_coordinator(self) -> bool:
        return True

    @property
    @abstractmethod
    def label(self) -> str:
        pass

    def prepare(self, transactions: Optional[Sequence[Itemset]],
                min_support: Optional[int]) -> Tuple[Optional[TransactionStore], Optional[int]]:
        """Build this process's store, or ``None`` if there is nothing to mine."""
        if not transactions:
            return None, min_support
        return TransactionStore(transactions), min_support

    def abort(self) -> None:
        """Release any peer waiting for data after a failed load."""

    def finish(self) -> None:
        pass

    @abstractmethod
    def count_items(self, store: TransactionStore) -> Dict[str, int]:
        """Global occurrence count of every item."""

    @abstractmethod
    def count_support(self, store: TransactionStore, candidates: List[Itemset]) -> np.ndarray:
        """Global support of ``candidates``, aligned with the list."""

    def _local_support(self, store: TransactionStore, candidates: List[Itemset],
                       ranges=None, mapper=map) -> np.ndarray:
        matrix, positions = store.encode(candidates)
        ranges = ranges if ranges is not None else [(0, len(store))]
        partials = list(mapper(lambda bounds: store.count_support(matrix, *bounds), ranges))
        counts = np.zeros(len(candidates), dtype=np.int64)
        if partials:
            counts[positions] = np.sum(partials, axis=0)
        return counts


class SequentialStrategy(CountingStrategy):
    """Single scan over the whole store in the calling thread."""

    @property
    def label(self) -> str:
        return "Sequential"

    def count_items(self, store):
        return store.item_counts()

    def count_support(self, store, candidates):
        return self._local_support(store, candidates)


class ThreadPoolStrategy(CountingStrategy):
    """Fork-join counting over a fixed thread pool.

    Transaction indices are split into contiguous ranges, one per thread.
    Each thread fills its own count vector without locking (the numba
    kernels release the GIL) and the vectors are summed after the join.

    Parameters
    ----------
    workers : int, optional
        Pool size. Defaults to ``os.cpu_count()``.
    """

    log_name = "parallel"

    def __init__(self, workers: Optional[int] = None) -> None:
        self.workers = resolve_workers(workers)
        self._pool = None

    @property
    def label(self) -> str:
        return f"Parallel_{self.workers}_threads"

    def __enter__(self):
        self._pool = ThreadPool(self.workers)
        logger.debug("Started a pool of %d threads", self.workers)
        return self

    def __exit__(self, exc_type, exc, tb):
        self._pool.close()
        self._pool.join()
        self._pool = None
        return False

    def _ranges(self, store):
        return block_ranges(len(store), self.workers)

    def count_items(self, store):
        partials = self._pool.map(lambda bounds: store.count_items(*bounds), self._ranges(store))
        totals = np.sum(partials, axis=0)
        return dict(zip(store.vocabulary, totals.tolist()))

    def count_support(self, store, candidates):
        return self._local_support(store, candidates, self._ranges(store), self._pool.map)
