from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from levelwise.base_algorithm import BaseAlgorithm
from levelwise.config import check_min_support
from levelwise.distributed import DistributedStrategy
from levelwise.errors import ConfigurationError, LoadError
from levelwise.file_read.abstract import bytes_to_mb
from levelwise.file_read.python_read import PythonRead, normalize_transaction
from levelwise.levels import mine_levels
from levelwise.store import Itemset
from levelwise.strategies import CountingStrategy, SequentialStrategy, ThreadPoolStrategy

logger = logging.getLogger(__name__)


def make_strategy(name: str, workers: Optional[int] = None) -> CountingStrategy:
    """Build the counting strategy called ``name``."""
    if name == "sequential":
        return SequentialStrategy()
    if name == "threads":
        return ThreadPoolStrategy(workers)
    if name == "distributed":
        return DistributedStrategy(workers)
    if name == "mpi":
        from levelwise.mpi_comm import MPICommunicator
        return DistributedStrategy(communicator=MPICommunicator())
    raise ConfigurationError(f"Unknown strategy {name!r}")


def sort_patterns(patterns: Dict[Itemset, int]) -> List[Tuple[Itemset, int]]:
    """Patterns ordered by size, then by items."""
    return sorted(patterns.items(), key=lambda pair: (len(pair[0]), pair[0]))


def format_patterns(patterns: Dict[Itemset, int]) -> str:
    """Render patterns grouped by size, e.g. ``{ a, b } : 2``."""
    lines = ["=== FREQUENT ITEMSETS ==="]
    size = 0
    for itemset, support in sort_patterns(patterns):
        if len(itemset) != size:
            size = len(itemset)
            lines.extend(["", f"{size}-itemsets:", "-------------"])
        lines.append(f"{{ {', '.join(itemset)} }} : {support}")
    return "\n".join(lines)


@dataclass(frozen=True)
class MiningResult:
    """Outcome of one :py:meth:`Apriori.mine` call."""

    patterns: Dict[Itemset, int]
    level_sizes: Tuple[int, ...]
    label: str
    workers: int
    runtime: float
    memoryRSS: Optional[int] = None
    memoryUSS: Optional[int] = None
    coordinator: bool = True
    log_name: str = field(default="sequential", repr=False)

    @property
    def elapsed_ms(self) -> int:
        return int(round(self.runtime * 1000))


class Apriori(BaseAlgorithm):
    """
    Level-wise frequent itemset mining with a pluggable counting strategy.

    The same loop runs under every strategy; only the counting and the
    reduction of partial counts differ, so all strategies return the same
    patterns for the same input.

    Attributes:
    -----------
    file : str or iterable
        Path of a transaction file (one transaction per line, items joined
        by ``sep``), or the transactions themselves.
    minSup : int
        Absolute minimum support. An itemset is frequent if it occurs in at
        least ``minSup`` transactions.
    sep : str
        Item separator of the input file.
    strategy : str or CountingStrategy
        ``sequential``, ``threads``, ``distributed`` or ``mpi``, or an
        already built strategy.
    workers : int, optional
        Threads or processes for the parallel strategies.

    Methods:
    --------
    mine() -> MiningResult:
        Runs the algorithm.
    getPatterns() -> Dict[Tuple[str, ...], int]:
        Returns the mined patterns.
    getPatternsAsDataFrame() -> pandas.DataFrame:
        Returns the mined patterns as a data frame.
    save_patterns(output_file, separator):
        Writes the patterns to a file.
    printResults():
        Prints a summary of the last run.
    printPatterns():
        Prints the patterns grouped by size.
    """

    def __init__(self, file: Union[str, os.PathLike, Iterable[Sequence[str]]], minSup: int,
                 sep: str = ',', strategy: Union[str, CountingStrategy] = 'sequential',
                 workers: Optional[int] = None) -> None:
        super().__init__()
        self.file = file
        self.minSup = check_min_support(minSup)
        self.sep = sep
        if isinstance(strategy, CountingStrategy):
            self.strategy = strategy
        else:
            self.strategy = make_strategy(strategy, workers)
        self.patterns: Dict[Itemset, int] = {}
        self.levelSizes: Tuple[int, ...] = ()
        self.result: Optional[MiningResult] = None

    def readTransactions(self) -> List[Itemset]:
        """Load, trim, sort and deduplicate the transactions."""
        if isinstance(self.file, (str, os.PathLike)):
            reader = PythonRead(os.fspath(self.file), self.sep)
            transactions = reader.read()
            logger.debug("Read %s in %.3f s, %.2f MB held, %d lines skipped", self.file,
                         reader.get_runtime(), bytes_to_mb(reader.get_custom_memory()["cpu"]),
                         reader.get_skipped())
            return transactions
        if self.file is None:
            raise LoadError("No transaction file given")
        transactions = (normalize_transaction(row) for row in self.file)
        return [transaction for transaction in transactions if transaction]

    def mine(self) -> MiningResult:
        """Mine all frequent itemsets."""
        start = time.time()
        strategy = self.strategy

        with strategy:
            coordinator = strategy.is_coordinator
            transactions = None
            if coordinator:
                try:
                    transactions = self.readTransactions()
                except LoadError:
                    strategy.abort()
                    raise
                logger.info("Running %s on %d transactions, minimum support %d",
                            strategy.label, len(transactions), self.minSup)
            store, minSup = strategy.prepare(transactions, self.minSup)
            if store is None:
                logger.warning("No transactions to mine")
                patterns, levelSizes = {}, []
            else:
                patterns, levelSizes = mine_levels(store, strategy, minSup)

        self.patterns = patterns if coordinator else {}
        self.levelSizes = tuple(levelSizes)
        self.runtime = time.time() - start
        self.recordMemory()
        self.result = MiningResult(self.patterns, self.levelSizes, strategy.label, strategy.workers,
                                   self.runtime, self.memoryRSS, self.memoryUSS, coordinator,
                                   strategy.log_name)
        return self.result

    def getPatterns(self) -> Dict[Itemset, int]:
        """Return the mined patterns."""
        return self.patterns

    def getLevelSizes(self) -> Tuple[int, ...]:
        """Number of frequent itemsets found at each level."""
        return self.levelSizes

    def getPatternsAsDataFrame(self) -> pd.DataFrame:
        """Return the patterns as a data frame with ``Patterns``, ``Support`` and ``Size`` columns."""
        rows = [(' '.join(itemset), support, len(itemset)) for itemset, support in sort_patterns(self.patterns)]
        return pd.DataFrame(rows, columns=['Patterns', 'Support', 'Size'])

    def save_patterns(self, output_file: str, separator: str = '\t') -> None:
        """Save mined patterns to a file."""
        with open(output_file, 'w', encoding='utf-8') as f:
            for pattern, count in sort_patterns(self.patterns):
                f.write(f"{separator.join(pattern)}:{count}\n")

    def printResults(self) -> None:
        """Print a summary of the mining results."""
        label = self.strategy.label
        print(f"{label} Apriori completed!")
        print(f"Total frequent itemsets: {len(self.patterns)}")
        print(f"Execution time: {self.runtime * 1000:.0f} ms")
        print(f"Memory RSS: {self.memoryRSS}")
        print(f"Memory USS: {self.memoryUSS}")

    def printPatterns(self) -> None:
        print(format_patterns(self.patterns))
