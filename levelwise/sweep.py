import logging

import pandas as pd

from levelwise.apriori import Apriori
from levelwise.config import MinerConfig
from levelwise.timing_log import TimingLog

logger = logging.getLogger(__name__)

COLUMNS = ["workers", "elapsed_ms", "itemsets"]


def performance_sweep(config: MinerConfig, log: TimingLog) -> pd.DataFrame:
    """Mine ``config.file`` once per worker count and log the timings.

    Returns a data frame with one ``(workers, elapsed_ms, itemsets)`` row
    per run. Under ``mpi`` the process count is fixed by the launcher, so
    there is a single run.
    """
    counts = (None,) if config.strategy == "mpi" else config.sweepWorkerCounts()
    rows = []
    for workers in counts:
        logger.info("Sweep run with %s workers", workers if workers is not None else "launcher")
        miner = Apriori(config.file, config.min_support, sep=config.separator,
                        strategy=config.strategy, workers=workers)
        result = miner.mine()
        if not result.coordinator:
            continue
        log.record_sweep(result.log_name, result.workers, result.elapsed_ms, len(result.patterns))
        rows.append((result.workers, result.elapsed_ms, len(result.patterns)))
    return pd.DataFrame(rows, columns=COLUMNS)
