#!/usr/bin/env python3
"""Command line front end.

Examples::

    levelwise data.txt 2
    levelwise data.txt 500 --strategy threads --workers 8
    levelwise data.txt 500 --strategy distributed --sweep
    mpiexec -n 4 levelwise data.txt 500 --strategy mpi
"""

import argparse
import logging
import sys

from levelwise.apriori import Apriori
from levelwise.config import DEFAULT_SWEEP_WORKERS, STRATEGIES, MinerConfig
from levelwise.errors import CommunicationError, ConfigurationError, LoadError
from levelwise.sweep import performance_sweep
from levelwise.timing_log import TimingLog


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="levelwise",
                                     description="Mine frequent itemsets with the Apriori algorithm")
    parser.add_argument("file", help="Transaction file, one comma-separated transaction per line")
    parser.add_argument("min_support", type=int, help="Minimum support count (positive integer)")
    parser.add_argument("--strategy", choices=STRATEGIES, default="sequential",
                        help="Execution strategy (default: sequential)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Threads or processes to use (default: CPU count)")
    parser.add_argument("--sweep", action="store_true",
                        help="Run a performance sweep across worker counts")
    parser.add_argument("--sweep-workers", type=int, nargs="+", default=list(DEFAULT_SWEEP_WORKERS),
                        help="Worker counts tried by --sweep")
    parser.add_argument("--separator", default=",", help="Item separator (default: ',')")
    parser.add_argument("--output", default=None, help="Save the patterns to this file")
    parser.add_argument("--log-dir", default=".", help="Directory for the timing logs")
    parser.add_argument("--quiet", action="store_true", help="Print only the summary")
    return parser


def run(config: MinerConfig) -> int:
    log = TimingLog(config.log_dir)

    if config.mode == "sweep":
        frame = performance_sweep(config, log)
        if not frame.empty:
            print(frame.to_string(index=False))
        return 0

    miner = Apriori(config.file, config.min_support, sep=config.separator,
                    strategy=config.strategy, workers=config.workers)
    result = miner.mine()
    if not result.coordinator:
        return 0

    log.record_run(result.log_name, result.label, result.elapsed_ms)
    miner.printResults()
    if not config.quiet:
        miner.printPatterns()
    if config.output:
        miner.save_patterns(config.output, config.separator)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        config = MinerConfig(
            file=args.file,
            min_support=args.min_support,
            strategy=args.strategy,
            workers=args.workers,
            mode="sweep" if args.sweep else "run",
            sweep_workers=tuple(args.sweep_workers),
            log_dir=args.log_dir,
            output=args.output,
            separator=args.separator,
            quiet=args.quiet,
        )
        return run(config)
    except (ConfigurationError, LoadError, CommunicationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
