#!/usr/bin/env python3
"""Profile the Apriori miner with line_profiler and cProfile.

The profiling statistics are stored under ``results/<strategy>/``.

Usage::

    python tests/profile_algorithm.py <file> <min_support> [strategy] [workers]
"""

import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import cProfile
from line_profiler import LineProfiler

from levelwise.apriori import Apriori
from levelwise.levels import initial_level, next_level


def profile_algorithm(file: str, min_support: int, strategy: str = 'sequential', workers=None) -> None:
    """Run profiling on one mining run of ``file``."""
    alg = Apriori(file, min_support, strategy=strategy, workers=workers)

    results_dir = os.path.join('results', strategy)
    os.makedirs(results_dir, exist_ok=True)
    line_path = os.path.join(results_dir, 'line_profile.lprof')
    cprof_path = os.path.join(results_dir, 'cprofile.prof')

    lp = LineProfiler()
    lp.add_function(initial_level)
    lp.add_function(next_level)
    profiled_mine = lp(alg.mine)

    def run():
        profiled_mine()

    cProfile.runctx('run()', globals(), locals(), cprof_path)
    lp.dump_stats(line_path)

    print(f'Mined {len(alg.getPatterns())} patterns in {alg.getRuntime():.3f} s')
    print(f'Saved line profile to {line_path}')
    print(f'Saved cProfile stats to {cprof_path}')
    print(f'Visualize with: snakeviz {cprof_path}')


def main() -> None:
    if len(sys.argv) not in (3, 4, 5):
        print('Usage: python tests/profile_algorithm.py <file> <min_support> [strategy] [workers]')
        raise SystemExit(1)
    strategy = sys.argv[3] if len(sys.argv) > 3 else 'sequential'
    workers = int(sys.argv[4]) if len(sys.argv) > 4 else None
    profile_algorithm(sys.argv[1], int(sys.argv[2]), strategy, workers)


if __name__ == '__main__':
    main()
