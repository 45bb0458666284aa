"""Level-wise driver shared by every strategy.

The loop moves through ``Init -> Counting(k) -> Filtering(k)`` until no
candidate survives. The mined patterns are passed from one level to the
next as a fresh mapping instead of being kept as shared state.
"""

from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Tuple

from levelwise.candidates import filter_by_support, frequent_items, generate_candidates
from levelwise.store import Itemset, TransactionStore

logger = logging.getLogger(__name__)


class LevelState(NamedTuple):
    k: int
    frequent: Dict[Itemset, int]
    patterns: Dict[Itemset, int]
    level_sizes: Tuple[int, ...]


def _accept(state: LevelState, frequent: Dict[Itemset, int]) -> LevelState:
    return LevelState(state.k + 1, frequent, {**state.patterns, **frequent},
                      state.level_sizes + (len(frequent),))


def initial_level(store: TransactionStore, strategy, min_support: int) -> LevelState:
    frequent = frequent_items(strategy.count_items(store), min_support)
    logger.info("Frequent 1-itemsets: %d", len(frequent))
    if not frequent:
        return LevelState(1, {}, {}, ())
    return _accept(LevelState(0, {}, {}, ()), frequent)


def next_level(store: TransactionStore, strategy, state: LevelState, min_support: int):
    """Count and filter level ``k + 1``. Returns ``None`` once mining is done."""
    candidates = list(generate_candidates(state.frequent))
    if not candidates:
        return None
    logger.info("Generated %d candidates for level %d", len(candidates), state.k + 1)
    support = strategy.count_support(store, candidates)
    frequent = filter_by_support(dict(zip(candidates, support.tolist())), min_support)
    logger.info("Frequent %d-itemsets: %d", state.k + 1, len(frequent))
    if not frequent:
        return None
    return _accept(state, frequent)


def mine_levels(store: TransactionStore, strategy, min_support: int) -> Tuple[Dict[Itemset, int], List[int]]:
    """Mine all frequent itemsets of ``store`` through ``strategy``.

    Returns the patterns with their global support and the number of
    frequent itemsets found at each level.
    """
    state = initial_level(store, strategy, min_support)
    while state.frequent:
        advanced = next_level(store, strategy, state, min_support)
        if advanced is None:
            break
        state = advanced
    strategy.finish()
    return state.patterns, list(state.level_sizes)
