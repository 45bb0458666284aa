from typing import Dict, Mapping, Tuple

Itemset = Tuple[str, ...]


def frequent_items(item_counts: Mapping[str, int], min_support: int) -> Dict[Itemset, int]:
    """Level-1 frequent itemsets straight from raw item occurrence counts."""
    return {(item,): count for item, count in sorted(item_counts.items()) if count >= min_support}


def generate_candidates(frequent: Mapping[Itemset, int]) -> Dict[Itemset, int]:
    """Join frequent k-itemsets into (k+1)-itemset candidates.

    Every ordered pair ``(A, B)`` of the sorted frequent itemsets sharing
    their first ``k - 1`` items yields ``sorted(A + B[-1:])``. All counts
    start at zero and the keys come back in sorted order, so identical
    input always gives an identical, identically ordered result.

    This is the plain all-pairs join without Apriori-Gen's subset pruning:
    a candidate with an infrequent k-subset is still generated and only
    dropped once its support has been counted. It costs O(|F(k)|^2).
    """
    itemsets = sorted(frequent)
    candidates = set()
    for i, first in enumerate(itemsets):
        prefix = first[:-1]
        for second in itemsets[i + 1:]:
            if second[:-1] == prefix:
                candidates.add(tuple(sorted(first + second[-1:])))
    return {candidate: 0 for candidate in sorted(candidates)}


def filter_by_support(counts: Mapping[Itemset, int], min_support: int) -> Dict[Itemset, int]:
    """Keep the itemsets whose support reaches ``min_support`` (inclusive)."""
    return {itemset: count for itemset, count in counts.items() if count >= min_support}
