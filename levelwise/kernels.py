import numpy as np
from numba import njit


@njit(nogil=True)
def is_subset(itemset, transaction):
    """
    Sorted-merge subset test over two ascending id arrays.

    :param itemset: ascending item ids of the candidate.
    :type itemset: array
    :param transaction: ascending item ids of the transaction.
    :type transaction: array
    :return: True if every id of itemset occurs in transaction.
    """
    n = itemset.shape[0]
    m = transaction.shape[0]
    if n > m:
        return False
    i = 0
    j = 0
    while i < n and j < m:
        if transaction[j] < itemset[i]:
            j += 1
        elif transaction[j] == itemset[i]:
            i += 1
            j += 1
        else:
            return False
    return i == n


@njit(nogil=True)
def count_support(candidates, flat, offsets, start, stop, out):
    """
    Add to out[c] the number of transactions in [start, stop) containing
    candidates[c]. Transactions are stored CSR style in flat/offsets.
    """
    for t in range(start, stop):
        transaction = flat[offsets[t]:offsets[t + 1]]
        for c in range(candidates.shape[0]):
            if is_subset(candidates[c], transaction):
                out[c] += 1


def item_occurrences(flat, offsets, start, stop, vocabulary_size):
    """Per-item occurrence counts for transactions in ``[start, stop)``."""
    ids = flat[offsets[start]:offsets[stop]]
    return np.bincount(ids, minlength=vocabulary_size).astype(np.int64)
