from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import numpy as np

from levelwise import kernels

Itemset = Tuple[str, ...]


class TransactionStore:
    """In-memory transaction database, or one worker's partition of it.

    Transactions are kept both as ascending tuples of item strings and in a
    CSR integer encoding used by the counting kernels. Item ids are assigned
    in sorted item order, so an ascending transaction maps to an ascending
    id array and the sorted-merge subset test holds on either form.

    Parameters
    ----------
    transactions : Sequence[tuple[str, ...]]
        Ascending, duplicate-free transactions.
    """

    def __init__(self, transactions: Sequence[Itemset]) -> None:
        self.transactions: List[Itemset] = [tuple(t) for t in transactions]
        self.vocabulary: List[str] = sorted({item for t in self.transactions for item in t})
        self.ids: Dict[str, int] = {item: i for i, item in enumerate(self.vocabulary)}

        lengths = np.fromiter((len(t) for t in self.transactions), dtype=np.int64,
                              count=len(self.transactions))
        self.offsets = np.zeros(len(self.transactions) + 1, dtype=np.int64)
        np.cumsum(lengths, out=self.offsets[1:])
        self.flat = np.fromiter((self.ids[item] for t in self.transactions for item in t),
                                dtype=np.int64, count=int(self.offsets[-1]))

    def __len__(self) -> int:
        return len(self.transactions)

    def __getitem__(self, index):
        return self.transactions[index]

    def count_items(self, start: int = 0, stop: int = None) -> np.ndarray:
        """Occurrence count of every vocabulary item over ``[start, stop)``."""
        stop = len(self) if stop is None else stop
        return kernels.item_occurrences(self.flat, self.offsets, start, stop, len(self.vocabulary))

    def item_counts(self) -> Dict[str, int]:
        return dict(zip(self.vocabulary, self.count_items().tolist()))

    def encode(self, itemsets: Sequence[Itemset]) -> Tuple[np.ndarray, np.ndarray]:
        """Translate itemsets to a ``(m, k)`` id matrix.

        Itemsets holding an item this store has never seen cannot be
        contained in any local transaction and are left out. The second
        return value gives the position in ``itemsets`` of every matrix row.
        """
        width = len(itemsets[0]) if itemsets else 0
        rows = []
        positions = []
        for position, itemset in enumerate(itemsets):
            try:
                rows.append([self.ids[item] for item in itemset])
            except KeyError:
                continue
            positions.append(position)
        matrix = np.array(rows, dtype=np.int64).reshape(len(rows), width)
        return matrix, np.array(positions, dtype=np.int64)

    def count_support(self, matrix: np.ndarray, start: int = 0, stop: int = None) -> np.ndarray:
        """Support of every row of ``matrix`` over transactions ``[start, stop)``.

        The result is a fresh vector owned by the caller.
        """
        stop = len(self) if stop is None else stop
        out = np.zeros(matrix.shape[0], dtype=np.int64)
        if matrix.shape[0] and stop > start:
            kernels.count_support(matrix, self.flat, self.offsets, start, stop, out)
        return out
