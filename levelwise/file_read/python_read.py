import logging
import sys
import time
from typing import Iterable, List, Tuple

from levelwise.file_read.abstract import AbstractRead

logger = logging.getLogger(__name__)

SENTINEL = "-1"


def normalize_transaction(fields: Iterable[str]) -> Tuple[str, ...]:
    """Trim the fields of one transaction and return its sorted item set.

    Empty fields and the trailing ``-1`` sentinel are dropped, and an item
    repeated within a transaction is kept once.
    """
    items = set()
    for field in fields:
        item = field.strip(" \t\r\n")
        if item and item != SENTINEL:
            items.add(item)
    return tuple(sorted(items))


class PythonRead(AbstractRead):
    def read(self) -> List[Tuple[str, ...]]:
        start = time.time()

        lines = self.read_lines()

        transactions = []
        self.skipped = 0
        for lineno, raw in enumerate(lines, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError:
                self.skipped += 1
                logger.debug("Skipping line %d of %s: not valid UTF-8", lineno, self.file)
                continue
            transaction = normalize_transaction(line.split(self.delimiter))
            if not transaction:
                self.skipped += 1
                logger.debug("Skipping line %d of %s: no items", lineno, self.file)
                continue
            transactions.append(transaction)

        self.runtime = time.time() - start

        self.custom_memory["cpu"] = sum(sys.getsizeof(row) for row in transactions) + sys.getsizeof(transactions)

        logger.info("Loaded %d transactions from %s", len(transactions), self.file)
        return transactions
