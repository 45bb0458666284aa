"""Distributed strategy: one process per partition, collective aggregation.

The coordinator (rank 0) loads the database and sends each other rank its
contiguous block. From there every rank runs the same level-wise loop on
its own block, and the counts of each level are summed with an all-reduce.
Since every rank sees the same global counts, they all build the same
candidates for the next level and stop at the same level.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from levelwise import codec
from levelwise.comm import COORDINATOR, Communicator, PipeCommunicator, launch_workers
from levelwise.config import resolve_workers
from levelwise.errors import CommunicationError, LoadError
from levelwise.levels import mine_levels
from levelwise.partition import block_range
from levelwise.store import Itemset, TransactionStore
from levelwise.strategies import CountingStrategy

logger = logging.getLogger(__name__)


def distribute_partitions(comm: Communicator, payloads: Sequence[bytes]) -> List[bytes]:
    """Send each non-coordinator rank its block of encoded transactions.

    Each rank first receives its block's transaction count and then one
    buffer holding the length-prefixed transactions. The coordinator's own
    block is returned.
    """
    total = len(payloads)
    for dest in range(1, comm.size):
        start, stop = block_range(total, comm.size, dest)
        comm.send_int(stop - start, dest)
        comm.send_bytes(codec.frame_all(payloads[start:stop]), dest)
    start, stop = block_range(total, comm.size, COORDINATOR)
    return list(payloads[start:stop])


def receive_partition(comm: Communicator) -> List[Itemset]:
    count = comm.recv_int(COORDINATOR)
    try:
        local = [codec.decode_itemset(payload) for payload in codec.iter_frames(comm.recv_bytes(COORDINATOR))]
    except ValueError as exc:
        raise CommunicationError(f"Rank {comm.rank} received a malformed partition: {exc}") from exc
    if len(local) != count:
        raise CommunicationError(f"Rank {comm.rank} expected {count} transactions, got {len(local)}")
    return local


class DistributedStrategy(CountingStrategy):
    """Counting over disjoint partitions held by separate processes.

    Parameters
    ----------
    workers : int, optional
        Number of processes, the caller included. Defaults to
        ``os.cpu_count()``. Ignored when ``communicator`` is given.
    communicator : Communicator, optional
        An already connected transport, e.g. an MPI communicator or the
        worker side of a pipe. When omitted, ``workers - 1`` processes are
        spawned on entry and joined on exit.
    """

    log_name = "distributed"

    def __init__(self, workers: Optional[int] = None, communicator: Optional[Communicator] = None) -> None:
        self.comm = communicator
        self.workers = communicator.size if communicator is not None else resolve_workers(workers)
        self._processes = []
        self._spawned = False

    @property
    def label(self) -> str:
        return f"Distributed_{self.workers}_processes"

    @property
    def is_coordinator(self) -> bool:
        return self.comm is None or self.comm.is_coordinator

    def __enter__(self):
        if self.comm is None:
            self.comm, self._processes = launch_workers(run_worker, self.workers)
            self._spawned = True
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self._spawned:
            return False
        if exc_type is not None:
            for process in self._processes:
                if process.is_alive():
                    process.terminate()
        for process in self._processes:
            process.join()
        self.comm.close()
        self.comm = None
        self._processes = []
        self._spawned = False
        return False

    def abort(self) -> None:
        if self.comm is not None and self.comm.is_coordinator:
            self.comm.bcast_int(0)

    def prepare(self, transactions, min_support):
        if self.comm.is_coordinator:
            try:
                payloads = [codec.encode_itemset(t) for t in transactions or ()]
            except ValueError as exc:
                self.abort()
                raise LoadError(f"Transactions cannot be distributed: {exc}") from exc
            total = self.comm.bcast_int(len(payloads))
            if total == 0:
                return None, min_support
            min_support = self.comm.bcast_int(min_support)
            local = [codec.decode_itemset(payload) for payload in distribute_partitions(self.comm, payloads)]
        else:
            total = self.comm.bcast_int()
            if total == 0:
                return None, None
            min_support = self.comm.bcast_int()
            local = receive_partition(self.comm)
        logger.info("Rank %d holds %d of %d transactions", self.comm.rank, len(local), total)
        self.comm.barrier()
        return TransactionStore(local), min_support

    def finish(self) -> None:
        self.comm.barrier()

    def count_items(self, store):
        local = store.item_counts()
        gathered = self.comm.allgather_bytes(codec.encode_itemset(store.vocabulary))
        vocabulary = sorted({item for payload in gathered for item in codec.decode_itemset(payload)})
        vector = np.array([local.get(item, 0) for item in vocabulary], dtype=np.int64)
        totals = self.comm.allreduce_sum(vector)
        return dict(zip(vocabulary, totals.tolist()))

    def count_support(self, store, candidates):
        return self.comm.allreduce_sum(self._local_support(store, candidates))


def run_worker(rank: int, size: int, connection) -> None:
    """Entry point of a spawned rank: receive a partition and mine it."""
    strategy = DistributedStrategy(communicator=PipeCommunicator(rank, size, {COORDINATOR: connection}))
    try:
        with strategy:
            store, min_support = strategy.prepare(None, None)
            if store is not None:
                mine_levels(store, strategy, min_support)
    finally:
        connection.close()
