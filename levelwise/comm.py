"""Collective and point-to-point transport for the distributed strategy.

Rank 0 is the coordinator. :class:`PipeCommunicator` connects every other
rank to the coordinator with a ``multiprocessing`` pipe (a star) and builds
the collectives out of gather-to-root followed by a send back to everyone.
No rank returns from a collective before every rank has entered it.
"""

from __future__ import annotations

import logging
import multiprocessing as mp
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from levelwise import codec
from levelwise.errors import CommunicationError

logger = logging.getLogger(__name__)

COORDINATOR = 0


class Communicator(ABC):
    """Operations the distributed strategy needs from its transport."""

    rank: int
    size: int

    @property
    def is_coordinator(self) -> bool:
        return self.rank == COORDINATOR

    @abstractmethod
    def send_int(self, value: int, dest: int) -> None:
        pass

    @abstractmethod
    def recv_int(self, source: int) -> int:
        pass

    @abstractmethod
    def send_bytes(self, payload: bytes, dest: int) -> None:
        pass

    @abstractmethod
    def recv_bytes(self, source: int) -> bytes:
        pass

    @abstractmethod
    def bcast_int(self, value: int = 0) -> int:
        """Return the coordinator's ``value`` on every rank."""

    @abstractmethod
    def allgather_bytes(self, payload: bytes) -> List[bytes]:
        """Return every rank's ``payload``, indexed by rank."""

    @abstractmethod
    def allreduce_sum(self, vector: np.ndarray) -> np.ndarray:
        """Return the element-wise integer sum of ``vector`` over all ranks."""

    @abstractmethod
    def barrier(self) -> None:
        pass

    def close(self) -> None:
        pass


class PipeCommunicator(Communicator):
    """Star-shaped communicator over ``multiprocessing`` connections.

    Parameters
    ----------
    rank : int
        Rank of this process.
    size : int
        Number of ranks.
    connections : dict[int, Connection]
        On the coordinator, one connection per other rank. On any other
        rank, a single connection keyed by the coordinator's rank.
    """

    def __init__(self, rank: int, size: int, connections: Dict[int, object]) -> None:
        self.rank = rank
        self.size = size
        self.connections = connections

    def _peers(self) -> range:
        return range(1, self.size)

    def _connection(self, peer: int):
        try:
            return self.connections[peer]
        except KeyError:
            raise CommunicationError(f"Rank {self.rank} has no channel to rank {peer}") from None

    def send_bytes(self, payload: bytes, dest: int) -> None:
        try:
            self._connection(dest).send_bytes(payload)
        except (OSError, ValueError) as exc:
            raise CommunicationError(f"Rank {self.rank} failed sending to rank {dest}: {exc}") from exc

    def recv_bytes(self, source: int) -> bytes:
        try:
            return self._connection(source).recv_bytes()
        except (EOFError, OSError) as exc:
            raise CommunicationError(f"Rank {self.rank} lost rank {source}: {exc!r}") from exc

    def send_int(self, value: int, dest: int) -> None:
        self.send_bytes(codec.pack_int(value), dest)

    def recv_int(self, source: int) -> int:
        try:
            return codec.unpack_int(self.recv_bytes(source))
        except ValueError as exc:
            raise CommunicationError(str(exc)) from exc

    def bcast_int(self, value: int = 0) -> int:
        if self.is_coordinator:
            for peer in self._peers():
                self.send_int(value, peer)
            return value
        return self.recv_int(COORDINATOR)

    def _gather_then_scatter(self, payload: bytes, combine: Callable[[List[bytes]], bytes]) -> bytes:
        if self.is_coordinator:
            parts = [payload] + [self.recv_bytes(peer) for peer in self._peers()]
            result = combine(parts)
            for peer in self._peers():
                self.send_bytes(result, peer)
            return result
        self.send_bytes(payload, COORDINATOR)
        return self.recv_bytes(COORDINATOR)

    def allgather_bytes(self, payload: bytes) -> List[bytes]:
        blob = self._gather_then_scatter(codec.frame(payload), lambda parts: b"".join(parts))
        try:
            gathered = codec.unframe_all(blob)
        except ValueError as exc:
            raise CommunicationError(str(exc)) from exc
        if len(gathered) != self.size:
            raise CommunicationError(f"Gathered {len(gathered)} buffers from {self.size} ranks")
        return gathered

    def allreduce_sum(self, vector: np.ndarray) -> np.ndarray:
        local = np.ascontiguousarray(vector, dtype=np.int64)

        def combine(parts: List[bytes]) -> bytes:
            total = np.zeros(local.shape[0], dtype=np.int64)
            for rank, part in enumerate(parts):
                values = np.frombuffer(part, dtype=np.int64)
                if values.shape != total.shape:
                    raise CommunicationError(
                        f"Rank {rank} contributed {values.shape[0]} counts, expected {total.shape[0]}"
                    )
                total += values
            return total.tobytes()

        return np.frombuffer(self._gather_then_scatter(local.tobytes(), combine), dtype=np.int64).copy()

    def barrier(self) -> None:
        self._gather_then_scatter(b"", lambda parts: b"")

    def close(self) -> None:
        for connection in self.connections.values():
            connection.close()


def launch_workers(target: Callable, size: int, args: Sequence = ()) -> Tuple[PipeCommunicator, List]:
    """Start ranks ``1..size-1`` as spawned processes running ``target``.

    ``target`` is called as ``target(rank, size, connection, *args)`` and
    must be importable from a module. Returns the coordinator's
    communicator and the started processes.
    """
    ctx = mp.get_context("spawn")
    connections = {}
    processes = []
    for rank in range(1, size):
        parent_end, child_end = ctx.Pipe()
        process = ctx.Process(target=target, args=(rank, size, child_end, *args),
                              name=f"levelwise-rank-{rank}", daemon=True)
        process.start()
        child_end.close()
        connections[rank] = parent_end
        processes.append(process)
    logger.info("Started %d worker processes", len(processes))
    return PipeCommunicator(COORDINATOR, size, connections), processes
