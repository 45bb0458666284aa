"""MPI transport for runs launched with ``mpiexec -n P levelwise ... --strategy mpi``.

Every rank runs the same command line; rank 0 reads the file and
distributes it just as with the pipe transport.
"""

from typing import List

import numpy as np
from mpi4py import MPI

from levelwise import codec
from levelwise.comm import COORDINATOR, Communicator

_COUNT_TAG = 0
_DATA_TAG = 2


class MPICommunicator(Communicator):
    def __init__(self, comm=None) -> None:
        self.comm = comm if comm is not None else MPI.COMM_WORLD
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()

    def send_int(self, value: int, dest: int) -> None:
        self.comm.send(int(value), dest=dest, tag=_COUNT_TAG)

    def recv_int(self, source: int) -> int:
        return self.comm.recv(source=source, tag=_COUNT_TAG)

    def send_bytes(self, payload: bytes, dest: int) -> None:
        self.comm.send(payload, dest=dest, tag=_DATA_TAG)

    def recv_bytes(self, source: int) -> bytes:
        return self.comm.recv(source=source, tag=_DATA_TAG)

    def bcast_int(self, value: int = 0) -> int:
        return self.comm.bcast(int(value) if self.is_coordinator else None, root=COORDINATOR)

    def allgather_bytes(self, payload: bytes) -> List[bytes]:
        blob = b"".join(self.comm.allgather(codec.frame(payload)))
        return codec.unframe_all(blob)

    def allreduce_sum(self, vector: np.ndarray) -> np.ndarray:
        local = np.ascontiguousarray(vector, dtype=np.int64)
        total = np.zeros_like(local)
        self.comm.Allreduce(local, total, op=MPI.SUM)
        return total

    def barrier(self) -> None:
        self.comm.Barrier()
