import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np
import pytest

pytest.importorskip("mpi4py.MPI")

from levelwise.apriori import Apriori
from levelwise.distributed import DistributedStrategy
from levelwise.mpi_comm import MPICommunicator


def test_single_rank_collectives():
    comm = MPICommunicator()
    if comm.size != 1:
        pytest.skip("run without mpiexec")
    assert comm.bcast_int(9) == 9
    assert comm.allgather_bytes(b"a,b") == [b"a,b"]
    assert comm.allreduce_sum(np.array([1, 2, 3])).tolist() == [1, 2, 3]
    comm.barrier()


def test_apriori_over_mpi():
    comm = MPICommunicator()
    if comm.size != 1:
        pytest.skip("run without mpiexec")
    alg = Apriori([["a", "b"], ["a", "b", "c"], ["a"], ["b", "c"]], 2,
                  strategy=DistributedStrategy(communicator=comm))
    assert alg.mine().patterns == {("a",): 3, ("b",): 3, ("c",): 2, ("a", "b"): 2, ("b", "c"): 2}
