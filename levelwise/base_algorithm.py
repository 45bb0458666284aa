import os
from abc import ABC, abstractmethod

import psutil


class BaseAlgorithm(ABC):
    """Base class for mining algorithms.

    Subclasses set ``runtime`` (seconds) during :py:meth:`mine` and call
    :py:meth:`recordMemory` once it finishes, which fills ``memoryRSS``
    and ``memoryUSS`` (bytes).
    """

    def __init__(self) -> None:
        self.runtime = None
        self.memoryRSS = None
        self.memoryUSS = None

    @abstractmethod
    def mine(self):
        """Run the algorithm."""
        pass

    def recordMemory(self) -> None:
        """Sample the memory use of the current process."""
        proc = psutil.Process(os.getpid())
        self.memoryRSS = proc.memory_info().rss
        self.memoryUSS = proc.memory_full_info().uss

    def getRuntime(self):
        """Return the runtime of the last execution."""
        return self.runtime

    def getMemoryRSS(self):
        """Return the resident set size memory usage."""
        return self.memoryRSS

    def getMemoryUSS(self):
        """Return the unique set size memory usage."""
        return self.memoryUSS
