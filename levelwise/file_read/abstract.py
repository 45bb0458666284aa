from abc import ABC, abstractmethod
from typing import List, Tuple
import os

import psutil

from levelwise.errors import LoadError


def bytes_to_mb(bytes):
    return bytes / 1024 / 1024


class AbstractRead(ABC):
    """Base class of the transaction file readers.

    :param file: path of the transaction file.
    :param delimiter: item separator within a line.
    """

    def __init__(self, file, delimiter=','):
        self.file = file
        self.delimiter = delimiter
        self.custom_memory = {}
        self.runtime = None
        self.skipped = 0

    def read_lines(self) -> List[bytes]:
        """
        Returns the undecoded lines of the file, raising LoadError if it cannot be read.

        Decoding is left to the reader so that one bad line does not fail the file.
        """
        try:
            with open(self.file, 'rb') as f:
                return f.readlines()
        except OSError as exc:
            raise LoadError(f"Cannot open file {self.file}: {exc}") from exc

    @abstractmethod
    def read(self) -> List[Tuple[str, ...]]:
        """
        Returns the sorted, duplicate-free transactions of the file.
        """
        pass

    def get_runtime(self):
        return self.runtime

    def get_skipped(self):
        """
        Returns the number of lines skipped because they held no items.
        """
        return self.skipped

    def get_memory(self):
        """
        Returns the current memory usage of the process in bytes.
        """
        return psutil.Process(os.getpid()).memory_info().rss

    def get_custom_memory(self):
        return self.custom_memory
