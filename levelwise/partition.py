from typing import List, Tuple

from levelwise.errors import ConfigurationError


def _check_parts(parts: int) -> None:
    if parts <= 0:
        raise ConfigurationError(f"Number of parts must be positive, got {parts}")


def block_range(total: int, parts: int, index: int) -> Tuple[int, int]:
    """Return the ``[start, stop)`` range owned by part ``index``.

    Every part gets ``total // parts`` elements and the first
    ``total % parts`` parts get one more, so the ranges are contiguous,
    disjoint and cover ``range(total)`` exactly.
    """
    _check_parts(parts)
    if not 0 <= index < parts:
        raise IndexError(f"Part {index} out of range for {parts} parts")
    if total < 0:
        raise ValueError(f"Total must be non-negative, got {total}")
    base, remainder = divmod(total, parts)
    start = index * base + min(index, remainder)
    count = base + (1 if index < remainder else 0)
    return start, start + count


def block_ranges(total: int, parts: int) -> List[Tuple[int, int]]:
    _check_parts(parts)
    return [block_range(total, parts, index) for index in range(parts)]
