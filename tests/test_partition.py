import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from levelwise.errors import ConfigurationError
from levelwise.partition import block_range, block_ranges


def test_block_ranges_follow_divmod_layout():
    assert block_ranges(10, 3) == [(0, 4), (4, 7), (7, 10)]
    assert block_range(10, 3, 2) == (7, 10)


@pytest.mark.parametrize("total", [0, 1, 2, 7, 16, 29])
@pytest.mark.parametrize("parts", [1, 2, 3, 5, 8])
def test_blocks_are_disjoint_and_exhaustive(total, parts):
    ranges = block_ranges(total, parts)
    covered = [i for start, stop in ranges for i in range(start, stop)]
    assert covered == list(range(total))
    sizes = [stop - start for start, stop in ranges]
    assert max(sizes) - min(sizes) <= 1
    assert sizes == sorted(sizes, reverse=True)


def test_more_parts_than_elements_leaves_trailing_parts_empty():
    assert block_ranges(2, 4) == [(0, 1), (1, 2), (2, 2), (2, 2)]


def test_invalid_part_counts():
    with pytest.raises(ConfigurationError):
        block_ranges(5, 0)
    with pytest.raises(ConfigurationError):
        block_ranges(0, -2)
    with pytest.raises(ConfigurationError):
        block_range(5, 0, 0)
    with pytest.raises(IndexError):
        block_range(5, 2, 2)
