import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from levelwise.errors import LoadError
from levelwise.file_read.python_read import PythonRead, normalize_transaction


def test_lines_are_trimmed_sorted_and_deduplicated(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("b, a ,-1\n\n   \nc,c,a\r\n , ,\n")
    reader = PythonRead(str(path), ",")
    assert reader.read() == [("a", "b"), ("a", "c")]
    assert reader.get_skipped() == 3
    assert reader.get_runtime() is not None
    assert reader.get_custom_memory()["cpu"] > 0
    assert reader.get_memory() > 0


def test_other_separators(tmp_path):
    path = tmp_path / "data.tsv"
    path.write_text("x\ty\n")
    assert PythonRead(str(path), "\t").read() == [("x", "y")]


def test_missing_file_is_a_load_error(tmp_path):
    with pytest.raises(LoadError) as excinfo:
        PythonRead(str(tmp_path / "missing.txt")).read()
    assert isinstance(excinfo.value, OSError)


def test_normalize_transaction():
    assert normalize_transaction([" b", "a", "b ", "-1", ""]) == ("a", "b")
    assert normalize_transaction(["-1"]) == ()


def test_undecodable_lines_are_skipped(tmp_path):
    path = tmp_path / "data.txt"
    path.write_bytes(b"a,b\na,b,c\n\xff\xfe,z\na\nb,c\n")
    reader = PythonRead(str(path), ",")
    assert reader.read() == [("a", "b"), ("a", "b", "c"), ("a",), ("b", "c")]
    assert reader.get_skipped() == 1
