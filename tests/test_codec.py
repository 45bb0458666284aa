import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from levelwise import codec


def test_itemset_encoding_is_comma_joined():
    assert codec.encode_itemset(("bread", "milk")) == b"bread,milk"
    assert codec.decode_itemset(b"bread,milk") == ("bread", "milk")
    assert codec.encode_itemset(()) == b""
    assert codec.decode_itemset(b"") == ()


def test_items_with_commas_are_rejected():
    with pytest.raises(ValueError):
        codec.encode_itemset(("a,b",))


def test_integers_are_fixed_width():
    assert len(codec.pack_int(7)) == 8
    assert codec.unpack_int(codec.pack_int(-12345678901)) == -12345678901
    with pytest.raises(ValueError):
        codec.unpack_int(b"\x00\x01")


def test_frames_split_variable_length_payloads():
    payloads = [b"a,b", b"", "café".encode("utf-8"), b"x" * 300]
    blob = codec.frame_all(payloads)
    assert blob[:4] == b"\x00\x00\x00\x03"
    assert codec.unframe_all(blob) == payloads


def test_truncated_frames_are_detected():
    blob = codec.frame(b"abcdef")
    with pytest.raises(ValueError):
        codec.unframe_all(blob[:-1])
    with pytest.raises(ValueError):
        codec.unframe_all(blob + b"\x00\x00")
