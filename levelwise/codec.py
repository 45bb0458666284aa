"""Wire encoding shared by the distributed communicators.

Two payload shapes travel between workers: integer scalars, packed as
8-byte signed big-endian values, and byte buffers holding comma-joined
itemsets. Buffers are framed with a 4-byte big-endian length prefix so
several of them can be concatenated without delimiter ambiguity.
"""

import struct
from typing import Iterable, Iterator, List, Sequence, Tuple

SEPARATOR = ","

_INT = struct.Struct(">q")
_LENGTH = struct.Struct(">I")


def encode_itemset(items: Sequence[str]) -> bytes:
    """Join ``items`` with commas and encode them as UTF-8.

    Raises
    ------
    ValueError
        If an item contains the separator.
    """
    for item in items:
        if SEPARATOR in item:
            raise ValueError(f"Item {item!r} contains the separator {SEPARATOR!r}")
    return SEPARATOR.join(items).encode("utf-8")


def decode_itemset(data: bytes) -> Tuple[str, ...]:
    if not data:
        return ()
    return tuple(data.decode("utf-8").split(SEPARATOR))


def pack_int(value: int) -> bytes:
    return _INT.pack(value)


def unpack_int(data: bytes) -> int:
    if len(data) != _INT.size:
        raise ValueError(f"Expected {_INT.size} bytes for an integer, got {len(data)}")
    return _INT.unpack(data)[0]


def frame(payload: bytes) -> bytes:
    """Prefix ``payload`` with its length."""
    return _LENGTH.pack(len(payload)) + payload


def frame_all(payloads: Iterable[bytes]) -> bytes:
    return b"".join(frame(payload) for payload in payloads)


def iter_frames(data: bytes) -> Iterator[bytes]:
    """Yield the payloads of a buffer built by :func:`frame_all`."""
    view = memoryview(data)
    offset = 0
    while offset < len(view):
        if offset + _LENGTH.size > len(view):
            raise ValueError("Truncated length prefix")
        (length,) = _LENGTH.unpack_from(view, offset)
        offset += _LENGTH.size
        if offset + length > len(view):
            raise ValueError(f"Frame of {length} bytes overruns the buffer")
        yield bytes(view[offset:offset + length])
        offset += length


def unframe_all(data: bytes) -> List[bytes]:
    return list(iter_frames(data))
