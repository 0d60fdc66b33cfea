"""Binary storage of distance arrays: a 64-bit length followed by 32-bit floats."""

from __future__ import annotations

import os
import struct
import sys
from array import array
from typing import Iterable

_LENGTH = struct.Struct("<Q")
_FLOAT_SIZE = 4


def distance_file_name(size: int) -> str:
    """Default name of the distance file for a list of the given size."""
    return f"./distance-file-{size}.bin"


def _float_array(values: Iterable[float]) -> array:
    data = array("f", values)
    if data.itemsize != _FLOAT_SIZE:
        raise RuntimeError("platform float is not 32 bits wide")
    return data


def write_distance_array(distances: Iterable[float], path: str | os.PathLike) -> None:
    """Write distances to path as a little-endian length and float32 values."""
    data = _float_array(distances)
    if sys.byteorder == "big":
        data.byteswap()
    with open(path, "wb") as handle:
        handle.write(_LENGTH.pack(len(data)))
        handle.write(data.tobytes())


def read_distance_array(path: str | os.PathLike) -> list[float]:
    """Read a distance array written by write_distance_array."""
    with open(path, "rb") as handle:
        header = handle.read(_LENGTH.size)
        if len(header) != _LENGTH.size:
            raise ValueError("Failed to read the length of the file.")
        (length,) = _LENGTH.unpack(header)
        payload = handle.read(length * _FLOAT_SIZE)
    if len(payload) != length * _FLOAT_SIZE:
        raise ValueError("Read fewer elements than advertised.")
    data = _float_array(())
    data.frombytes(payload)
    if sys.byteorder == "big":
        data.byteswap()
    return data.tolist()