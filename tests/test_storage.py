import struct

import pytest

from listadversary.storage import distance_file_name, read_distance_array, write_distance_array


def test_distance_file_name():
    assert distance_file_name(4) == "./distance-file-4.bin"


def test_round_trip(tmp_path):
    path = tmp_path / "d.bin"
    values = [0.5, -1.25, 3.0, float("inf")]
    write_distance_array(values, path)
    assert read_distance_array(path) == values


def test_layout(tmp_path):
    path = tmp_path / "d.bin"
    write_distance_array([1.0, 2.0, 4.0], path)
    raw = path.read_bytes()
    assert len(raw) == 8 + 3 * 4
    assert raw[:8] == struct.pack("<Q", 3)
    assert raw[8:12] == struct.pack("<f", 1.0)


def test_empty_round_trip(tmp_path):
    path = tmp_path / "d.bin"
    write_distance_array([], path)
    assert read_distance_array(path) == []


def test_missing_length(tmp_path):
    path = tmp_path / "d.bin"
    path.write_bytes(b"\x01\x02")
    with pytest.raises(ValueError, match="length"):
        read_distance_array(path)


def test_truncated_payload(tmp_path):
    path = tmp_path / "d.bin"
    path.write_bytes(struct.pack("<Q", 5) + struct.pack("<f", 1.0))
    with pytest.raises(ValueError, match="fewer"):
        read_distance_array(path)