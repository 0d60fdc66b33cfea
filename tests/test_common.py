import math

import pytest

from listadversary.common import (
    DataFiles,
    canonical_index,
    canonical_ordering,
    data_files,
    diameter_bound,
    edge_weight,
    factorials,
    format_array,
    max_memory_pairs,
    triple_contains,
)


def test_data_files_graph_binary_name():
    files = data_files(4, 3.0)
    assert isinstance(files, DataFiles)
    assert files.graph_binary == "wfs-graph-4-ratio-3.000000.bin"


def test_data_files_embed_size():
    files = data_files(5, 2.5)
    assert files.workfunctions_log.startswith("wfs-5")
    assert "ratio-2.500000" in files.reachable_vertices
    assert files.last_three.endswith("-5.bin")


def test_edge_weight_relation():
    for opt, alg, ratio in [(1.0, 2.0, 3.0), (4.0, 7.0, 2.5), (0.0, 1.0, 1.0)]:
        assert edge_weight(opt, alg, ratio) + alg == pytest.approx(edge_weight(opt, 0.0, ratio))
        assert edge_weight(0.0, alg, ratio) == pytest.approx(-alg)


def test_canonical_ordering_is_consecutive_and_lexicographic():
    order = canonical_ordering(5)
    keys = sorted(order)
    assert [order[k] for k in keys] == list(range(len(keys)))
    assert all(i < j for i, j in keys)
    assert len(order) == math.comb(5, 2)


def test_canonical_index_rejects_unsorted():
    with pytest.raises(ValueError):
        canonical_index(4, 3, 1)


def test_max_memory_pairs_matches_pair_count():
    for size in range(2, 7):
        assert max_memory_pairs(size) + 1 == 2 ** len(canonical_ordering(size))


def test_max_memory_pairs_small_size():
    with pytest.raises(ValueError):
        max_memory_pairs(1)


def test_factorials_recurrence():
    facts = factorials(8)
    assert len(facts) == 9
    assert facts[0] == facts[1]
    for k in range(1, 9):
        assert facts[k] == k * facts[k - 1]


def test_factorials_negative():
    with pytest.raises(ValueError):
        factorials(-1)


def test_diameter_bound():
    assert diameter_bound(4) == 6
    for n in range(2, 8):
        assert diameter_bound(n) == len(canonical_ordering(n))


def test_triple_contains():
    assert triple_contains((2, -1, 0), 0)
    assert not triple_contains((2, -1, 0), 1)
    assert triple_contains([-1, -1, -1], -1)


def test_format_array():
    assert format_array([1, 2, 3]) == "[1,2,3,]"
    assert format_array([]) == "[]"