import struct

import pytest

from listadversary.common import MULTIPLIER
from listadversary.game_core import GameGraphCore, WorkfunctionSpace


def make_space(size=2, values=None):
    perm_count = 2 if size == 2 else 6
    if values is None:
        values = [tuple(range(perm_count)), tuple(reversed(range(perm_count)))]
    count = len(values)
    adjacency = [[(w + r) % count for r in range(size)] for w in range(count)]
    update_costs = [[r + 1 for r in range(size)] for _ in range(count)]
    return WorkfunctionSpace(size, values, adjacency, update_costs)


def test_sizes():
    g = GameGraphCore(make_space(3), 3.0)
    assert g.advsize == 2 * 6
    assert g.algsize == g.advsize * 3


def test_encode_decode_round_trip():
    g = GameGraphCore(make_space(3), 3.0)
    for index in range(g.advsize):
        assert g.encode_adv(*g.decode_adv(index)) == index
    for index in range(g.algsize):
        assert g.encode_alg(*g.decode_alg(index)) == index


def test_space_validation():
    with pytest.raises(ValueError):
        WorkfunctionSpace(2, [(0, 1, 2)], [[0, 0]], [[1, 1]])
    with pytest.raises(ValueError):
        WorkfunctionSpace(2, [(0, 1)], [[0, 5]], [[1, 1]])


def test_adv_cost_truncates():
    g = GameGraphCore(make_space(2), 2.5)
    assert g.adv_cost(0, 0) == 250


def test_alg_cost_properties():
    g = GameGraphCore(make_space(3), 3.0)
    assert g.alg_cost(0, 0, 0) == 0
    for i in range(6):
        for r in range(3):
            assert g.alg_cost(i, i, r) == MULTIPLIER * g.perms[i].position(r)
            for j in range(6):
                moving_ij = g.alg_cost(i, j, r) - g.alg_cost(i, i, r)
                moving_ji = g.alg_cost(j, i, r) - g.alg_cost(j, j, r)
                assert moving_ij == moving_ji


def test_graph_binary_round_trip(tmp_path):
    g = GameGraphCore(make_space(2), 3.0)
    g.adv_vertices = [i - 2 for i in range(g.advsize)]
    g.alg_vertices = [3 * i - 5 for i in range(g.algsize)]
    path = tmp_path / "graph.bin"
    g.write_graph_binary(path)
    data = path.read_bytes()
    assert data[:8] == struct.pack("<Q", g.advsize)
    loaded = GameGraphCore(make_space(2), 3.0, binary_loadfile=path)
    assert loaded.adv_vertices == g.adv_vertices
    assert loaded.alg_vertices == g.alg_vertices


def test_load_graph_binary_rejects_mismatch(tmp_path):
    small = GameGraphCore(make_space(2), 3.0)
    path = tmp_path / "graph.bin"
    small.write_graph_binary(path)
    big = GameGraphCore(make_space(3), 3.0)
    with pytest.raises(ValueError):
        big.load_graph_binary(path)


def test_load_graph_binary_truncated(tmp_path):
    g = GameGraphCore(make_space(2), 3.0)
    path = tmp_path / "graph.bin"
    g.write_graph_binary(path)
    path.write_bytes(path.read_bytes()[:-1])
    with pytest.raises(ValueError):
        g.load_graph_binary(path)


def test_last_three_round_trip(tmp_path):
    g = GameGraphCore(make_space(2), 3.0)
    g.init_last_three()
    assert all(triple == [-1, -1, -1] for triple in g.last_three_maximizers)
    g.last_three_maximizers[1] = [0, 1, -1]
    path = tmp_path / "last.bin"
    g.serialize_last_three(path)
    other = GameGraphCore(make_space(2), 3.0)
    other.deserialize_last_three(path)
    assert other.last_three_maximizers == g.last_three_maximizers


def test_last_three_size_mismatch(tmp_path):
    g = GameGraphCore(make_space(2), 3.0)
    g.init_last_three()
    path = tmp_path / "last.bin"
    g.serialize_last_three(path)
    with pytest.raises(ValueError):
        GameGraphCore(make_space(3), 3.0).deserialize_last_three(path)


def test_serialize_last_three_requires_init(tmp_path):
    g = GameGraphCore(make_space(2), 3.0)
    with pytest.raises(RuntimeError):
        g.serialize_last_three(tmp_path / "x.bin")


def test_min_potentials():
    g = GameGraphCore(make_space(2), 3.0)
    assert g.min_adv_potential() == 0
    g.adv_vertices[2] = -7
    g.adv_vertices[1] = 4
    assert g.min_adv_potential() == -7
    g.adv_vertices_reachable = [1, 3]
    assert g.reachable_min_adv_potential() == 0
    g.adv_vertices[3] = 9
    assert g.reachable_min_adv_potential() == 4
    g.reset_potentials()
    assert g.min_adv_potential() == 0


def test_wfa_cost_and_minimum():
    g = GameGraphCore(make_space(3), 3.0, wfa_adjacencies=True)
    for w in range(2):
        for i in range(6):
            assert g.wfa_cost(w, i, i) == g.space.values[w][i]
            costs = [g.wfa_cost(w, i, p) for p in range(6)]
            assert g.workfunction_algorithm_minimum(w, i) == min(costs)


def test_build_wfa_minima():
    g = GameGraphCore(make_space(3), 3.0, wfa_adjacencies=True)
    g.build_wfa_minima()
    for index in range(g.advsize):
        assert g.wfa_minimum_values[index] == g.workfunction_algorithm_minimum(*g.decode_adv(index))


def test_build_wfa_minima_requires_flag():
    g = GameGraphCore(make_space(2), 3.0)
    with pytest.raises(RuntimeError):
        g.build_wfa_minima()


def test_wfa_unique_minimizer():
    g = GameGraphCore(make_space(2, values=[(0, 5)]), 3.0, wfa_adjacencies=True)
    g.build_wfa_minima()
    assert g.wfa_unique_minimizer(0, 0) == (True, 0)
    tie = GameGraphCore(make_space(2, values=[(1, 0)]), 3.0, wfa_adjacencies=True)
    tie.build_wfa_minima()
    assert tie.wfa_unique_minimizer(0, 0) == (False, -1)


def test_describe():
    g = GameGraphCore(make_space(3), 3.0)
    index = g.encode_adv(1, 4)
    assert g.describe_adv(index).startswith("WF index 1, perm_index 4.\n")
    alg_index = g.encode_alg(1, 4, 2)
    assert g.describe_alg(alg_index).startswith("ALG vertex: index 1, perm_index 4, request 2.\n")