import math

import pytest

from listadversary.graph import AdversaryGraph, iterate_memory_and_permutation
from listadversary.memory import BitfieldMemory


def mtf_step(perm, memory, item):
    pos = perm.index(item)
    new = (item,) + tuple(x for x in perm if x != item)
    return new, memory, pos + 1


@pytest.fixture
def graph():
    return AdversaryGraph(3, mtf_step, 2.0)


def test_iteration_covers_all_states():
    states = list(iterate_memory_and_permutation(3))
    assert len(states) == math.factorial(3) * 8
    assert states[0][0] == (0, 1, 2) and states[0][1].data == 0
    assert len({(p, m.data) for p, m in states}) == len(states)


def test_vertex_ids_sequential(graph):
    assert [v.id for v in graph.vertices()] == list(range(len(graph)))
    for v in graph.vertices():
        assert graph.get_vert(v.perm, v.memory) is v


def test_edge_counts(graph):
    assert all(len(v.edges) == 3 + 2 for v in graph.vertices())
    assert graph.edgecounter == len(graph) * 5


def test_presentation_edge(graph):
    start = graph.vertex(0)
    edge = start.edges[2]
    assert edge.presented_item == 2
    assert edge.target == graph.vertex_id((2, 0, 1), BitfieldMemory(3))
    assert edge.opt_cost == 3


def test_translation_edge(graph):
    v = graph.get_vert((0, 1, 2), BitfieldMemory(3, 1))
    edge = v.edges[3]
    assert edge.opt_swap == 0
    assert edge.alg_cost == 0 and edge.opt_cost == 1
    assert edge.target == graph.vertex_id((1, 0, 2), BitfieldMemory(3, 2))
    assert graph.edge_weight(edge) == 2.0


def test_describe_formats(graph):
    start = graph.vertex(0)
    assert start.describe() == '0 [label="0,(0,1,2)"];'
    swap_edge = start.edges[3]
    assert swap_edge.describe() == f'0 -> {swap_edge.target} [label="swap 0,1"];'
    assert "req: 0, a_cost: 1.000000, o_cost: 1.000000" in start.edges[0].describe()


def test_position(graph):
    v = graph.get_vert((2, 0, 1), BitfieldMemory(3))
    assert v.position(0) == 1
    assert v.position(7) == 0


def test_costs_along_sequence(graph):
    start = graph.vertex(0)
    edge = start.edges[2]
    seq = [0, edge.target]
    assert graph.total_alg_cost(seq) == edge.alg_cost
    assert graph.total_opt_cost(seq) == edge.opt_cost
    assert "Vertex 0/2:" in graph.describe_sequence(seq)


def test_missing_edge(graph):
    target = graph.get_vert((2, 1, 0), BitfieldMemory(3, 5))
    assert graph.locate_edge(graph.vertex(0), target) is None
    with pytest.raises(ValueError):
        graph.total_alg_cost([0, target.id])


def test_bad_vertex_id(graph):
    with pytest.raises(IndexError):
        graph.vertex(len(graph))


def test_reachability(graph):
    count = graph.dfs_reachability()
    assert count == math.factorial(3)
    assert all(v.reachable == (v.memory.data == 0) for v in graph.vertices())


def test_describe_lists_every_vertex(graph):
    text = graph.describe()
    assert text.count("[label=") == len(graph) + graph.edgecounter